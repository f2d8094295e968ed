# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual login is handled by Supabase Auth client-side.
# These routes are for getting staff info after authentication.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, StaffRole, UserResponse
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current authenticated user's profile.

    Users without a staff profile get is_active=false and no role.
    """
    profile = SupabaseClient.fetch_profile(str(user.id)) or {}

    role = profile.get("role")
    return UserResponse(
        id=user.id,
        email=user.email,
        role=StaffRole(role) if role in StaffRole._value2member_map_ else None,
        full_name=profile.get("full_name"),
        is_active=bool(profile.get("is_active", False)),
    )
