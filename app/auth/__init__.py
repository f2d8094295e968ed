# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based staff authentication using Supabase Auth, plus role
# checks resolved from the profiles table.
#
# Usage:
#   from app.auth import get_current_staff, StaffUser
#
#   @router.patch("/protected")
#   async def protected(staff: StaffUser = Depends(get_current_staff)):
#       return {"user_id": staff.id}
# =============================================================================

from app.auth.dependencies import get_current_admin, get_current_staff, get_current_user
from app.auth.models import AuthUser, StaffRole, StaffUser, UserResponse

__all__ = [
    "get_current_admin",
    "get_current_staff",
    "get_current_user",
    "AuthUser",
    "StaffRole",
    "StaffUser",
    "UserResponse",
]
