# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class StaffRole(str, Enum):
    """Roles stored on the profiles row."""
    ADMIN = "admin"
    WRITER = "writer"


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    id: UUID
    email: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class StaffUser(AuthUser):
    """Authenticated user whose profile grants a staff role."""
    role: StaffRole
    full_name: Optional[str] = None


class UserResponse(BaseModel):
    """Profile info returned by /auth/me."""
    id: UUID
    email: Optional[str] = None
    role: Optional[StaffRole] = None
    full_name: Optional[str] = None
    is_active: bool = False
