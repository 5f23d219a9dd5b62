# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import Optional


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database. `role` comes from app_metadata, which
    only the server (service key) can write.
    """
    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    class Config:
        frozen = True  # Make immutable


class AdminCapability(BaseModel):
    """
    Proof that the current request comes from a verified admin session.

    Obtained once per request from `require_admin` and passed to every
    admin operation; never built from client-supplied flags.
    """
    user_id: UUID
    email: Optional[str] = None
    role: str
    issued_at: datetime
    valid_until: datetime

    class Config:
        frozen = True


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Session returned to an admin after password sign-in."""
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_at: Optional[int] = None
    user_id: UUID
    email: Optional[str] = None
    role: str


class UserResponse(BaseModel):
    """Current user plus whether they hold the admin capability."""
    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None
    is_admin: bool = False
    admin_valid_until: Optional[datetime] = None
