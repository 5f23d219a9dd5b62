# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth and the admin gate.
#
# Usage:
#   from app.auth import require_admin, AdminCapability
#
#   @router.get("/protected")
#   async def protected(admin: AdminCapability = Depends(require_admin)):
#       return {"user_id": admin.user_id}
# =============================================================================

from app.auth.dependencies import (
    check_admin,
    get_current_user,
    require_admin,
)
from app.auth.models import AdminCapability, AuthUser, UserResponse

__all__ = [
    "check_admin",
    "get_current_user",
    "require_admin",
    "AdminCapability",
    "AuthUser",
    "UserResponse",
]
