# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for admin sign-in and session checks.
#
# Sign-in goes through Supabase Auth with the anon key; the returned access
# token is handed back only if it already carries the admin role. Every
# later request is re-verified by require_admin.
# =============================================================================

import logging
from fastapi import APIRouter, Depends, HTTPException, status

from app.auth.dependencies import check_admin, decode_access_token, get_current_user
from app.auth.models import AuthUser, LoginRequest, LoginResponse, UserResponse
from app.exceptions import AdminAccessDeniedError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest) -> LoginResponse:
    """
    Sign in with email and password.

    Returns:
        LoginResponse: Access token for an admin session

    Raises:
        401: If the credentials are wrong
        403: If the account is not an admin
    """
    client = SupabaseClient.create_auth_client()

    try:
        response = client.auth.sign_in_with_password(
            {"email": request.email, "password": request.password}
        )
    except Exception as e:
        logger.warning(f"Sign-in failed for {request.email}: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    session = response.session
    if session is None or not session.access_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    user = decode_access_token(session.access_token)
    capability = check_admin(user)

    logger.info(f"Admin signed in: {capability.user_id}")
    return LoginResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_at=session.expires_at,
        user_id=capability.user_id,
        email=capability.email,
        role=capability.role,
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current user and whether they currently hold admin capability.

    Raises:
        401: If not authenticated
    """
    try:
        capability = check_admin(user)
    except AdminAccessDeniedError:
        capability = None

    return UserResponse(
        id=user.id,
        email=user.email,
        role=user.role,
        is_admin=capability is not None,
        admin_valid_until=capability.valid_until if capability else None,
    )


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email,
        "role": user.role,
    }
