"""Admin session routes: password login and logout."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response, status

from backend import config
from backend.auth import create_jwt, session_expiry, verify_admin_password
from backend.models.auth import AdminLoginRequest, AdminLoginResponse, LogoutResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login", status_code=200)
async def login_endpoint(req: AdminLoginRequest, response: Response) -> AdminLoginResponse:
    """
    Open an admin session.

    Returns the token and also sets it as an HTTP-only session cookie.
    """
    if not verify_admin_password(req.password):
        logger.warning("admin: rejected login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password.",
        )

    expires_at = session_expiry()
    token = create_jwt(expires_at=expires_at)

    response.set_cookie(
        key="session",
        value=token,
        httponly=True,
        secure=True,  # HTTPS only
        samesite="lax",
        max_age=config.settings.JWT_EXPIRY_HOURS * 3600,
        path="/",
    )
    return AdminLoginResponse(token=token, expires_at=expires_at)


@router.post("/logout", status_code=200)
async def logout_endpoint(response: Response) -> LogoutResponse:
    """Clear the session cookie."""
    response.set_cookie(
        key="session",
        value="",
        httponly=True,
        secure=True,
        samesite="lax",
        max_age=0,  # Expire immediately
        path="/",
    )
    return LogoutResponse()
