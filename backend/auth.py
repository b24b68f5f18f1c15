"""
Authentication for the section library service.

Two kinds of caller:
- the library admin, who logs in with a password and gets a JWT session
- a shop, identified by its domain and authorized by having an access token
  in the credential store
"""

from __future__ import annotations

import hmac
from datetime import UTC, datetime, timedelta
from typing import Annotated

import jwt
from fastapi import Cookie, Depends, Header, HTTPException, Query, status

from backend import config
from backend.deps import get_credential_store
from backend.repos.credential_repo import CredentialStore, normalize_shop

ADMIN_SUBJECT = "admin"


def session_expiry() -> datetime:
    return datetime.now(UTC) + timedelta(hours=config.settings.JWT_EXPIRY_HOURS)


def create_jwt(subject: str = ADMIN_SUBJECT, expires_at: datetime | None = None) -> str:
    """
    Create a JWT for an admin session.

    Args:
        subject: Value for the sub claim
        expires_at: Expiry; defaults to JWT_EXPIRY_HOURS from now

    Returns:
        Signed JWT string
    """
    payload = {
        "sub": subject,
        "exp": expires_at or session_expiry(),
        "iat": datetime.now(UTC),
    }
    return jwt.encode(payload, config.settings.JWT_SECRET, algorithm=config.settings.JWT_ALGORITHM)


def decode_jwt(token: str) -> dict:
    """
    Decode and verify a JWT.

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        return jwt.decode(token, config.settings.JWT_SECRET, algorithms=[config.settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired. Please sign in again.",
        ) from e
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session token. Please sign in again.",
        ) from e


def verify_admin_password(password: str) -> bool:
    expected = config.settings.ADMIN_PASSWORD
    if not expected:
        return False
    return hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))


async def require_admin(
    session: Annotated[str | None, Cookie()] = None,
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """
    FastAPI dependency for admin-only routes.

    Accepts a Bearer token first, then the session cookie.

    Raises:
        HTTPException: If no valid admin session is present
    """
    token = None
    if authorization and authorization.startswith("Bearer "):
        token = authorization.removeprefix("Bearer ")
    elif session:
        token = session

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated. Please sign in.",
        )

    payload = decode_jwt(token)
    if payload.get("sub") != ADMIN_SUBJECT:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session token. Please sign in again.",
        )
    return ADMIN_SUBJECT


async def get_shop(
    shop: Annotated[str | None, Query()] = None,
    x_shopify_shop_domain: Annotated[str | None, Header()] = None,
    credentials: CredentialStore = Depends(get_credential_store),
) -> str:
    """
    FastAPI dependency resolving the calling shop.

    The shop comes from the shop query parameter or the X-Shopify-Shop-Domain
    header and must have an access token in the credential store.
    """
    domain = shop or x_shopify_shop_domain
    if not domain or not credentials.get(domain):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Store not authorized",
        )
    return normalize_shop(domain)
