# app/core/auth.py
import logging
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt, JWTError
from supabase import Client

from app.core.config import get_settings
from app.core.errors import GATEWAY_ERRORS
from app.dependencies import bearer_scheme, get_gateway, profile_repo
from app.schemas.session import SessionUser

logger = logging.getLogger(__name__)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (SUPABASE_JWT_ALG using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        HTTPException(503): if no JWT secret is configured.
        HTTPException(401): if token is invalid/expired.
    """
    settings = get_settings()
    if not settings.SUPABASE_JWT_SECRET:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication is not configured",
        )
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def _default_name_from_email(email: str) -> str:
    """
    Derive a default display name from email if the user has not
    completed their profile yet.
    """
    if "@" in email:
        return email.split("@", 1)[0] or "User"
    return email or "User"


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    client: Client | None = Depends(get_gateway),
) -> SessionUser | None:
    """
    Resolve the caller from a Supabase JWT.

    Flow:
      1. If no Authorization header => guest => return None.
      2. Decode JWT => extract 'sub' (auth user id) and 'email'.
      3. Re-read the profile through the gateway for name/phone/role.
         Nothing cached is trusted for the role.
      4. Missing profile (or no backend) => role 'user', name from email.

    Raises:
        HTTPException(401): if token is malformed or missing required claims.
    """
    if credentials is None:
        return None  # guest mode

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    email = payload.get("email") or ""

    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub",
        )

    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid sub in token",
        )

    profile = None
    if client is not None:
        try:
            profile = profile_repo.get_by_id(client, user_id)
        except GATEWAY_ERRORS as exc:
            logger.warning("Could not load profile for %s: %s", user_id, exc)

    profile = profile or {}
    return SessionUser(
        id=user_id,
        email=email or profile.get("email"),
        full_name=profile.get("full_name") or _default_name_from_email(email),
        phone=profile.get("phone"),
        role=profile.get("role"),
    )


def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    client: Client | None = Depends(get_gateway),
) -> SessionUser | None:
    """
    Like get_current_user, but an unverifiable token (or a missing JWT
    secret) makes the caller a guest instead of failing the request.
    For public, cosmetic endpoints only.
    """
    try:
        return get_current_user(credentials, client)
    except HTTPException as exc:
        logger.info("Treating caller as guest: %s", exc.detail)
        return None


def require_auth(user: SessionUser | None = Depends(get_current_user)) -> SessionUser:
    """
    Enforce authentication.

    Raises:
        HTTPException(401): if user is None.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def require_admin(user: SessionUser = Depends(require_auth)) -> SessionUser:
    """
    Enforce admin role (case-insensitive, read fresh from profiles).

    Raises:
        HTTPException(403): if role is not admin.
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
