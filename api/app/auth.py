# auth.py

"""JWT authentication and principal resolution for FastAPI routes."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config import get_settings

from .db import get_session
from .domain import Forbidden, Principal, Role, Unauthorized
from .domain.visibility import require_staff
from .models import User

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

ph = PasswordHasher()

bearer_scheme = HTTPBearer(auto_error=False)


class Token(BaseModel):
    """JWT access token returned after authentication."""

    access_token: str
    token_type: str = "bearer"
    role: str


def hash_password(password: str) -> str:
    return ph.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a stored hash."""

    try:
        return ph.verify(hashed_password, plain_password)
    except (VerifyMismatchError, InvalidHashError):
        return False
    except VerificationError as exc:  # pragma: no cover - unexpected
        logger.error("argon2 verification error: %s", exc)
        raise


async def authenticate_user(
    session: AsyncSession, email: str, password: str
) -> Optional[User]:
    """Return the active user if credentials match, else ``None``."""

    result = await session.execute(select(User).where(User.email == email.lower()))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def principal_for(user: User) -> Principal:
    return Principal.build(
        id=user.id,
        role=user.role,
        restaurant_id=user.restaurant_id,
        permissions=user.permissions or (),
    )


def create_access_token(
    principal: Principal, expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed JWT carrying the principal's claims."""

    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {
        "sub": principal.id,
        "role": principal.role.value,
        "restaurant_id": principal.restaurant_id,
        "permissions": sorted(principal.permissions),
        "exp": expire,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Return verified claims or raise :class:`Unauthorized`."""

    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except jwt.PyJWTError as exc:
        logger.info("rejected token: %s", exc.__class__.__name__)
        raise Unauthorized() from exc


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session),
) -> Principal:
    """Resolve the principal from a bearer token.

    Role, restaurant and permissions are re-read from the users table so that
    a deactivated account or revoked permission takes effect immediately.
    """

    if credentials is None or not credentials.credentials:
        raise Unauthorized()
    claims = decode_token(credentials.credentials)
    user_id = claims.get("sub")
    if not user_id:
        raise Unauthorized()
    user = await session.get(User, user_id)
    if user is None or not user.is_active:
        raise Unauthorized()
    return principal_for(user)


async def get_staff_principal(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    """Principal restricted to admins and restaurant accounts."""

    require_staff(principal)
    return principal


def role_required(*roles: Role):
    """Dependency factory enforcing that the current principal has one of ``roles``."""

    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in roles:
            raise Forbidden("Insufficient privileges")
        return principal

    return dependency
