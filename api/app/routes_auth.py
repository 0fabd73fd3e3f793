"""Login and session introspection routes for staff accounts."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import Token, authenticate_user, create_access_token, get_current_principal, principal_for
from .db import get_session
from .domain import Principal, Unauthorized
from .schemas import LoginPayload
from .utils.responses import ok

router = APIRouter(prefix="/api/auth")
logger = logging.getLogger("api.auth")


@router.post("/login")
async def login(payload: LoginPayload, session: AsyncSession = Depends(get_session)) -> dict:
    """Exchange email and password for a bearer token."""

    user = await authenticate_user(session, payload.email, payload.password)
    if user is None:
        logger.info("failed login attempt")
        raise Unauthorized("Invalid credentials")
    principal = principal_for(user)
    token = Token(access_token=create_access_token(principal), role=principal.role.value)
    return ok(token.model_dump())


@router.get("/me")
async def me(principal: Principal = Depends(get_current_principal)) -> dict:
    return ok(principal.as_dict())
