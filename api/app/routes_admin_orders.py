"""Platform-wide order management for admins."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import role_required
from .db import get_session
from .deps.lang import get_lang
from .domain import OrderStatus, Principal, Role
from .domain.presentation import order_stats
from .repos_sqlalchemy import orders_repo_sql
from .schemas import AdminStatusUpdate, order_to_dict
from .services import order_lifecycle
from .utils.responses import ok

router = APIRouter(prefix="/api/admin/orders")

admin_only = role_required(Role.ADMIN)


@router.get("")
async def list_orders(
    status: Optional[OrderStatus] = Query(default=None),
    principal: Principal = Depends(admin_only),
    session: AsyncSession = Depends(get_session),
    lang: str = Depends(get_lang),
) -> dict:
    """Every order on the platform, newest first."""

    orders = await orders_repo_sql.list_all(session, status)
    return ok([order_to_dict(o, principal, lang) for o in orders])


@router.get("/stats")
async def stats(
    principal: Principal = Depends(admin_only),
    session: AsyncSession = Depends(get_session),
) -> dict:
    return ok(order_stats(await orders_repo_sql.statuses_for(session)))


@router.put("")
async def update_order_status(
    payload: AdminStatusUpdate,
    principal: Principal = Depends(admin_only),
    session: AsyncSession = Depends(get_session),
    lang: str = Depends(get_lang),
) -> dict:
    order = await order_lifecycle.transition(
        session,
        payload.order_id,
        payload.status,
        principal,
        estimated_time=payload.estimated_time,
        notes=payload.notes,
    )
    return ok(order_to_dict(order, principal, lang), message="Order updated")
