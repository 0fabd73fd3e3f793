"""Restaurant dashboard routes.

Every listing here is scoped to a single restaurant. Restaurant accounts are
pinned to their own restaurant; admins may address any restaurant through the
path-scoped variants.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import get_staff_principal, role_required
from .db import get_session
from .deps.lang import get_lang
from .domain import NotFound, OrderStatus, Permission, Principal, Role
from .domain.presentation import order_stats
from .domain.visibility import filter_visible, require_permission, require_scope
from .repos_sqlalchemy import catalog_repo_sql, orders_repo_sql
from .schemas import StatusUpdate, order_to_dict
from .services import order_lifecycle
from .utils.responses import ok

router = APIRouter(prefix="/api/restaurant")

restaurator_only = role_required(Role.RESTAURATOR)


async def _scoped_restaurant(
    session: AsyncSession, principal: Principal, restaurant_id: str
) -> str:
    require_scope(principal, restaurant_id)
    if await catalog_repo_sql.get_restaurant(session, restaurant_id) is None:
        raise NotFound("Restaurant not found")
    return restaurant_id


async def _list_orders(
    session: AsyncSession,
    principal: Principal,
    restaurant_id: str,
    status: Optional[OrderStatus],
    lang: str,
) -> list:
    require_permission(principal, Permission.ORDERS)
    orders = await orders_repo_sql.list_for_restaurant(session, restaurant_id, status)
    return [order_to_dict(o, principal, lang) for o in filter_visible(principal, orders)]


@router.get("/orders")
async def my_orders(
    status: Optional[OrderStatus] = Query(default=None),
    principal: Principal = Depends(restaurator_only),
    session: AsyncSession = Depends(get_session),
    lang: str = Depends(get_lang),
) -> dict:
    """Orders of the caller's own restaurant; scope comes from the token only."""

    restaurant_id = await _scoped_restaurant(session, principal, principal.restaurant_id)
    return ok(await _list_orders(session, principal, restaurant_id, status, lang))


@router.get("/orders/stats")
async def my_order_stats(
    principal: Principal = Depends(restaurator_only),
    session: AsyncSession = Depends(get_session),
) -> dict:
    require_permission(principal, Permission.DASHBOARD)
    restaurant_id = await _scoped_restaurant(session, principal, principal.restaurant_id)
    return ok(order_stats(await orders_repo_sql.statuses_for(session, restaurant_id)))


@router.put("/orders/{order_id}/status")
async def update_status(
    order_id: str,
    payload: StatusUpdate,
    principal: Principal = Depends(get_staff_principal),
    session: AsyncSession = Depends(get_session),
    lang: str = Depends(get_lang),
) -> dict:
    order = await order_lifecycle.transition(
        session,
        order_id,
        payload.status,
        principal,
        estimated_time=payload.estimated_time,
        notes=payload.notes,
    )
    return ok(order_to_dict(order, principal, lang), message="Order updated")


@router.get("/{restaurant_id}/orders")
async def restaurant_orders(
    restaurant_id: str,
    status: Optional[OrderStatus] = Query(default=None),
    principal: Principal = Depends(get_staff_principal),
    session: AsyncSession = Depends(get_session),
    lang: str = Depends(get_lang),
) -> dict:
    restaurant_id = await _scoped_restaurant(session, principal, restaurant_id)
    return ok(await _list_orders(session, principal, restaurant_id, status, lang))


@router.get("/{restaurant_id}/products")
async def restaurant_products(
    restaurant_id: str,
    principal: Principal = Depends(get_staff_principal),
    session: AsyncSession = Depends(get_session),
) -> dict:
    restaurant_id = await _scoped_restaurant(session, principal, restaurant_id)
    require_permission(principal, Permission.PRODUCTS)
    products = filter_visible(
        principal, await catalog_repo_sql.list_products(session, restaurant_id)
    )
    return ok(
        [
            {
                "id": p.id,
                "name": p.name,
                "price": float(p.price),
                "categoryId": p.category_id,
                "active": p.active,
            }
            for p in products
        ]
    )


@router.get("/{restaurant_id}/categories")
async def restaurant_categories(
    restaurant_id: str,
    principal: Principal = Depends(get_staff_principal),
    session: AsyncSession = Depends(get_session),
) -> dict:
    restaurant_id = await _scoped_restaurant(session, principal, restaurant_id)
    require_permission(principal, Permission.CATEGORIES)
    categories = filter_visible(
        principal, await catalog_repo_sql.list_categories(session, restaurant_id)
    )
    return ok(
        [
            {"id": c.id, "name": c.name, "sort": c.sort, "active": c.active}
            for c in categories
        ]
    )
