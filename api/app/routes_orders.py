"""Guest-facing order routes: checkout, lookup and tracking.

Guests have no accounts. Knowing an order number, the opaque order id
returned at checkout or the phone used at checkout is what grants read
access to an order.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from .db import get_session
from .deps.lang import get_lang
from .domain import NotFound, ValidationError
from .events import ORDER_PLACED, event_bus
from .repos_sqlalchemy import orders_repo_sql
from .routes_metrics import order_lookups_total, orders_created_total
from .schemas import OrderCreate, order_to_dict
from .utils.responses import ok

router = APIRouter(prefix="/api/orders")
logger = logging.getLogger("api.orders")


@router.post("", status_code=201)
async def create_order(
    payload: OrderCreate,
    session: AsyncSession = Depends(get_session),
    lang: str = Depends(get_lang),
) -> dict:
    """Place a new order; it always starts as ``RECEIVED``."""

    customer = payload.model_dump(exclude={"items"}, mode="json")
    lines = [line.model_dump() for line in payload.items]
    order = await orders_repo_sql.create_order(session, customer, lines)
    orders_created_total.inc()
    logger.info(
        "order %s created for restaurant %s",
        order.id,
        order.restaurant_id,
        extra={"restaurant": order.restaurant_id},
    )
    await event_bus.publish(
        ORDER_PLACED,
        {
            "order_id": order.id,
            "order_number": order.order_number,
            "restaurant_id": order.restaurant_id,
        },
    )
    return ok(order_to_dict(order, lang=lang))


@router.get("")
async def lookup_orders(
    order_number: Optional[str] = Query(default=None, alias="orderNumber"),
    phone: Optional[str] = Query(default=None),
    session: AsyncSession = Depends(get_session),
    lang: str = Depends(get_lang),
) -> dict:
    """Find orders by exact order number or by the checkout phone number.

    ``orderNumber`` wins when both are given and yields at most one order.
    """

    order_number = (order_number or "").strip()
    phone = (phone or "").strip()
    if order_number:
        order_lookups_total.labels(key="order_number").inc()
        order = await orders_repo_sql.get_by_number(session, order_number)
        orders = [order] if order is not None else []
    elif phone:
        order_lookups_total.labels(key="phone").inc()
        orders = await orders_repo_sql.list_by_phone(session, phone)
    else:
        raise ValidationError(
            "orderNumber or phone is required", {"query": "orderNumber|phone"}
        )
    return ok([order_to_dict(o, lang=lang) for o in orders])


@router.get("/track/{order_number}")
async def track_order(
    order_number: str,
    session: AsyncSession = Depends(get_session),
    lang: str = Depends(get_lang),
) -> dict:
    """Return a single order for the tracking page."""

    order = await orders_repo_sql.get_by_number(session, order_number)
    if order is None:
        raise NotFound("Order not found")
    return ok(order_to_dict(order, lang=lang))


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    session: AsyncSession = Depends(get_session),
    lang: str = Depends(get_lang),
) -> dict:
    """Return an order by its opaque id, as shown on the confirmation page."""

    order = await orders_repo_sql.get_order(session, order_id)
    if order is None:
        raise NotFound("Order not found")
    return ok(order_to_dict(order, lang=lang))
