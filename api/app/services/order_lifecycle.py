"""Order status transitions.

``transition`` composes the three independent pieces of the workflow: the
visibility check, the pure status graph and the conditional update. Nothing
here sends notifications directly; subscribers of
:data:`api.app.events.ORDER_STATUS_CHANGED` do that after the fact.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..domain import (
    ConflictError,
    NotFound,
    OrderError,
    OrderStatus,
    Principal,
    check_transition,
)
from ..domain.visibility import authorize_order_write
from ..events import ORDER_STATUS_CHANGED, event_bus
from ..models import Order
from ..repos_sqlalchemy import orders_repo_sql
from ..routes_metrics import order_transitions_total

logger = logging.getLogger("api.orders")


async def transition(
    session: AsyncSession,
    order_id: str,
    requested: OrderStatus,
    principal: Principal,
    estimated_time: Optional[int] = None,
    notes: Optional[str] = None,
) -> Order:
    """Move ``order_id`` to ``requested`` on behalf of ``principal``.

    Raises :class:`NotFound`, :class:`Forbidden`, :class:`TerminalStateError`,
    :class:`InvalidTransition` or :class:`ConflictError`; on any of them the
    order is left untouched.
    """

    requested = OrderStatus(requested)
    order = await orders_repo_sql.get_order(session, order_id)
    if order is None:
        raise NotFound("Order not found")

    current = OrderStatus(order.status)
    try:
        authorize_order_write(principal, order)
        check_transition(current, requested, principal.role)
        applied = await orders_repo_sql.update_status_if(
            session, order.id, current, requested, estimated_time, notes
        )
        if not applied:
            raise ConflictError()
    except OrderError as exc:
        order_transitions_total.labels(current.value, requested.value, exc.code).inc()
        logger.info(
            "order %s transition %s->%s rejected: %s",
            order.id,
            current.value,
            requested.value,
            exc.code,
            extra={"user": principal.id},
        )
        raise

    order_transitions_total.labels(current.value, requested.value, "OK").inc()
    logger.info(
        "order %s transition %s->%s by %s",
        order.id,
        current.value,
        requested.value,
        principal.role.value,
        extra={"user": principal.id, "restaurant": order.restaurant_id},
    )
    updated = await orders_repo_sql.get_order(session, order.id)
    assert updated is not None
    await event_bus.publish(
        ORDER_STATUS_CHANGED,
        {
            "order_id": updated.id,
            "order_number": updated.order_number,
            "restaurant_id": updated.restaurant_id,
            "from": current.value,
            "to": requested.value,
            "by": principal.id,
        },
    )
    return updated
