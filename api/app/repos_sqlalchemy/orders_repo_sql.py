"""SQLAlchemy-backed repository helpers for orders.

These helpers implement the order workflows without any side effects beyond
database mutations. Item names and unit prices are snapshotted at checkout so
that historical orders are immune to later catalog changes.
"""

from __future__ import annotations

import secrets
import string
import time
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain import OrderStatus, ValidationError
from ..models import Order, OrderItem, Product, Restaurant

_BASE36 = string.digits + string.ascii_uppercase


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


def generate_order_number() -> str:
    """Return a shareable number like ``MNU-LXK3F9Q2ABC123``.

    Millisecond timestamp in base 36 followed by six random base-36
    characters.
    """

    stamp = _base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"MNU-{stamp}{suffix}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


async def create_order(
    session: AsyncSession,
    customer: dict,
    lines: List[dict],
) -> Order:
    """Create an order from checkout ``customer`` fields and ``lines``.

    Each entry in ``lines`` must contain ``product_id`` and ``quantity``. The
    owning restaurant is derived from the products, which must all exist, be
    active and belong to the same restaurant. ``total`` is the sum of the
    snapshotted line subtotals plus the restaurant's delivery fee for
    ``DELIVERY`` orders.
    """

    if not lines:
        raise ValidationError("Order has no items", {"items": "at least one item required"})

    product_ids = [line["product_id"] for line in lines]
    result = await session.execute(select(Product).where(Product.id.in_(product_ids)))
    products = {p.id: p for p in result.scalars()}

    missing = sorted({pid for pid in product_ids if pid not in products})
    if missing:
        raise ValidationError("Product not found", {"items": {"missing": missing}})
    inactive = sorted({pid for pid in product_ids if not products[pid].active})
    if inactive:
        raise ValidationError("Product unavailable", {"items": {"unavailable": inactive}})
    restaurant_ids = {products[pid].restaurant_id for pid in product_ids}
    if len(restaurant_ids) != 1:
        raise ValidationError(
            "All items must come from the same restaurant",
            {"items": {"restaurants": sorted(restaurant_ids)}},
        )
    restaurant_id = restaurant_ids.pop()
    restaurant = await session.get(Restaurant, restaurant_id)
    if restaurant is None or not restaurant.is_active:
        raise ValidationError("Restaurant unavailable", {"restaurantId": restaurant_id})

    items: List[OrderItem] = []
    subtotal = Decimal("0")
    for position, line in enumerate(lines):
        quantity = int(line["quantity"])
        if quantity <= 0:
            raise ValidationError(
                "Invalid quantity", {"items": {"quantity": "must be greater than 0"}}
            )
        product = products[line["product_id"]]
        price = Decimal(product.price)
        subtotal += price * quantity
        items.append(
            OrderItem(
                product_id=product.id,
                position=position,
                name_snapshot=product.name,
                price=price,
                quantity=quantity,
            )
        )

    delivery_fee = (
        Decimal(restaurant.delivery_fee or 0)
        if customer.get("delivery_type") == "DELIVERY"
        else Decimal("0")
    )
    now = _now()
    order = Order(
        order_number=generate_order_number(),
        restaurant_id=restaurant_id,
        status=OrderStatus.RECEIVED.value,
        customer_name=customer["customer_name"],
        customer_phone=customer["customer_phone"],
        customer_email=customer.get("customer_email"),
        address=customer["address"],
        delivery_type=customer.get("delivery_type", "DELIVERY"),
        payment_method=customer.get("payment_method", "CASH_ON_DELIVERY"),
        payment_status="PENDING",
        notes=customer.get("notes"),
        delivery_fee=delivery_fee,
        total=subtotal + delivery_fee,
        created_at=now,
        updated_at=now,
        items=items,
    )
    session.add(order)
    await session.commit()
    return await get_order(session, order.id)


async def get_order(session: AsyncSession, order_id: str) -> Optional[Order]:
    """Return a fresh copy of ``order_id`` with items and restaurant loaded."""

    result = await session.execute(
        select(Order)
        .where(Order.id == order_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_by_number(session: AsyncSession, order_number: str) -> Optional[Order]:
    result = await session.execute(
        select(Order).where(Order.order_number == order_number)
    )
    return result.scalar_one_or_none()


def _filtered(restaurant_id: Optional[str], status: Optional[OrderStatus]):
    stmt = select(Order).order_by(Order.created_at.desc(), Order.id)
    if restaurant_id is not None:
        stmt = stmt.where(Order.restaurant_id == restaurant_id)
    if status is not None:
        stmt = stmt.where(Order.status == status.value)
    return stmt


async def list_by_phone(session: AsyncSession, phone: str) -> List[Order]:
    """Every order placed with ``phone``, newest first."""

    result = await session.execute(
        _filtered(None, None).where(Order.customer_phone == phone)
    )
    return list(result.scalars())


async def list_all(
    session: AsyncSession, status: Optional[OrderStatus] = None
) -> List[Order]:
    result = await session.execute(_filtered(None, status))
    return list(result.scalars())


async def list_for_restaurant(
    session: AsyncSession, restaurant_id: str, status: Optional[OrderStatus] = None
) -> List[Order]:
    """Orders of ``restaurant_id``; the filter is applied in SQL."""

    result = await session.execute(_filtered(restaurant_id, status))
    return list(result.scalars())


async def statuses_for(
    session: AsyncSession, restaurant_id: Optional[str] = None
) -> Iterable[str]:
    stmt = select(Order.status)
    if restaurant_id is not None:
        stmt = stmt.where(Order.restaurant_id == restaurant_id)
    result = await session.execute(stmt)
    return list(result.scalars())


async def update_status_if(
    session: AsyncSession,
    order_id: str,
    expected: OrderStatus,
    new_status: OrderStatus,
    estimated_time: Optional[int] = None,
    notes: Optional[str] = None,
) -> bool:
    """Move ``order_id`` to ``new_status`` only if it is still ``expected``.

    Single conditional ``UPDATE``; returns ``False`` when no row matched,
    meaning another request changed the status first. ``estimated_time`` and
    ``notes`` are set by the same statement when given.
    """

    values = {"status": new_status.value, "updated_at": _now()}
    if estimated_time is not None:
        values["estimated_time"] = estimated_time
    if notes is not None:
        values["notes"] = notes
    result = await session.execute(
        update(Order)
        .where(Order.id == order_id, Order.status == expected.value)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    return result.rowcount == 1
