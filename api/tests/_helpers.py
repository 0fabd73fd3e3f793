"""Payload builders shared by route tests."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

PASSWORD = "s3cret-pass"


def checkout_payload(**overrides) -> dict:
    payload = {
        "customerName": "Awa Diop",
        "customerPhone": "771234567",
        "customerEmail": "awa@example.com",
        "address": "12 rue Carnot, Dakar",
        "deliveryType": "DELIVERY",
        "paymentMethod": "CASH_ON_DELIVERY",
        "items": [
            {"productId": "P1", "quantity": 2},
            {"productId": "P2", "quantity": 3},
        ],
    }
    payload.update(overrides)
    return payload


def customer_fields(**overrides) -> dict:
    """Repository-level customer dict as produced by ``OrderCreate``."""

    fields = {
        "customer_name": "Awa Diop",
        "customer_phone": "771234567",
        "customer_email": None,
        "address": "12 rue Carnot, Dakar",
        "delivery_type": "DELIVERY",
        "payment_method": "CASH_ON_DELIVERY",
        "notes": None,
    }
    fields.update(overrides)
    return fields


def order_row(order_id: str, restaurant_id: str, status: str = "RECEIVED"):
    """Unsaved ``Order`` used by pure visibility tests."""

    from api.app.models import Order

    now = datetime.now(timezone.utc)
    return Order(
        id=order_id,
        order_number=f"MNU-{order_id}",
        restaurant_id=restaurant_id,
        status=status,
        customer_name="x",
        customer_phone="771234567",
        address="a",
        total=Decimal("0"),
        delivery_fee=Decimal("0"),
        created_at=now,
        updated_at=now,
    )
