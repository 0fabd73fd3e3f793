"""Request payloads and response shaping for the order API."""

from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .domain import OrderStatus, Principal, allowed_targets, is_terminal
from .domain.presentation import present
from .i18n import get_msg
from .models import Order

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Largest quantity accepted on a single checkout line.
MAX_QUANTITY = 999
MAX_ESTIMATE_MINUTES = 24 * 60


class DeliveryType(str, Enum):
    DELIVERY = "DELIVERY"
    PICKUP = "PICKUP"


class PaymentMethod(str, Enum):
    CASH_ON_DELIVERY = "CASH_ON_DELIVERY"
    ONLINE = "ONLINE"


class OrderLine(BaseModel):
    """Single line item requested at checkout."""

    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId", min_length=1)
    quantity: int = Field(gt=0, le=MAX_QUANTITY)


class OrderCreate(BaseModel):
    """Guest checkout payload."""

    model_config = ConfigDict(populate_by_name=True)

    customer_name: str = Field(alias="customerName", min_length=1, max_length=100)
    customer_phone: str = Field(alias="customerPhone", min_length=9, max_length=15)
    customer_email: Optional[str] = Field(default=None, alias="customerEmail")
    address: str = Field(min_length=1)
    delivery_type: DeliveryType = Field(default=DeliveryType.DELIVERY, alias="deliveryType")
    payment_method: PaymentMethod = Field(
        default=PaymentMethod.CASH_ON_DELIVERY, alias="paymentMethod"
    )
    notes: Optional[str] = None
    items: List[OrderLine] = Field(min_length=1)

    @field_validator("customer_name", "customer_phone", "address", mode="before")
    @classmethod
    def _strip(cls, v):
        # before the length constraints
        return v.strip() if isinstance(v, str) else v

    @field_validator("customer_email")
    @classmethod
    def _validate_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not EMAIL_RE.match(v):
            raise ValueError("invalid email")
        return v


class StatusUpdate(BaseModel):
    """Status change requested from the restaurant dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    status: OrderStatus
    estimated_time: Optional[int] = Field(
        default=None, alias="estimatedTime", ge=0, le=MAX_ESTIMATE_MINUTES
    )
    notes: Optional[str] = Field(default=None, max_length=500)


class AdminStatusUpdate(StatusUpdate):
    order_id: str = Field(alias="orderId", min_length=1)


class LoginPayload(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


def _money(value: Decimal | float | int | None) -> float:
    return float(Decimal(value or 0).quantize(Decimal("0.01")))


def _ts(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def order_to_dict(
    order: Order, principal: Optional[Principal] = None, lang: str = "en"
) -> Dict[str, Any]:
    """Serialize ``order`` into the wire shape shared by every surface.

    Staff callers additionally get ``actions``: the statuses they may request
    next, so that unavailable buttons can be disabled up front.
    """

    status = OrderStatus(order.status)
    restaurant = order.restaurant
    data: Dict[str, Any] = {
        "id": order.id,
        "orderNumber": order.order_number,
        "customerName": order.customer_name,
        "customerEmail": order.customer_email,
        "customerPhone": order.customer_phone,
        "restaurant": {
            "id": order.restaurant_id,
            "name": restaurant.name if restaurant is not None else None,
        },
        "items": [
            {
                "id": item.id,
                "productId": item.product_id,
                "productName": item.name_snapshot,
                "quantity": item.quantity,
                "price": _money(item.price),
                "subtotal": _money(Decimal(item.price) * item.quantity),
            }
            for item in order.items
        ],
        "deliveryType": order.delivery_type,
        "deliveryTypeLabel": get_msg(lang, f"delivery_type.{order.delivery_type}"),
        "deliveryFee": _money(order.delivery_fee),
        "total": _money(order.total),
        "status": status.value,
        "statusView": present(status, lang).as_dict(),
        "paymentMethod": order.payment_method,
        "paymentStatus": order.payment_status,
        "deliveryAddress": order.address,
        "notes": order.notes,
        "estimatedTime": order.estimated_time,
        "createdAt": _ts(order.created_at),
        "updatedAt": _ts(order.updated_at),
    }
    if principal is not None:
        data["actions"] = (
            []
            if is_terminal(status)
            else sorted(t.value for t in allowed_targets(status, principal.role))
        )
    return data
