"""Database models for the marketplace schema.

These models are kept isolated from any application wiring so that they can be
used in tests or scripts independently. Identifiers are opaque uuid strings.
"""

from __future__ import annotations

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import declarative_base, relationship

from .domain import OrderStatus

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class Restaurant(Base):
    """A restaurant listed on the marketplace."""

    __tablename__ = "restaurants"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class Category(Base):
    """Menu categories owned by a restaurant."""

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=_uuid)
    restaurant_id = Column(String(36), ForeignKey("restaurants.id"), nullable=False)
    name = Column(String, nullable=False)
    sort = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)


class Product(Base):
    """Catalog entries; read-only from the order workflow."""

    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_uuid)
    restaurant_id = Column(String(36), ForeignKey("restaurants.id"), nullable=False)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=True)
    name = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    active = Column(Boolean, nullable=False, default=True)

    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class User(Base):
    """Admin and restaurant accounts. Guests never get a row."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False, default="")
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default="CUSTOMER")
    restaurant_id = Column(String(36), ForeignKey("restaurants.id"), nullable=True)
    permissions = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Order(Base):
    """Customer orders placed through checkout."""

    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=_uuid)
    order_number = Column(String(32), unique=True, nullable=False, index=True)
    restaurant_id = Column(
        String(36), ForeignKey("restaurants.id"), nullable=False, index=True
    )
    status = Column(
        String(16), nullable=False, default=OrderStatus.RECEIVED.value
    )
    customer_name = Column(String(100), nullable=False)
    customer_phone = Column(String(15), nullable=False, index=True)
    customer_email = Column(String, nullable=True)
    address = Column(Text, nullable=False)
    delivery_type = Column(String(16), nullable=False, default="DELIVERY")
    payment_method = Column(String(32), nullable=False, default="CASH_ON_DELIVERY")
    payment_status = Column(String(16), nullable=False, default="PENDING")
    notes = Column(Text, nullable=True)
    delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    total = Column(Numeric(10, 2), nullable=False, default=0)
    estimated_time = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    restaurant = relationship("Restaurant", lazy="selectin")
    items = relationship(
        "OrderItem",
        lazy="selectin",
        order_by="OrderItem.position",
        cascade="all, delete-orphan",
    )


class OrderItem(Base):
    """Order line with name and unit price snapshotted at checkout."""

    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    name_snapshot = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
