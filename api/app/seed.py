"""Demo data for local development.

Creates two restaurants with a small menu, one admin and one restaurant
account per restaurant. Running it twice is a no-op.
"""

from __future__ import annotations

import os
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import hash_password
from .domain import Permission, Role
from .models import Category, Product, Restaurant, User

DEMO_PASSWORD = os.getenv("DEMO_PASSWORD", "demo-pass")

RESTAURANTS = [
    ("Chez Fatou", "R1", Decimal("2.50"), [("Thieboudienne", "8.50"), ("Yassa", "7.00")]),
    ("Dakar Grill", "R2", Decimal("3.00"), [("Dibi", "9.00"), ("Bissap", "2.00")]),
]

RESTAURANT_PERMISSIONS = [
    Permission.DASHBOARD.value,
    Permission.ORDERS.value,
    Permission.PRODUCTS.value,
    Permission.CATEGORIES.value,
]


async def seed(session: AsyncSession) -> dict[str, object]:
    """Insert demo rows unless restaurants already exist."""

    existing = await session.scalar(select(func.count()).select_from(Restaurant))
    if existing:
        return {"seeded": False}

    session.add(
        User(
            email="admin@example.com",
            name="Admin",
            password_hash=hash_password(DEMO_PASSWORD),
            role=Role.ADMIN.value,
        )
    )
    created = []
    for name, slug, fee, menu in RESTAURANTS:
        restaurant = Restaurant(name=name, delivery_fee=fee)
        session.add(restaurant)
        await session.flush()
        category = Category(restaurant_id=restaurant.id, name="Plats", sort=1)
        session.add(category)
        await session.flush()
        for product_name, price in menu:
            session.add(
                Product(
                    restaurant_id=restaurant.id,
                    category_id=category.id,
                    name=product_name,
                    price=Decimal(price),
                )
            )
        session.add(
            User(
                email=f"owner-{slug.lower()}@example.com",
                name=f"{name} owner",
                password_hash=hash_password(DEMO_PASSWORD),
                role=Role.RESTAURATOR.value,
                restaurant_id=restaurant.id,
                permissions=RESTAURANT_PERMISSIONS,
            )
        )
        created.append({"id": restaurant.id, "name": name})
    await session.commit()
    return {"seeded": True, "restaurants": created}
