"""Read-only catalog queries used by restaurant dashboards."""

from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Category, Product, Restaurant


async def get_restaurant(session: AsyncSession, restaurant_id: str) -> Restaurant | None:
    return await session.get(Restaurant, restaurant_id)


async def list_products(session: AsyncSession, restaurant_id: str) -> List[Product]:
    result = await session.execute(
        select(Product)
        .where(Product.restaurant_id == restaurant_id)
        .order_by(Product.name)
    )
    return list(result.scalars())


async def list_categories(session: AsyncSession, restaurant_id: str) -> List[Category]:
    result = await session.execute(
        select(Category)
        .where(Category.restaurant_id == restaurant_id)
        .order_by(Category.sort, Category.name)
    )
    return list(result.scalars())
