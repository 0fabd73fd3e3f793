"""Authenticated caller and its role/permission model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional


class Role(str, Enum):
    """Platform roles."""

    ADMIN = "ADMIN"
    RESTAURATOR = "RESTAURATOR"
    CUSTOMER = "CUSTOMER"


class Permission(str, Enum):
    """Permission tokens granted to restaurant accounts."""

    DASHBOARD = "dashboard"
    ORDERS = "orders"
    PRODUCTS = "products"
    CATEGORIES = "categories"
    FINANCES = "finances"
    REVIEWS = "reviews"
    PROFILE = "profile"


@dataclass(frozen=True)
class Principal:
    """The authenticated entity making a request.

    ``restaurant_id`` is only meaningful for :attr:`Role.RESTAURATOR` and
    ``permissions`` is a set of tokens, never a comma separated string.
    """

    id: str
    role: Role
    restaurant_id: Optional[str] = None
    permissions: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        id: str,
        role: str | Role,
        restaurant_id: Optional[str] = None,
        permissions: Iterable[str] = (),
    ) -> "Principal":
        """Normalise raw claims into a :class:`Principal`.

        Unknown permission tokens are kept so that custom roles keep working;
        blank tokens are dropped.
        """

        role = Role(role)
        tokens = frozenset(p.strip() for p in permissions if p and p.strip())
        if role is not Role.RESTAURATOR:
            restaurant_id = None
        if role is Role.CUSTOMER:
            tokens = frozenset()
        return cls(id=id, role=role, restaurant_id=restaurant_id, permissions=tokens)

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "role": self.role.value,
            "restaurantId": self.restaurant_id,
            "permissions": sorted(self.permissions),
        }
