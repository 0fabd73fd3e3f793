"""Role-scoped visibility and authorization rules.

Every helper here is pure: it only inspects the principal and the entities it
is given. Restaurant-scoped entities are anything exposing ``restaurant_id``
either as an attribute or as a mapping key.
"""

from __future__ import annotations

from typing import Any, Iterable, List, TypeVar, Union

from .errors import Forbidden
from .principal import Permission, Principal, Role

T = TypeVar("T")


def _restaurant_id(entity: Any) -> Any:
    if isinstance(entity, dict):
        return entity.get("restaurant_id")
    return getattr(entity, "restaurant_id", None)


def can_access_restaurant(principal: Principal, restaurant_id: Any) -> bool:
    """Return ``True`` if ``principal`` may act on ``restaurant_id``'s data."""

    if principal.is_admin:
        return True
    if principal.role is Role.RESTAURATOR:
        return (
            principal.restaurant_id is not None
            and restaurant_id is not None
            and str(principal.restaurant_id) == str(restaurant_id)
        )
    return False


def has_permission(principal: Principal, permission: Union[str, Permission]) -> bool:
    """Admins hold every permission, customers none."""

    token = getattr(permission, "value", permission)
    if principal.is_admin:
        return True
    if principal.role is Role.RESTAURATOR:
        return token in principal.permissions
    return False


def filter_visible(principal: Principal, entities: Iterable[T]) -> List[T]:
    """Return the subset of ``entities`` ``principal`` may list.

    Admins see everything, restaurateurs exactly their restaurant's rows and
    any other role nothing. Input order is preserved.
    """

    if principal.is_admin:
        return list(entities)
    if principal.role is Role.RESTAURATOR and principal.restaurant_id:
        return [e for e in entities if can_access_restaurant(principal, _restaurant_id(e))]
    return []


def require_scope(principal: Principal, target: Any) -> None:
    """Raise :class:`Forbidden` unless ``target`` is within scope.

    ``target`` is either an entity or a bare restaurant id. Out-of-scope rows
    are reported as forbidden rather than missing.
    """

    restaurant_id = target if isinstance(target, (str, int)) else _restaurant_id(target)
    if not can_access_restaurant(principal, restaurant_id):
        raise Forbidden("Access to this restaurant is not allowed")


def require_permission(principal: Principal, permission: Union[str, Permission]) -> None:
    """Raise :class:`Forbidden` unless ``principal`` holds ``permission``."""

    if not has_permission(principal, permission):
        token = getattr(permission, "value", permission)
        raise Forbidden(f"Permission required: {token}")


def require_staff(principal: Principal) -> None:
    if principal.role not in (Role.ADMIN, Role.RESTAURATOR):
        raise Forbidden("Insufficient privileges")


def authorize_order_write(principal: Principal, order: Any) -> None:
    """Check that ``principal`` may change the status of ``order``."""

    require_staff(principal)
    require_scope(principal, order)
    require_permission(principal, Permission.ORDERS)
