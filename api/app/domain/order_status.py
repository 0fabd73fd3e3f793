"""Order status enumeration and allowed transitions."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .errors import InvalidTransition, TerminalStateError
from .principal import Role


class OrderStatus(str, Enum):
    """Enumerate the lifecycle states for an order.

    Values are the wire vocabulary and are case-sensitive.
    """

    RECEIVED = "RECEIVED"
    PREPARING = "PREPARING"
    READY = "READY"
    DELIVERING = "DELIVERING"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.RECEIVED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset(
        {OrderStatus.DELIVERING, OrderStatus.DELIVERED, OrderStatus.CANCELLED}
    ),
    OrderStatus.DELIVERING: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

ACTIVE_STATUSES = frozenset(TRANSITIONS) - TERMINAL_STATUSES

# Edges only an admin may take; restaurant staff cancel before the food is ready.
ADMIN_ONLY_EDGES: frozenset[tuple[OrderStatus, OrderStatus]] = frozenset(
    {(OrderStatus.READY, OrderStatus.CANCELLED)}
)


def is_terminal(status: OrderStatus) -> bool:
    """Return ``True`` when no transition may leave ``status``."""

    return status in TERMINAL_STATUSES


def allowed_targets(
    status: OrderStatus, role: Optional[Role] = None
) -> frozenset[OrderStatus]:
    """Return the statuses reachable from ``status``.

    When ``role`` is given, edges reserved for admins are dropped for any
    other role.
    """

    targets = TRANSITIONS.get(status, frozenset())
    if role is None or role is Role.ADMIN:
        return targets
    return frozenset(t for t in targets if (status, t) not in ADMIN_ONLY_EDGES)


def can_transition(
    src: OrderStatus, dst: OrderStatus, role: Optional[Role] = None
) -> bool:
    """Return ``True`` if an order can move from ``src`` to ``dst``."""

    return dst in allowed_targets(src, role)


def check_transition(
    current: OrderStatus, requested: OrderStatus, role: Optional[Role] = None
) -> None:
    """Raise unless ``current`` may move to ``requested``.

    Terminal orders always raise :class:`TerminalStateError`; any other
    illegal edge, including a request for the current status, raises
    :class:`InvalidTransition`.
    """

    if is_terminal(current):
        raise TerminalStateError(current)
    if not can_transition(current, requested, role):
        raise InvalidTransition(current, requested)
