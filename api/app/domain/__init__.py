"""Domain models and helpers."""

from .errors import (
    ConflictError,
    Forbidden,
    InvalidTransition,
    NotFound,
    OrderError,
    TerminalStateError,
    Unauthorized,
    ValidationError,
)
from .order_status import (
    ACTIVE_STATUSES,
    TERMINAL_STATUSES,
    TRANSITIONS,
    OrderStatus,
    allowed_targets,
    can_transition,
    check_transition,
    is_terminal,
)
from .principal import Permission, Principal, Role

__all__ = [
    "ACTIVE_STATUSES",
    "TERMINAL_STATUSES",
    "TRANSITIONS",
    "OrderStatus",
    "allowed_targets",
    "can_transition",
    "check_transition",
    "is_terminal",
    "Permission",
    "Principal",
    "Role",
    "OrderError",
    "Unauthorized",
    "Forbidden",
    "NotFound",
    "ValidationError",
    "ConflictError",
    "InvalidTransition",
    "TerminalStateError",
]
