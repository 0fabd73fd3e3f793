"""Error taxonomy shared by the order core and the API boundary."""

from __future__ import annotations

from typing import Any, Dict, Optional


class OrderError(Exception):
    """Base class for errors surfaced to API callers.

    ``code`` is the stable machine-readable identifier, ``status_code`` the
    HTTP status used when the error reaches the API boundary.
    """

    code = "ERROR"
    status_code = 400
    default_message = "Request failed"

    def __init__(
        self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class Unauthorized(OrderError):
    code = "UNAUTHORIZED"
    status_code = 401
    default_message = "Authentication required"


class Forbidden(OrderError):
    code = "FORBIDDEN"
    status_code = 403
    default_message = "Access denied"


class NotFound(OrderError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class ValidationError(OrderError):
    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Invalid input"


class ConflictError(OrderError):
    code = "CONFLICT"
    status_code = 409
    default_message = "Order was modified concurrently; reload and retry"


class InvalidTransition(OrderError):
    """Requested status is not reachable from the current one."""

    code = "INVALID_TRANSITION"
    status_code = 400

    def __init__(self, current: Any, requested: Any) -> None:
        self.current = _value(current)
        self.requested = _value(requested)
        super().__init__(
            f"Cannot move order from {self.current} to {self.requested}",
            {"current": self.current, "requested": self.requested},
        )


class TerminalStateError(OrderError):
    """Order is already delivered or cancelled."""

    code = "TERMINAL_STATE"
    status_code = 400

    def __init__(self, current: Any) -> None:
        self.current = _value(current)
        super().__init__(
            f"Order is already {self.current}", {"current": self.current}
        )


def _value(status: Any) -> str:
    return getattr(status, "value", status)


__all__ = [
    "OrderError",
    "Unauthorized",
    "Forbidden",
    "NotFound",
    "ValidationError",
    "ConflictError",
    "InvalidTransition",
    "TerminalStateError",
]
