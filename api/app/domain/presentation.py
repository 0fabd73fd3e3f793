"""Status presentation shared by the tracking page, restaurant and admin views."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, Optional

from ..i18n import get_msg
from .order_status import ACTIVE_STATUSES, OrderStatus

ICONS: dict[OrderStatus, str] = {
    OrderStatus.RECEIVED: "clock",
    OrderStatus.PREPARING: "utensils",
    OrderStatus.READY: "package",
    OrderStatus.DELIVERING: "truck",
    OrderStatus.DELIVERED: "check-circle",
    OrderStatus.CANCELLED: "ban",
}

TONES: dict[OrderStatus, str] = {
    OrderStatus.RECEIVED: "orange",
    OrderStatus.PREPARING: "yellow",
    OrderStatus.READY: "green",
    OrderStatus.DELIVERING: "blue",
    OrderStatus.DELIVERED: "gray",
    OrderStatus.CANCELLED: "red",
}

# Tracker progress; cancelled orders sit outside the progress bar.
STEPS: list[OrderStatus] = [
    OrderStatus.RECEIVED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.DELIVERING,
    OrderStatus.DELIVERED,
]


@dataclass(frozen=True)
class StatusView:
    status: str
    label: str
    icon: str
    tone: str
    estimate: str
    step: Optional[int]

    def as_dict(self) -> dict:
        return asdict(self)


def status_label(status: OrderStatus, lang: str = "en") -> str:
    return get_msg(lang, f"status.{status.value}")


def estimated_time(status: OrderStatus, lang: str = "en") -> str:
    return get_msg(lang, f"estimate.{status.value}")


def present(status: OrderStatus | str, lang: str = "en") -> StatusView:
    """Return the display attributes for ``status`` in ``lang``."""

    status = OrderStatus(status)
    return StatusView(
        status=status.value,
        label=status_label(status, lang),
        icon=ICONS[status],
        tone=TONES[status],
        estimate=estimated_time(status, lang),
        step=STEPS.index(status) if status in STEPS else None,
    )


def order_stats(statuses: Iterable[OrderStatus | str]) -> dict[str, int]:
    """Dashboard counters for a restaurant or the whole platform."""

    stats = {"total": 0, "pending": 0, "completed": 0, "cancelled": 0}
    for raw in statuses:
        status = OrderStatus(raw)
        stats["total"] += 1
        if status in ACTIVE_STATUSES:
            stats["pending"] += 1
        elif status is OrderStatus.DELIVERED:
            stats["completed"] += 1
        elif status is OrderStatus.CANCELLED:
            stats["cancelled"] += 1
    return stats
