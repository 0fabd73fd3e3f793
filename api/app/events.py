# events.py

"""Simple in-memory Pub/Sub dispatcher.

Notification collaborators (SMS, push, dispatch) subscribe to order events;
publishing never blocks the request that produced the event.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, Dict, List

logger = logging.getLogger("api.events")

ORDER_PLACED = "order.placed"
ORDER_STATUS_CHANGED = "order.status_changed"


class EventBus:
    """Dispatch events to subscribers via :class:`asyncio.Queue` instances."""

    def __init__(self) -> None:
        self._subs: Dict[str, List[asyncio.Queue]] = defaultdict(list)

    def subscribe(self, name: str) -> asyncio.Queue:
        """Register interest in ``name`` events and return a queue."""

        queue: asyncio.Queue = asyncio.Queue()
        self._subs[name].append(queue)
        return queue

    def unsubscribe(self, name: str, queue: asyncio.Queue) -> None:
        if queue in self._subs.get(name, []):
            self._subs[name].remove(queue)

    async def publish(self, name: str, payload: Dict[str, Any]) -> None:
        """Broadcast ``payload`` to all subscribers of ``name``."""

        for queue in self._subs.get(name, []):
            queue.put_nowait(payload)
        logger.debug("event %s delivered to %d subscribers", name, len(self._subs.get(name, [])))


event_bus = EventBus()
