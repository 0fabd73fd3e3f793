"""Per-statement timing for the order database.

Every statement feeds the ``db_query_seconds`` histogram; statements slower
than ``DB_SLOW_QUERY_MS`` are logged with a digest of their parameters
instead of the values, which may hold customer phones and emails.
"""

from __future__ import annotations

import hashlib
import logging
import os
import re
import time

from prometheus_client import Histogram
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine

SLOW_QUERY_MS = int(os.getenv("DB_SLOW_QUERY_MS", "200"))

_TABLE_RE = re.compile(r"\b(?:FROM|INTO|UPDATE)\s+\"?(\w+)", re.I)

db_query_seconds = Histogram(
    "db_query_seconds",
    "Database statement latency",
    ["db", "verb"],
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 1.0),
)

logger = logging.getLogger("obs.db")


def _describe(statement: str) -> tuple[str, str]:
    verb = statement.lstrip().split(" ", 1)[0].upper() or "?"
    match = _TABLE_RE.search(statement)
    return verb, match.group(1) if match else "?"


def add_query_logger(engine: AsyncEngine, label: str) -> None:
    """Attach statement timing to ``engine``; ``label`` tags the database."""

    sync_engine = engine.sync_engine

    @event.listens_for(sync_engine, "before_cursor_execute")
    def _start(conn, cursor, statement, parameters, context, executemany):
        context._order_query_t0 = time.perf_counter()

    @event.listens_for(sync_engine, "after_cursor_execute")
    def _finish(conn, cursor, statement, parameters, context, executemany):
        elapsed = time.perf_counter() - context._order_query_t0
        verb, table = _describe(statement)
        db_query_seconds.labels(label, verb).observe(elapsed)
        if elapsed * 1000 < SLOW_QUERY_MS:
            return
        digest = hashlib.sha256(repr(parameters).encode()).hexdigest()[:8]
        logger.warning(
            "slow %s on %s: %dms db=%s params=%s",
            verb,
            table,
            int(elapsed * 1000),
            label,
            digest,
        )
