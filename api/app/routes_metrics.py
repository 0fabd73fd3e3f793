# routes_metrics.py

"""Prometheus metrics and /metrics endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

orders_created_total = Counter("orders_created_total", "Total orders created")
orders_created_total.inc(0)

order_transitions_total = Counter(
    "order_transitions_total",
    "Order status transition attempts",
    ["from_status", "to_status", "outcome"],
)

order_lookups_total = Counter(
    "order_lookups_total", "Public order lookups", ["key"]
)

http_errors_total = Counter("http_errors_total", "Total HTTP errors", ["code"])

router = APIRouter()


@router.get("/metrics")
async def metrics_endpoint() -> Response:
    """Expose Prometheus metrics."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
