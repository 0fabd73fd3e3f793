"""Observability: error sink, slow query logging and JSON log formatting.

``configure_logging`` lives in :mod:`.logging` and is imported from there
directly by the application factory.
"""

from .errors import capture_exception, init_sentry
from .queries import add_query_logger

__all__ = ["add_query_logger", "capture_exception", "init_sentry"]
