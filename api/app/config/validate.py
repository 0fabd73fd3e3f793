"""Startup environment validation utilities."""

from __future__ import annotations

import logging
import os
from urllib.parse import urlparse

REQUIRED_ENVS = [
    "DATABASE_URL",
    "SECRET_KEY",
]

logger = logging.getLogger("api.config")


def _mask(value: str) -> str:
    """Return a masked representation of ``value`` for logging."""
    if len(value) <= 4:
        return "*" * len(value)
    return value[:2] + "*" * (len(value) - 4) + value[-2:]


def validate_on_boot() -> None:
    """Validate presence and basic format of required environment variables.

    Outside ``APP_ENV=prod`` missing variables only produce a warning since
    ``config.json`` supplies development defaults. In production a missing or
    malformed variable raises :class:`RuntimeError`.
    """

    env = os.getenv("APP_ENV", "dev")
    missing: list[str] = []
    for name in REQUIRED_ENVS:
        value = os.getenv(name)
        if not value:
            missing.append(name)
            continue

        if env == "prod":
            if name == "DATABASE_URL":
                parsed = urlparse(value)
                if not parsed.scheme or not (parsed.netloc or parsed.path):
                    raise RuntimeError(f"{name} must be a valid URL")
            if name == "SECRET_KEY" and len(value) < 32:
                raise RuntimeError("SECRET_KEY must be at least 32 characters long")

        logger.info("%s=%s", name, _mask(value))

    if missing:
        if env == "prod":
            raise RuntimeError(
                "Missing required environment variables: " + ", ".join(sorted(missing))
            )
        logger.warning(
            "using config.json defaults for: %s", ", ".join(sorted(missing))
        )
