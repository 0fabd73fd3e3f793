"""Dependency helpers for response language resolution."""

from typing import Optional

from fastapi import Header

from config import get_settings

from ..i18n import resolve_lang


def get_lang(accept_language: Optional[str] = Header(default=None)) -> str:
    """Return the best supported language for the ``Accept-Language`` header.

    Falls back to the configured ``default_lang``.
    """
    return resolve_lang(accept_language, get_settings().default_lang)
