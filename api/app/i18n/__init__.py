"""Localized labels for order statuses and delivery types.

Catalogs are JSON files shipped next to this module, one per language, with
nested sections addressed by dotted keys (``status.READY``). Lookups that
miss in the requested language fall back to English.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, List, Optional

DEFAULT_LANG = "en"
SUPPORTED_LANGS = ("en", "fr")


@lru_cache(maxsize=None)
def get_catalog(lang: str) -> Dict[str, Any]:
    """Return the parsed catalog for ``lang`` (English if unsupported)."""

    if lang not in SUPPORTED_LANGS:
        lang = DEFAULT_LANG
    source = resources.files(__name__).joinpath(f"{lang}.json")
    return json.loads(source.read_text(encoding="utf-8"))


def _lookup(catalog: Dict[str, Any], key: str) -> Optional[str]:
    node: Any = catalog
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


def get_msg(lang: str, key: str, **fmt: Any) -> str:
    """Message for dotted ``key`` in ``lang``; empty string when unknown."""

    msg = _lookup(get_catalog(lang), key)
    if msg is None:
        msg = _lookup(get_catalog(DEFAULT_LANG), key) or ""
    return msg.format(**fmt) if fmt else msg


def _ranked(accept_language: str) -> List[str]:
    """Primary language tags from an ``Accept-Language`` header, best first."""

    ranked = []
    for pos, item in enumerate(accept_language.split(",")):
        tag, _, params = item.strip().partition(";")
        if not tag:
            continue
        weight = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                weight = float(params[2:])
            except ValueError:
                weight = 0.0
        ranked.append((-weight, pos, tag.split("-")[0].lower()))
    return [lang for _, _, lang in sorted(ranked)]


def resolve_lang(accept_language: Optional[str], default: Optional[str] = None) -> str:
    """Best supported language for a request, else ``default``, else English."""

    for lang in _ranked(accept_language or ""):
        if lang in SUPPORTED_LANGS:
            return lang
    if default in SUPPORTED_LANGS:
        return default
    return DEFAULT_LANG
