"""Helpers for safe debug logging.

Subscription bodies carry email addresses and report descriptions are
free text of any length. Everything logged at DEBUG passes through
:func:`redact_for_log` first.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_MASKED = "<redacted>"
_MAX_DEPTH = 8

# Header-like keys whose values are never logged.
_SECRET_KEYS: frozenset[str] = frozenset({"authorization", "cookie", "set-cookie"})


def mask_email(value: str) -> str:
    """``"rider@example.com"`` -> ``"r***@example.com"``."""
    local, at, domain = value.partition("@")
    if not at:
        return _MASKED
    return f"{local[:1]}***@{domain}"


def _clip(text: str, max_string: int) -> str:
    if len(text) <= max_string:
        return text
    return f"{text[:max_string]}…<truncated>"


def _redact_entry(key: str, value: Any, max_string: int, depth: int) -> Any:
    lowered = key.lower()
    if lowered in _SECRET_KEYS:
        return _MASKED
    if lowered == "email":
        return mask_email(value) if isinstance(value, str) else _MASKED
    return redact_for_log(value, max_string=max_string, _depth=depth + 1)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a copy of a JSON-like *value* that is safe to log."""
    if _depth > _MAX_DEPTH:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return _clip(value, max_string)
    if isinstance(value, Mapping):
        return {str(k): _redact_entry(str(k), v, max_string, _depth) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]
    return _clip(repr(value), max_string)
