"""Base model and enum for backend API responses.

Every response model inherits from :class:`SubwayBaseModel` which
provides:

* frozen, extra-tolerant pydantic configuration
* a ``model_validator(mode="before")`` that drops ``None`` values so
  the field default is used
* a ``raw`` dict that captures the original payload

Enumerations inherit from :class:`SubwayEnum` which adds an ``UNKNOWN``
member and a ``_missing_`` hook that returns ``UNKNOWN`` for values the
backend sends without a mapped member.
"""

from __future__ import annotations

import enum
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def parse_timestamp(value: Any) -> datetime | None:
    """Coerce an API timestamp to a timezone-aware UTC datetime.

    Accepts ISO-8601 strings (``"2026-01-01T08:00:00"`` or with offset),
    epoch seconds/milliseconds and datetimes. Naive values are treated
    as UTC. Empty strings become ``None``.
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = int(value)
        if ts >= _MS_THRESHOLD:
            ts = ts // 1000
        value = datetime.fromtimestamp(ts, tz=UTC)
    if isinstance(value, datetime) and value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


SubwayTimestamp = Annotated[datetime | None, BeforeValidator(parse_timestamp)]
"""Annotated type that coerces API timestamps to UTC datetimes."""


class SubwayEnum(enum.StrEnum):
    """Base for backend string enums.

    Every subclass **must** define ``UNKNOWN = "unknown"``.
    """

    @classmethod
    def _missing_(cls, value: object) -> SubwayEnum:
        unknown: SubwayEnum = cls["UNKNOWN"]
        return unknown


class SubwayBaseModel(BaseModel):
    """Base for backend response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True, repr=False)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        """Drop ``null`` values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        # Keep a caller-provided raw (kwargs construction); otherwise stash the payload.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned


def decimal_text(value: Any) -> Any:
    """Keep decimal fields textual; bare numbers are rendered with one decimal."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:.1f}"
    return value


def line_code(value: Any) -> Any:
    """Numbered lines sometimes arrive as JSON integers."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value
