"""Aggregate statistics model."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from pysubway.models._base import SubwayBaseModel, SubwayTimestamp, decimal_text


class Stats(SubwayBaseModel):
    """Dashboard-wide counters (``GET /api/stats``), replaced wholesale each refresh."""

    total_delays_recorded: int = Field(default=0, ge=0)
    lines_tracked: int = Field(default=0, ge=0)
    overall_avg_delay: str = "0.0"
    last_scrape: SubwayTimestamp = None

    @field_validator("overall_avg_delay", mode="before")
    @classmethod
    def _coerce_avg(cls, value: Any) -> Any:
        return decimal_text(value)
