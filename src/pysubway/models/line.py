"""Per-line delay statistics and the derived line-card row."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pysubway.display import CardStatus, card_status
from pysubway.models._base import SubwayBaseModel, SubwayTimestamp, decimal_text, line_code
from pysubway.models.alert import Alert

NO_DATA_AVG_DELAY = "0.0"


class LineStatus(SubwayBaseModel):
    """Server-side delay aggregate for one line (``GET /api/lines``)."""

    line: str
    total_delays: int = Field(default=0, ge=0)
    avg_delay: str = NO_DATA_AVG_DELAY
    """Average delay in minutes, kept as the decimal text the server sends."""
    max_delay: int = Field(default=0, ge=0)
    last_updated: SubwayTimestamp = None

    @field_validator("line", mode="before")
    @classmethod
    def _coerce_line(cls, value: Any) -> Any:
        return line_code(value)

    @field_validator("avg_delay", mode="before")
    @classmethod
    def _coerce_avg_delay(cls, value: Any) -> Any:
        return decimal_text(value)


class LineCard(BaseModel):
    """Display-ready row for one catalog line.

    Lines the server did not report get a zero placeholder with
    ``has_data=False`` so "no data" is never confused with "zero delays".
    """

    model_config = ConfigDict(frozen=True)

    line: str
    total_delays: int = 0
    avg_delay: str = NO_DATA_AVG_DELAY
    max_delay: int = 0
    last_updated: datetime | None = None
    has_data: bool = False
    alerts: tuple[Alert, ...] = ()

    @classmethod
    def placeholder(cls, line: str, alerts: tuple[Alert, ...] = ()) -> LineCard:
        return cls(line=line, alerts=alerts)

    @classmethod
    def from_status(cls, status: LineStatus, alerts: tuple[Alert, ...] = ()) -> LineCard:
        return cls(
            line=status.line,
            total_delays=status.total_delays,
            avg_delay=status.avg_delay,
            max_delay=status.max_delay,
            last_updated=status.last_updated,
            has_data=True,
            alerts=alerts,
        )

    @property
    def status(self) -> CardStatus:
        return card_status(self.total_delays, len(self.alerts))

    @property
    def headline_alert(self) -> Alert | None:
        """First active alert, shown as the card banner."""
        return self.alerts[0] if self.alerts else None
