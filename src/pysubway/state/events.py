"""Source commits.

Every refresh of a polled source ends in one of these commits. Only the
store layer is allowed to apply them.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DataSource(StrEnum):
    """Globally polled sources, one store slice each."""

    LINES = "lines"
    STATS = "stats"
    RECENT_REPORTS = "recent_reports"
    ALERTS = "alerts"


class SourceCommit(BaseModel):
    """The result of one refresh, tagged with the sequence issued before its request."""

    model_config = ConfigDict(frozen=True)

    source: DataSource
    sequence: int = Field(..., ge=1, description="Sequence number from ViewModelStore.begin()")
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    data: Any = None
