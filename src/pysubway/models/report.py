"""Community report models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pysubway.models._base import SubwayBaseModel, SubwayEnum, SubwayTimestamp, line_code


class IssueType(SubwayEnum):
    MAJOR_DELAY = "major_delay"
    MINOR_DELAY = "minor_delay"
    SERVICE_CHANGE = "service_change"
    OVERCROWDING = "overcrowding"
    MECHANICAL = "mechanical"
    RUNNING_FINE = "running_fine"
    UNKNOWN = "unknown"


class Report(SubwayBaseModel):
    """A user-submitted report.

    Reports are created by :meth:`SubwayClient.submit_report` and only ever
    mutated server-side (upvotes). The backend limits visibility to the
    last two hours.
    """

    id: int
    line: str
    issue_type: IssueType = IssueType.UNKNOWN
    description: str = ""
    upvotes: int = Field(default=0, ge=0)
    created_at: SubwayTimestamp = None

    @field_validator("line", mode="before")
    @classmethod
    def _coerce_line(cls, value: Any) -> Any:
        return line_code(value)


class ReportRequest(BaseModel):
    """Body of ``POST /api/reports``."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    line: str
    issue_type: IssueType
    description: str = ""


class UpvoteAck(SubwayBaseModel):
    """Acknowledgement of ``POST /api/reports/{id}/upvote``.

    The backend body is informational only; the authoritative count is
    re-read from the report list.
    """

    message: str | None = None
    upvotes: int | None = None


class ReportDraft(BaseModel):
    """Unsent report form of an open interaction session."""

    model_config = ConfigDict(frozen=True)

    issue_type: IssueType = IssueType.MINOR_DELAY
    description: str = ""
