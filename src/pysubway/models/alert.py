"""Upstream service alert model."""

from __future__ import annotations

from pydantic import Field

from pysubway.models._base import SubwayBaseModel, SubwayEnum, SubwayTimestamp


class AlertType(SubwayEnum):
    DELAY = "delay"
    SUSPENDED = "suspended"
    STOPS_SKIPPED = "stops_skipped"
    EXPRESS_TO_LOCAL = "express_to_local"
    REDUCED_SERVICE = "reduced_service"
    PLANNED_WORK = "planned_work"
    SERVICE_CHANGE = "service_change"
    UNKNOWN = "unknown"


class Alert(SubwayBaseModel):
    """Active transit-feed alert for a line (``GET /api/alerts/{line}``).

    Alerts are externally sourced; the client never modifies them.
    """

    id: int | str
    line: str
    alert_type: AlertType = AlertType.UNKNOWN
    header: str = ""
    description: str = Field(default="")
    created_at: SubwayTimestamp = None
