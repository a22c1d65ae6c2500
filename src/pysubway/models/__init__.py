"""Data models for backend API responses and derived views."""

from pysubway.models._base import SubwayBaseModel, SubwayEnum, SubwayTimestamp, parse_timestamp
from pysubway.models.alert import Alert, AlertType
from pysubway.models.line import LineCard, LineStatus
from pysubway.models.report import IssueType, Report, ReportDraft, ReportRequest, UpvoteAck
from pysubway.models.stats import Stats
from pysubway.models.subscription import SubscriptionRequest, SubscriptionResponse

__all__ = [
    "Alert",
    "AlertType",
    "IssueType",
    "LineCard",
    "LineStatus",
    "Report",
    "ReportDraft",
    "ReportRequest",
    "Stats",
    "SubscriptionRequest",
    "SubscriptionResponse",
    "SubwayBaseModel",
    "SubwayEnum",
    "SubwayTimestamp",
    "UpvoteAck",
    "parse_timestamp",
]
