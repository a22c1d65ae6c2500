"""pysubway - Async client-side state layer for a real-time subway delay dashboard."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pysubway")
except PackageNotFoundError:
    __version__ = "0+local"

from pysubway.catalog import LineCatalog
from pysubway.client import SubwayClient
from pysubway.config import SubwayConfig
from pysubway.dashboard import Dashboard
from pysubway.display import CardStatus, RushHourHint, card_status, rush_hour_hint, time_ago, truncate_header
from pysubway.exceptions import (
    SubwayConfigError,
    SubwayDecodeError,
    SubwayError,
    SubwayNetworkError,
    SubwayValidationError,
)
from pysubway.models import (
    Alert,
    AlertType,
    IssueType,
    LineCard,
    LineStatus,
    Report,
    ReportDraft,
    Stats,
    SubscriptionResponse,
    UpvoteAck,
)
from pysubway.scheduler import PollingScheduler, SchedulerState
from pysubway.session import InteractionSession, SessionState
from pysubway.state.events import DataSource, SourceCommit
from pysubway.state.store import ViewModelStore
from pysubway.subscription import SubscriptionFlow, SubscriptionState, validate_email

__all__ = [
    "__version__",
    "Alert",
    "AlertType",
    "CardStatus",
    "Dashboard",
    "DataSource",
    "InteractionSession",
    "IssueType",
    "LineCard",
    "LineCatalog",
    "LineStatus",
    "PollingScheduler",
    "Report",
    "ReportDraft",
    "RushHourHint",
    "SchedulerState",
    "SessionState",
    "SourceCommit",
    "Stats",
    "SubscriptionFlow",
    "SubscriptionResponse",
    "SubscriptionState",
    "SubwayClient",
    "SubwayConfig",
    "SubwayConfigError",
    "SubwayDecodeError",
    "SubwayError",
    "SubwayNetworkError",
    "SubwayValidationError",
    "UpvoteAck",
    "ViewModelStore",
    "card_status",
    "rush_hour_hint",
    "time_ago",
    "truncate_header",
    "validate_email",
]
