"""Internal constants shared across the library."""

BASE_URL = "https://web-production-2afb5.up.railway.app"
USER_AGENT = "pysubway/1 (+aiohttp)"

#: Seconds between two poll cycles.
DEFAULT_POLL_INTERVAL: float = 60.0
#: Size of the cross-line community feed.
DEFAULT_RECENT_REPORTS_LIMIT: int = 8
#: Number of lines shown in the "most delayed" ranking.
DEFAULT_TOP_LINES_LIMIT: int = 10
DEFAULT_REQUEST_TIMEOUT: float = 15.0

SUBSCRIBE_FALLBACK_MESSAGE = "Subscribed!"
SUBSCRIBE_FAILURE_MESSAGE = "Something went wrong, try again"
INVALID_EMAIL_MESSAGE = "Please enter a valid email"

ALERT_HEADER_MAX_CHARS = 60
