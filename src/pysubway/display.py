"""Display conditions for the dashboard.

Only the *conditions* live here (which state a card is in, which hint
applies, how old a report is). Wording is a presentation concern; the
enum ``message`` properties carry the dashboard's default English text.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pysubway._constants import ALERT_HEADER_MAX_CHARS


class CardStatus(StrEnum):
    """Summary line of a line card, by precedence."""

    DELAYS = "delays"
    ALERT = "alert"
    NO_DELAYS = "no_delays"


def card_status(total_delays: int, alert_count: int) -> CardStatus:
    """Recorded delays win over alerts; alerts win over the all-clear."""
    if total_delays > 0:
        return CardStatus.DELAYS
    if alert_count > 0:
        return CardStatus.ALERT
    return CardStatus.NO_DELAYS


def time_ago(timestamp: datetime, now: datetime | None = None) -> str:
    """Bucket the age of *timestamp* in whole minutes.

    ``0-59s`` is ``"just now"``, ``60-119s`` is ``"1 min ago"``, after that
    ``"N mins ago"``. Timestamps in the future count as just now.
    """
    if now is None:
        now = datetime.now(UTC)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    minutes = int((now - timestamp).total_seconds() // 60)
    if minutes < 1:
        return "just now"
    if minutes == 1:
        return "1 min ago"
    return f"{minutes} mins ago"


class RushHourHint(StrEnum):
    """Why there may be no delay data yet, by local time of day."""

    WEEKEND = "weekend"
    BEFORE_MORNING = "before_morning"
    MORNING_RUSH = "morning_rush"
    MIDDAY = "midday"
    EVENING_RUSH = "evening_rush"
    NIGHT = "night"

    @property
    def message(self) -> str:
        return _RUSH_HOUR_MESSAGES[self]


_RUSH_HOUR_MESSAGES: dict[RushHourHint, str] = {
    RushHourHint.WEEKEND: "Check back on a weekday during rush hour!",
    RushHourHint.BEFORE_MORNING: "Check back during morning rush hour (7-9am)!",
    RushHourHint.MORNING_RUSH: "Rush hour is now - data should appear shortly!",
    RushHourHint.MIDDAY: "Check back during evening rush hour (4-7pm)!",
    RushHourHint.EVENING_RUSH: "Evening rush hour is now - data should appear shortly!",
    RushHourHint.NIGHT: "Check back during rush hour tomorrow morning (7-9am)!",
}


def rush_hour_hint(now: datetime) -> RushHourHint:
    """Pick the empty-chart hint for the local wall-clock time *now*."""
    if now.weekday() >= 5:
        return RushHourHint.WEEKEND
    hour = now.hour
    if hour < 7:
        return RushHourHint.BEFORE_MORNING
    if hour < 10:
        return RushHourHint.MORNING_RUSH
    if hour < 16:
        return RushHourHint.MIDDAY
    if hour < 19:
        return RushHourHint.EVENING_RUSH
    return RushHourHint.NIGHT


def truncate_header(text: str, limit: int = ALERT_HEADER_MAX_CHARS) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text
