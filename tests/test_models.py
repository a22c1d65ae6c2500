"""Tests for pydantic response models."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from pysubway.display import CardStatus
from pysubway.models import (
    Alert,
    AlertType,
    IssueType,
    LineCard,
    LineStatus,
    Report,
    Stats,
    SubscriptionResponse,
    UpvoteAck,
    parse_timestamp,
)


class TestTimestamps:
    def test_naive_iso_is_utc(self) -> None:
        assert parse_timestamp("2026-03-10T08:30:00") == datetime(2026, 3, 10, 8, 30, tzinfo=UTC)

    def test_zulu_suffix(self) -> None:
        assert parse_timestamp("2026-03-10T08:30:00Z") == datetime(2026, 3, 10, 8, 30, tzinfo=UTC)

    def test_epoch_milliseconds(self) -> None:
        assert parse_timestamp(1_773_131_400_000) == parse_timestamp(1_773_131_400)

    def test_empty_string_is_none(self) -> None:
        assert parse_timestamp("") is None


class TestLineStatus:
    def test_parses_server_row(self) -> None:
        status = LineStatus.model_validate(
            {"line": "A", "total_delays": 5, "avg_delay": "3.2", "max_delay": 12, "last_updated": None}
        )
        assert status.line == "A"
        assert status.total_delays == 5
        assert status.avg_delay == "3.2"
        assert status.max_delay == 12
        assert status.last_updated is None
        assert status.raw["avg_delay"] == "3.2"

    def test_numeric_line_and_avg_are_coerced(self) -> None:
        status = LineStatus.model_validate({"line": 4, "total_delays": 1, "avg_delay": 2, "max_delay": 2})
        assert status.line == "4"
        assert status.avg_delay == "2.0"

    def test_negative_counts_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LineStatus.model_validate({"line": "A", "total_delays": -1})


class TestReport:
    def test_unknown_issue_type_falls_back(self) -> None:
        report = Report.model_validate({"id": 1, "line": "L", "issue_type": "aliens", "upvotes": 0})
        assert report.issue_type is IssueType.UNKNOWN
        assert report.raw["issue_type"] == "aliens"

    def test_null_description_uses_default(self) -> None:
        report = Report.model_validate(
            {"id": 7, "line": "Q", "issue_type": "overcrowding", "description": None, "upvotes": 3}
        )
        assert report.description == ""
        assert report.issue_type is IssueType.OVERCROWDING

    def test_frozen(self) -> None:
        report = Report.model_validate({"id": 1, "line": "L", "issue_type": "mechanical"})
        with pytest.raises(ValidationError):
            report.upvotes = 5  # type: ignore[misc]


def test_alert_type_enum_and_unknown() -> None:
    alert = Alert.model_validate({"id": 1, "line": "F", "alert_type": "planned_work", "header": "Weekend work"})
    assert alert.alert_type is AlertType.PLANNED_WORK
    odd = Alert.model_validate({"id": 2, "line": "F", "alert_type": "meteor", "header": "?"})
    assert odd.alert_type is AlertType.UNKNOWN


def test_stats_numeric_average_is_textual() -> None:
    stats = Stats.model_validate({"total_delays_recorded": 1200, "lines_tracked": 18, "overall_avg_delay": 4.31})
    assert stats.overall_avg_delay == "4.3"
    assert stats.last_scrape is None


def test_ack_and_subscription_tolerate_sparse_bodies() -> None:
    assert UpvoteAck.model_validate({}).upvotes is None
    assert SubscriptionResponse.model_validate({}).message == ""


class TestLineCard:
    def _alert(self) -> Alert:
        return Alert.model_validate({"id": 1, "line": "G", "alert_type": "delay", "header": "Signal problems"})

    def test_placeholder_is_flagged_no_data(self) -> None:
        card = LineCard.placeholder("G")
        assert (card.total_delays, card.avg_delay, card.max_delay, card.has_data) == (0, "0.0", 0, False)
        assert card.status is CardStatus.NO_DELAYS
        assert card.headline_alert is None

    def test_alert_badge_without_delays(self) -> None:
        card = LineCard.placeholder("G", (self._alert(),))
        assert card.status is CardStatus.ALERT
        assert card.headline_alert is not None
        assert card.headline_alert.header == "Signal problems"

    def test_delays_take_precedence_over_alerts(self) -> None:
        status = LineStatus.model_validate({"line": "G", "total_delays": 2, "avg_delay": "1.5", "max_delay": 3})
        card = LineCard.from_status(status, (self._alert(),))
        assert card.has_data
        assert card.status is CardStatus.DELAYS
