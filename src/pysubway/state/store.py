"""Deterministic in-memory view-model store.

This is the only component allowed to commit results of the polled
sources, and the one that derives the catalog-complete views from them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict

from pysubway._constants import DEFAULT_TOP_LINES_LIMIT
from pysubway.catalog import LineCatalog
from pysubway.display import RushHourHint, rush_hour_hint
from pysubway.models.alert import Alert
from pysubway.models.line import LineCard, LineStatus
from pysubway.models.report import Report
from pysubway.models.stats import Stats
from pysubway.state.events import DataSource, SourceCommit
from pysubway.state.policy import should_accept_commit

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SourceSnapshot(BaseModel):
    """Latest committed value of one source."""

    model_config = ConfigDict(extra="forbid")

    data: Any = None
    sequence: int = 0
    committed_at: datetime | None = None


def _normalize_alerts(data: Mapping[str, Any]) -> Mapping[str, tuple[Alert, ...]]:
    """Drop lines without alerts; an empty result is absence, not an empty list."""
    return MappingProxyType({line: tuple(alerts) for line, alerts in data.items() if alerts})


_NORMALIZERS: dict[DataSource, Callable[[Any], Any]] = {
    DataSource.LINES: tuple,
    DataSource.STATS: lambda stats: stats,
    DataSource.RECENT_REPORTS: tuple,
    DataSource.ALERTS: _normalize_alerts,
}

_EMPTY: dict[DataSource, Any] = {
    DataSource.LINES: (),
    DataSource.STATS: None,
    DataSource.RECENT_REPORTS: (),
    DataSource.ALERTS: MappingProxyType({}),
}


class ViewModelStore:
    """Latest snapshot per :class:`DataSource` plus derived dashboard views.

    Writers call :meth:`begin` before issuing a request and hand the issued
    sequence number back in the :class:`SourceCommit`. A commit is only
    applied when its sequence is the newest seen for that source, so the
    result is independent of response arrival order. Only the latest
    snapshot is kept.
    """

    def __init__(
        self,
        catalog: LineCatalog,
        *,
        clock: Callable[[], datetime] = _utcnow,
        top_lines_limit: int = DEFAULT_TOP_LINES_LIMIT,
    ) -> None:
        self._catalog = catalog
        self._clock = clock
        self._top_lines_limit = top_lines_limit
        self._snapshots: dict[DataSource, SourceSnapshot] = {
            source: SourceSnapshot(data=_EMPTY[source]) for source in DataSource
        }
        self._issued: dict[DataSource, int] = dict.fromkeys(DataSource, 0)
        self._loading = True
        self._closed = False

    @property
    def catalog(self) -> LineCatalog:
        return self._catalog

    # ------------------------------------------------------------------
    # Commit protocol
    # ------------------------------------------------------------------

    def begin(self, source: DataSource) -> int:
        """Issue the next sequence number for a refresh of *source*."""
        self._issued[source] += 1
        return self._issued[source]

    def apply(self, commit: SourceCommit) -> bool:
        """Apply a refresh result. Returns whether it was accepted."""
        snapshot = self._snapshots[commit.source]
        if not should_accept_commit(
            incoming_sequence=commit.sequence,
            committed_sequence=snapshot.sequence,
            closed=self._closed,
        ):
            _logger.debug(
                "Discarded %s commit seq=%d (committed=%d closed=%s)",
                commit.source,
                commit.sequence,
                snapshot.sequence,
                self._closed,
            )
            return False

        self._snapshots[commit.source] = SourceSnapshot(
            data=_NORMALIZERS[commit.source](commit.data),
            sequence=commit.sequence,
            committed_at=self._clock(),
        )
        return True

    def mark_loaded(self) -> None:
        """The first poll cycle has finished, successfully or not."""
        self._loading = False

    def close(self) -> None:
        """Tear down: every later commit becomes a silent no-op."""
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def loading(self) -> bool:
        return self._loading

    def snapshot(self, source: DataSource) -> SourceSnapshot:
        return self._snapshots[source]

    # ------------------------------------------------------------------
    # Raw slices
    # ------------------------------------------------------------------

    @property
    def lines(self) -> tuple[LineStatus, ...]:
        data: tuple[LineStatus, ...] = self._snapshots[DataSource.LINES].data
        return data

    @property
    def stats(self) -> Stats | None:
        data: Stats | None = self._snapshots[DataSource.STATS].data
        return data

    @property
    def recent_reports(self) -> tuple[Report, ...]:
        data: tuple[Report, ...] = self._snapshots[DataSource.RECENT_REPORTS].data
        return data

    @property
    def alerts_by_line(self) -> Mapping[str, tuple[Alert, ...]]:
        data: Mapping[str, tuple[Alert, ...]] = self._snapshots[DataSource.ALERTS].data
        return data

    @property
    def last_refresh(self) -> datetime | None:
        """When the line aggregates were last replaced."""
        return self._snapshots[DataSource.LINES].committed_at

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def has_line_data(self) -> bool:
        return bool(self.lines)

    def line_cards(self) -> list[LineCard]:
        """One card per catalog line, in catalog order.

        Lines missing from the latest snapshot get a ``has_data=False``
        placeholder; lines the server reports outside the catalog are
        ignored.
        """
        by_line: dict[str, LineStatus] = {}
        for status in self.lines:
            by_line.setdefault(status.line, status)

        alerts = self.alerts_by_line
        cards: list[LineCard] = []
        for line in self._catalog:
            line_alerts = alerts.get(line, ())
            status = by_line.get(line)
            if status is None:
                cards.append(LineCard.placeholder(line, line_alerts))
            else:
                cards.append(LineCard.from_status(status, line_alerts))
        return cards

    def line_card(self, line: str) -> LineCard | None:
        for card in self.line_cards():
            if card.line == line:
                return card
        return None

    def top_lines(self, limit: int | None = None) -> list[LineStatus]:
        """Most delayed lines for the ranking chart, in server order."""
        if limit is None:
            limit = self._top_lines_limit
        return list(self.lines[:limit])

    def rush_hour_hint(self, now: datetime) -> RushHourHint | None:
        """Hint for the empty chart; ``None`` once there is line data."""
        if self.has_line_data:
            return None
        return rush_hour_hint(now)
