"""Per-line interaction session.

Selecting a line opens the session for it: the line's reports and alerts
are fetched into session-scoped slices, a report draft is started, and
report submission runs through a small state machine::

    CLOSED -> IDLE -> SUBMITTING -> SUBMITTED -> IDLE -> ... -> CLOSED
                          |
                          +-> IDLE (failure, draft kept)

Closing discards everything except the upvoted-report set, which lives
as long as the :class:`InteractionSession` object itself.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pysubway.catalog import LineCatalog
from pysubway.client import SubwayClient
from pysubway.exceptions import SubwayError, SubwayValidationError
from pysubway.models.alert import Alert
from pysubway.models.report import IssueType, Report, ReportDraft
from pysubway.state.lifetime import Lifetime
from pysubway.state.policy import should_accept_commit
from pysubway.state.store import SourceSnapshot
from pysubway.subscription import SubscriptionFlow

_logger = logging.getLogger(__name__)


class SessionState(StrEnum):
    CLOSED = "closed"
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


class DetailSlice(StrEnum):
    REPORTS = "reports"
    ALERTS = "alerts"


async def _refresh_feed(refresher: Callable[[], Awaitable[Any]]) -> None:
    try:
        await refresher()
    except SubwayError as exc:
        _logger.warning("Failed to refresh recent reports: %s", exc)


@dataclass
class _OpenLine:
    """Everything that is thrown away when the session closes."""

    line: str
    lifetime: Lifetime
    state: SessionState = SessionState.IDLE
    draft: ReportDraft = field(default_factory=ReportDraft)
    snapshots: dict[DetailSlice, SourceSnapshot] = field(
        default_factory=lambda: {part: SourceSnapshot(data=()) for part in DetailSlice}
    )
    issued: dict[DetailSlice, int] = field(default_factory=lambda: dict.fromkeys(DetailSlice, 0))
    subscription: SubscriptionFlow | None = None


class InteractionSession:
    """Detail view state for the currently selected line.

    Parameters
    ----------
    client : SubwayClient
        Client used for the session's own fetches and writes.
    catalog : LineCatalog
        Lines that may be opened.
    feed_refresher : callable, optional
        Coroutine function refreshing the dashboard's recent-reports feed;
        awaited after a successful submission.
    """

    def __init__(
        self,
        client: SubwayClient,
        catalog: LineCatalog,
        *,
        feed_refresher: Callable[[], Awaitable[Any]] | None = None,
    ) -> None:
        self._client = client
        self._catalog = catalog
        self._feed_refresher = feed_refresher
        self._open: _OpenLine | None = None
        self._upvoted: set[int] = set()
        self._upvotes_in_flight: set[int] = set()
        # Highest upvote count shown per report; displayed counts never go down.
        self._upvote_floor: dict[int, int] = {}
        self._last_error: SubwayError | None = None

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._open.state if self._open is not None else SessionState.CLOSED

    @property
    def line(self) -> str | None:
        return self._open.line if self._open is not None else None

    @property
    def is_open(self) -> bool:
        return self._open is not None

    @property
    def draft(self) -> ReportDraft | None:
        return self._open.draft if self._open is not None else None

    @property
    def reports(self) -> tuple[Report, ...]:
        if self._open is None:
            return ()
        data: tuple[Report, ...] = self._open.snapshots[DetailSlice.REPORTS].data
        return data

    @property
    def alerts(self) -> tuple[Alert, ...]:
        if self._open is None:
            return ()
        data: tuple[Alert, ...] = self._open.snapshots[DetailSlice.ALERTS].data
        return data

    @property
    def upvoted_ids(self) -> frozenset[int]:
        return frozenset(self._upvoted)

    def has_upvoted(self, report_id: int) -> bool:
        return report_id in self._upvoted

    @property
    def last_error(self) -> SubwayError | None:
        """Error of the most recent failed submit/upvote, cleared on success."""
        return self._last_error

    # ------------------------------------------------------------------
    # Open / close
    # ------------------------------------------------------------------

    async def open(self, line: str) -> None:
        """Select *line*: reset the draft and load its reports and alerts.

        Returns once both detail fetches have finished (or failed, or been
        cancelled by :meth:`close`).
        """
        if line not in self._catalog:
            raise SubwayValidationError(f"unknown line {line!r}", field="line")
        self.close()
        opened = _OpenLine(line=line, lifetime=Lifetime(f"session-{line}"))
        self._open = opened
        _logger.debug("Session opened for line %s", line)

        tasks = [
            opened.lifetime.spawn(self._refresh(opened, DetailSlice.REPORTS)),
            opened.lifetime.spawn(self._refresh(opened, DetailSlice.ALERTS)),
        ]
        await asyncio.wait(tasks)

    def close(self) -> None:
        """Discard the open line's state; the upvoted set survives."""
        opened = self._open
        if opened is None:
            return
        self._open = None
        opened.lifetime.close()
        _logger.debug("Session closed for line %s", opened.line)

    # ------------------------------------------------------------------
    # Detail fetches
    # ------------------------------------------------------------------

    async def refresh_reports(self) -> bool:
        """Re-fetch the open line's reports. Returns whether they were replaced."""
        opened = self._open
        if opened is None:
            return False
        task = opened.lifetime.spawn(self._refresh(opened, DetailSlice.REPORTS))
        await asyncio.wait([task])
        return not task.cancelled() and task.result()

    async def _refresh(self, opened: _OpenLine, part: DetailSlice) -> bool:
        opened.issued[part] += 1
        sequence = opened.issued[part]
        data: tuple[Any, ...]
        try:
            if part is DetailSlice.REPORTS:
                data = self._apply_upvote_floor(await self._client.fetch_reports_for_line(opened.line))
            else:
                data = tuple(await self._client.fetch_alerts_for_line(opened.line))
        except SubwayError as exc:
            _logger.warning("Failed to fetch %s for line %s: %s", part, opened.line, exc)
            return False

        snapshot = opened.snapshots[part]
        if not should_accept_commit(
            incoming_sequence=sequence,
            committed_sequence=snapshot.sequence,
            closed=opened.lifetime.closed,
        ):
            return False
        opened.snapshots[part] = SourceSnapshot(data=data, sequence=sequence)
        return True

    def _apply_upvote_floor(self, reports: list[Report]) -> tuple[Report, ...]:
        shown: list[Report] = []
        for report in reports:
            floor = self._upvote_floor.get(report.id, 0)
            if report.upvotes < floor:
                report = report.model_copy(update={"upvotes": floor})
            else:
                self._upvote_floor[report.id] = report.upvotes
            shown.append(report)
        return tuple(shown)

    # ------------------------------------------------------------------
    # Report submission
    # ------------------------------------------------------------------

    def update_draft(self, *, issue_type: IssueType | str | None = None, description: str | None = None) -> None:
        opened = self._require_open()
        changes: dict[str, Any] = {}
        if issue_type is not None:
            issue = IssueType(issue_type)
            if issue is IssueType.UNKNOWN:
                raise SubwayValidationError(f"unknown issue type {issue_type!r}", field="issue_type")
            changes["issue_type"] = issue
        if description is not None:
            changes["description"] = description
        opened.draft = opened.draft.model_copy(update=changes)

    async def submit_report(self) -> Report | None:
        """Send the draft for the open line.

        No-op (``None``) when no line is open or a submission is already
        in flight or confirmed. On failure the draft is kept so it can be
        retried as-is.
        """
        opened = self._open
        if opened is None or opened.state is not SessionState.IDLE:
            return None

        opened.state = SessionState.SUBMITTING
        draft = opened.draft
        try:
            report = await self._client.submit_report(opened.line, draft.issue_type, draft.description)
        except SubwayError as exc:
            _logger.warning("Failed to submit report for line %s: %s", opened.line, exc)
            self._last_error = exc
            opened.state = SessionState.IDLE
            return None

        self._last_error = None
        if opened.lifetime.closed:
            return report
        opened.state = SessionState.SUBMITTED

        tasks = [opened.lifetime.spawn(self._refresh(opened, DetailSlice.REPORTS))]
        if self._feed_refresher is not None:
            tasks.append(opened.lifetime.spawn(_refresh_feed(self._feed_refresher)))
        await asyncio.wait(tasks)
        return report

    def submit_another(self) -> None:
        """Leave the confirmation and show the form again."""
        opened = self._require_open()
        if opened.state is SessionState.SUBMITTED:
            opened.state = SessionState.IDLE

    # ------------------------------------------------------------------
    # Upvotes
    # ------------------------------------------------------------------

    async def upvote(self, report_id: int) -> bool:
        """Upvote a report at most once per session.

        Already upvoted (or currently being upvoted) ids return ``False``
        without a request: the endpoint itself is not idempotent. On success
        the open line's reports are re-fetched for the authoritative count.
        """
        if report_id in self._upvoted or report_id in self._upvotes_in_flight:
            _logger.debug("Report %s already upvoted, skipping", report_id)
            return False

        self._upvotes_in_flight.add(report_id)
        try:
            await self._client.upvote_report(report_id)
        except SubwayError as exc:
            _logger.warning("Failed to upvote report %s: %s", report_id, exc)
            self._last_error = exc
            return False
        else:
            self._upvoted.add(report_id)
            self._last_error = None
        finally:
            self._upvotes_in_flight.discard(report_id)

        if self._open is not None:
            await self.refresh_reports()
        return True

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscription(self) -> SubscriptionFlow:
        """The subscription form for the open line (one per open)."""
        opened = self._require_open()
        if opened.subscription is None:
            opened.subscription = SubscriptionFlow(self._client, opened.line)
        return opened.subscription

    def _require_open(self) -> _OpenLine:
        if self._open is None:
            raise SubwayError("No line is open")
        return self._open
