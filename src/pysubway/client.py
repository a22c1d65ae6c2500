"""High-level async client for the subway delay backend."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import aiohttp

from pysubway._api import alerts as _alerts_api
from pysubway._api import lines as _lines_api
from pysubway._api import reports as _reports_api
from pysubway._api import subscribe as _subscribe_api
from pysubway._transport import HttpTransport, Transport
from pysubway.catalog import LineCatalog
from pysubway.config import SubwayConfig
from pysubway.exceptions import SubwayError
from pysubway.models.alert import Alert
from pysubway.models.line import LineStatus
from pysubway.models.report import IssueType, Report, UpvoteAck
from pysubway.models.stats import Stats
from pysubway.models.subscription import SubscriptionResponse

_logger = logging.getLogger(__name__)


class SubwayClient:
    """Async client for the delay-tracker API.

    Every method raises :class:`~pysubway.exceptions.SubwayNetworkError`
    or :class:`~pysubway.exceptions.SubwayDecodeError` on failure; there
    is no retry. Usage::

        async with SubwayClient(config) as client:
            lines = await client.fetch_lines()

    A ready-made *transport* can be injected instead of an aiohttp
    session (used by tests and by callers with their own HTTP stack).
    """

    def __init__(
        self,
        config: SubwayConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config if config is not None else SubwayConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None

    @property
    def config(self) -> SubwayConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SubwayClient:
        if self._external_transport:
            return self
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._external_transport:
            return
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise SubwayError("Client not initialized. Use 'async with SubwayClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------

    async def fetch_lines(self) -> list[LineStatus]:
        """Fetch per-line delay aggregates, in server ranking order."""
        return await _lines_api.fetch_lines(self._require_transport())

    async def fetch_stats(self) -> Stats:
        """Fetch dashboard-wide counters."""
        return await _lines_api.fetch_stats(self._require_transport())

    async def fetch_reports_for_line(self, line: str) -> list[Report]:
        """Fetch the last two hours of reports for *line*, newest first."""
        return await _reports_api.fetch_reports_for_line(self._require_transport(), line)

    async def fetch_recent_reports(self, limit: int | None = None) -> list[Report]:
        """Fetch the cross-line community feed."""
        if limit is None:
            limit = self._config.recent_reports_limit
        return await _reports_api.fetch_recent_reports(self._require_transport(), limit)

    async def fetch_alerts_for_line(self, line: str) -> list[Alert]:
        """Fetch active transit alerts for *line*."""
        return await _alerts_api.fetch_alerts_for_line(self._require_transport(), line)

    async def fetch_all_alerts(self, catalog: LineCatalog | Iterable[str]) -> dict[str, list[Alert]]:
        """Fetch alerts for every catalog line concurrently.

        Only lines with at least one alert appear in the result.
        """
        return await _alerts_api.fetch_all_alerts(self._require_transport(), catalog)

    # ------------------------------------------------------------------
    # Write endpoints
    # ------------------------------------------------------------------

    async def submit_report(
        self,
        line: str,
        issue_type: IssueType | str,
        description: str = "",
    ) -> Report:
        """Create a report; returns the server-assigned record."""
        report = await _reports_api.submit_report(self._require_transport(), line, issue_type, description)
        _logger.debug("Report %s created for line=%s", report.id, line)
        return report

    async def upvote_report(self, report_id: int) -> UpvoteAck:
        """Increment a report's upvotes.

        The endpoint is not idempotent; deduplication is the caller's job
        (see :class:`pysubway.session.InteractionSession`).
        """
        return await _reports_api.upvote_report(self._require_transport(), report_id)

    async def subscribe(self, email: str, line: str) -> SubscriptionResponse:
        """Register *email* for delay notifications on *line*."""
        return await _subscribe_api.subscribe(self._require_transport(), email, line)
