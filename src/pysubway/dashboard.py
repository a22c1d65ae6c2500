"""One dashboard lifetime: client, store, scheduler and session wired together."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pysubway._transport import Transport
from pysubway.catalog import LineCatalog
from pysubway.client import SubwayClient
from pysubway.config import SubwayConfig
from pysubway.scheduler import PollingScheduler
from pysubway.session import InteractionSession
from pysubway.state.events import DataSource
from pysubway.state.store import ViewModelStore

_logger = logging.getLogger(__name__)


class Dashboard:
    """Top-level entry point.

    Usage::

        async with Dashboard(SubwayConfig.from_env()) as dashboard:
            await dashboard.scheduler.wait_until_loaded()
            for card in dashboard.store.line_cards():
                ...
            await dashboard.session.open("A")

    Entering starts polling; leaving closes the session, stops polling,
    tears the store down (late results are dropped) and releases the
    HTTP session.
    """

    def __init__(
        self,
        config: SubwayConfig | None = None,
        *,
        catalog: LineCatalog | None = None,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self.config = config if config is not None else SubwayConfig()
        self.catalog = catalog if catalog is not None else LineCatalog.default()
        self.client = SubwayClient(self.config, session=session, transport=transport)
        self.store = ViewModelStore(self.catalog, top_lines_limit=self.config.top_lines_limit)
        self.scheduler = PollingScheduler(self.client, self.store, self.config)
        self.session = InteractionSession(self.client, self.catalog, feed_refresher=self._refresh_feed)

    async def __aenter__(self) -> Dashboard:
        await self.client.__aenter__()
        self.scheduler.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.session.close()
        await self.scheduler.stop()
        self.store.close()
        await self.client.__aexit__(*exc)
        _logger.debug("Dashboard closed")

    async def _refresh_feed(self) -> bool:
        # Only refresh the feed while the dashboard is live (scheduler running).
        return await self.scheduler.refresh(DataSource.RECENT_REPORTS)
