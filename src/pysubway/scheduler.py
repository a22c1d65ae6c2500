"""Fixed-period polling of the dashboard-wide sources."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any

from pysubway.client import SubwayClient
from pysubway.config import SubwayConfig
from pysubway.exceptions import SubwayError
from pysubway.state.events import DataSource, SourceCommit
from pysubway.state.lifetime import Lifetime
from pysubway.state.store import ViewModelStore

_logger = logging.getLogger(__name__)

POLLED_SOURCES: tuple[DataSource, ...] = (
    DataSource.LINES,
    DataSource.STATS,
    DataSource.RECENT_REPORTS,
    DataSource.ALERTS,
)


def _outcome(source: DataSource, task: asyncio.Task[bool]) -> bool:
    if task.cancelled():
        return False
    exc = task.exception()
    if exc is not None:
        _logger.error("Unexpected error refreshing %s", source, exc_info=exc)
        return False
    return task.result()


class SchedulerState(StrEnum):
    IDLE = "idle"
    POLLING = "polling"


class PollingScheduler:
    """Drive one poll cycle immediately, then one every ``poll_interval`` seconds.

    Each cycle refreshes every source in :data:`POLLED_SOURCES`
    concurrently. Sources commit independently: a failing source keeps
    its previous snapshot while its siblings still commit. The timer is
    fixed-rate, so a slow cycle may overlap the next one; the store's
    sequence numbers keep the newest request authoritative.

    Usage::

        async with PollingScheduler(client, store):
            await scheduler.wait_until_loaded()
            ...
    """

    def __init__(
        self,
        client: SubwayClient,
        store: ViewModelStore,
        config: SubwayConfig | None = None,
    ) -> None:
        self._client = client
        self._store = store
        self._config = config if config is not None else client.config
        self._lifetime = Lifetime("poll")
        self._timer: asyncio.Task[None] | None = None
        self._cycles_in_flight = 0
        self._cycles_completed = 0
        self._loaded = asyncio.Event()
        self._fetchers: dict[DataSource, Callable[[], Awaitable[Any]]] = {
            DataSource.LINES: self._client.fetch_lines,
            DataSource.STATS: self._client.fetch_stats,
            DataSource.RECENT_REPORTS: lambda: self._client.fetch_recent_reports(self._config.recent_reports_limit),
            DataSource.ALERTS: lambda: self._client.fetch_all_alerts(self._store.catalog),
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> PollingScheduler:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def state(self) -> SchedulerState:
        return SchedulerState.POLLING if self._cycles_in_flight else SchedulerState.IDLE

    @property
    def cycles_completed(self) -> int:
        return self._cycles_completed

    def start(self) -> None:
        """Start polling. Must be called from within a running event loop."""
        if self.running:
            return
        if self._lifetime.closed:
            self._lifetime = Lifetime("poll")
        self._timer = asyncio.get_running_loop().create_task(self._run(self._lifetime), name="pysubway-poll-timer")
        _logger.debug("Polling started, interval=%.1fs", self._config.poll_interval)

    async def stop(self) -> None:
        """Cancel the timer and every in-flight refresh; late results are dropped."""
        timer = self._timer
        self._timer = None
        if timer is not None:
            timer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await timer
        self._lifetime.close()
        self._cycles_in_flight = 0
        # A cancelled first cycle must not leave waiters hanging.
        self._finish_loading()
        _logger.debug("Polling stopped after %d cycle(s)", self._cycles_completed)

    async def wait_until_loaded(self) -> None:
        """Wait for the first poll cycle to finish (with or without errors).

        Also returns once the scheduler is stopped before that happens.
        """
        await self._loaded.wait()

    def _finish_loading(self) -> None:
        if not self._loaded.is_set():
            self._store.mark_loaded()
            self._loaded.set()

    async def _run(self, lifetime: Lifetime) -> None:
        loop = asyncio.get_running_loop()
        interval = self._config.poll_interval
        next_tick = loop.time()
        while not lifetime.closed:
            lifetime.spawn(self._cycle(lifetime), name="pysubway-poll-cycle")
            next_tick += interval
            now = loop.time()
            if next_tick < now:
                # The loop stalled for more than a period; skip the missed ticks.
                next_tick = now
            await asyncio.sleep(next_tick - now)

    # ------------------------------------------------------------------
    # Cycles
    # ------------------------------------------------------------------

    async def poll_once(self) -> dict[DataSource, bool]:
        """Run a single cycle now and wait for all of its sources.

        Returns, per source, whether a new snapshot was committed.
        """
        if self._lifetime.closed:
            self._lifetime = Lifetime("poll")
        return await self._cycle(self._lifetime)

    async def _cycle(self, lifetime: Lifetime) -> dict[DataSource, bool]:
        self._cycles_in_flight += 1
        try:
            tasks = {
                source: lifetime.spawn(self._refresh(lifetime, source), name=f"pysubway-refresh-{source}")
                for source in POLLED_SOURCES
            }
            await asyncio.wait(tasks.values())
        finally:
            self._cycles_in_flight = max(0, self._cycles_in_flight - 1)

        results = {source: _outcome(source, task) for source, task in tasks.items()}
        self._cycles_completed += 1
        self._finish_loading()
        _logger.debug("Poll cycle %d done: %s", self._cycles_completed, results)
        return results

    async def refresh(self, source: DataSource) -> bool:
        """Refresh a single source on demand, e.g. after a report was submitted.

        Does nothing (returns ``False``) while the scheduler is not running.
        """
        if not self.running:
            return False
        lifetime = self._lifetime
        task = lifetime.spawn(self._refresh(lifetime, source), name=f"pysubway-refresh-{source}")
        await asyncio.wait([task])
        return _outcome(source, task)

    async def _refresh(self, lifetime: Lifetime, source: DataSource) -> bool:
        sequence = self._store.begin(source)
        try:
            data = await self._fetchers[source]()
        except SubwayError as exc:
            _logger.warning("Failed to refresh %s: %s", source, exc)
            return False
        if lifetime.closed:
            return False
        return self._store.apply(SourceCommit(source=source, sequence=sequence, data=data))
