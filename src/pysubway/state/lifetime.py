"""Task ownership and cancellation for fetch fan-outs."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

from pysubway.exceptions import SubwayError

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class Lifetime:
    """Owns the tasks spawned on behalf of one store/session lifetime.

    ``close()`` is the cancellation signal: it cancels every outstanding
    task and makes :attr:`closed` true, which commit paths check before
    touching state. Usage::

        lifetime = Lifetime("scheduler")
        task = lifetime.spawn(refresh_lines())
        ...
        lifetime.close()
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    def spawn(self, coro: Coroutine[Any, Any, T], *, name: str | None = None) -> asyncio.Task[T]:
        """Schedule *coro* as a task owned by this lifetime."""
        if self._closed:
            coro.close()
            raise SubwayError(f"lifetime {self.name!r} is closed")
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        outstanding = [task for task in self._tasks if not task.done()]
        for task in outstanding:
            task.cancel()
        if outstanding:
            _logger.debug("Lifetime %s closed, cancelled %d task(s)", self.name, len(outstanding))

    async def join(self) -> None:
        """Wait for every task spawned so far, ignoring their outcome."""
        while True:
            tasks = [task for task in self._tasks if not task.done()]
            if not tasks:
                return
            await asyncio.wait(tasks)
