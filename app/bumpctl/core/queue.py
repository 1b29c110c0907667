"""Sequential task queue for dependency updates.

Every update checks out a branch in the one shared working tree, so
updates must never overlap. The queue makes that explicit: items are
consumed by a single worker task, one at a time, in insertion order.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_STOP = object()


class UpdateQueue(Generic[T, R]):
    """FIFO queue drained by exactly one worker.

    The handler should turn its own failures into results; an exception
    escaping the handler stops the worker and is re-raised by :meth:`run`.

    Example:
        >>> queue = UpdateQueue(orchestrator.update_one)
        >>> for package in outdated:
        ...     queue.put(package)
        >>> results = await queue.run()
    """

    def __init__(self, handler: Callable[[T], Awaitable[R]]) -> None:
        self._handler = handler
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._results: list[R] = []

    def put(self, item: T) -> None:
        """Enqueue an item for processing."""
        self._queue.put_nowait(item)

    def __len__(self) -> int:
        return self._queue.qsize()

    async def run(self) -> list[R]:
        """Process every queued item and return the results in order."""
        self._queue.put_nowait(_STOP)
        worker = asyncio.create_task(self._work(), name="bumpctl-update-worker")
        await worker
        return self._results

    async def _work(self) -> None:
        while True:
            item = await self._queue.get()
            try:
                if item is _STOP:
                    return
                self._results.append(await self._handler(item))  # type: ignore[arg-type]
            finally:
                self._queue.task_done()
