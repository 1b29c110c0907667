"""Unit tests for the sequential update queue."""

import asyncio

import pytest
from bumpctl.core.queue import UpdateQueue


class TestUpdateQueue:
    """Tests for UpdateQueue."""

    async def test_results_in_insertion_order(self) -> None:
        """Results come back in the order items were queued."""

        async def double(x: int) -> int:
            return x * 2

        queue: UpdateQueue[int, int] = UpdateQueue(double)
        for i in (3, 1, 2):
            queue.put(i)

        assert len(queue) == 3
        assert await queue.run() == [6, 2, 4]

    async def test_items_never_overlap(self) -> None:
        """At most one handler runs at a time."""
        active = 0
        peak = 0
        order: list[str] = []

        async def handler(name: str) -> str:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            order.append(f"start {name}")
            await asyncio.sleep(0.01)
            order.append(f"end {name}")
            active -= 1
            return name

        queue: UpdateQueue[str, str] = UpdateQueue(handler)
        queue.put("a")
        queue.put("b")
        await queue.run()

        assert peak == 1
        assert order == ["start a", "end a", "start b", "end b"]

    async def test_empty_queue(self) -> None:
        """Running an empty queue returns no results."""

        async def handler(x: int) -> int:
            return x

        assert await UpdateQueue(handler).run() == []

    async def test_handler_exception_propagates(self) -> None:
        """Unhandled errors stop the worker and surface from run()."""

        async def handler(x: int) -> int:
            raise RuntimeError("boom")

        queue: UpdateQueue[int, int] = UpdateQueue(handler)
        queue.put(1)

        with pytest.raises(RuntimeError, match="boom"):
            await queue.run()
