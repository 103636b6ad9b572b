"""In-memory result sink."""

from __future__ import annotations

import asyncio

from ..models import QueryResult


class InMemorySink:
    """Queues every published result for later consumption.

    ``publish`` never blocks, so it is safe to call from timer callbacks.
    ``results`` keeps the full history in publish order.
    """

    def __init__(self, maxsize: int = 0) -> None:
        """Initialize the sink.

        Args:
            maxsize: Queue bound (0 for unbounded); publishing to a full queue
                raises ``asyncio.QueueFull``
        """
        self._queue: asyncio.Queue[QueryResult] = asyncio.Queue(maxsize=maxsize)
        self.results: list[QueryResult] = []

    def publish(self, result: QueryResult) -> None:
        self._queue.put_nowait(result)
        self.results.append(result)

    async def get(self) -> QueryResult:
        return await self._queue.get()

    def get_nowait(self) -> QueryResult:
        return self._queue.get_nowait()

    def qsize(self) -> int:
        return self._queue.qsize()

    def empty(self) -> bool:
        return self._queue.empty()

    def clear(self) -> None:
        while not self._queue.empty():
            self._queue.get_nowait()
        self.results.clear()
