"""
Error sink: unbounded multi-producer queue drained by one logging task.
"""
from __future__ import annotations

import asyncio
import logging
from collections import Counter
from typing import List, Optional

from hostcrawl.errors import CrawlError, MalformedURLError, PageFetchError, RobotsViolation
from hostcrawl.logger import logger

__all__ = ("ErrorSink",)

_STOP = object()


class ErrorSink:
    """Collects non-fatal crawl errors and logs them from a background task."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self.logger = log or logger
        self.errors: List[CrawlError] = []
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._drain_task: Optional[asyncio.Task[None]] = None

    def start(self) -> None:
        if self._drain_task is not None:
            raise RuntimeError("sink already started")
        self._drain_task = asyncio.create_task(self._drain())

    def report(self, error: CrawlError) -> None:
        """Never blocks: the queue has no size limit."""
        self._queue.put_nowait(error)

    async def close(self) -> None:
        """Wait until everything reported so far is consumed, then stop."""
        if self._drain_task is None:
            return
        self._queue.put_nowait(_STOP)
        await self._drain_task
        self._drain_task = None

    @property
    def running(self) -> bool:
        return self._drain_task is not None

    def counts(self) -> Counter[str]:
        return Counter(type(err).__name__ for err in self.errors)

    async def _drain(self) -> None:
        while True:
            item = await self._queue.get()
            if item is _STOP:
                break
            self.errors.append(item)  # type: ignore[arg-type]
            if isinstance(item, PageFetchError):
                self.logger.warning("Received error: %s", item)
            elif isinstance(item, (RobotsViolation, MalformedURLError)):
                self.logger.info("Received error: %s", item)
            else:
                self.logger.error("Received error: %s", item)
