"""Shared set of URLs already dispatched for fetching."""
from __future__ import annotations

import asyncio
from typing import FrozenSet, Set

__all__ = ("VisitedRegistry",)


class VisitedRegistry:
    """
    Concurrency-safe, grow-only set of URLs for one crawl.

    Every read and write goes through one :class:`asyncio.Lock`. Callers that
    need "is this new work?" must use :meth:`reserve`, which tests and inserts
    inside the same locked section.
    """

    def __init__(self) -> None:
        self._visited: Set[str] = set()
        self._lock = asyncio.Lock()

    async def reserve(self, url: str) -> bool:
        """Insert *url*; True if it was absent (new work), False if duplicate."""
        async with self._lock:
            if url in self._visited:
                return False
            self._visited.add(url)
            return True

    async def mark_visited(self, url: str) -> None:
        async with self._lock:
            self._visited.add(url)

    async def is_visited(self, url: str) -> bool:
        """Optimistic peek. Not a substitute for :meth:`reserve`."""
        async with self._lock:
            return url in self._visited

    async def snapshot(self) -> FrozenSet[str]:
        async with self._lock:
            return frozenset(self._visited)

    def __len__(self) -> int:
        return len(self._visited)
