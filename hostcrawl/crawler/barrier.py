"""Counted completion barrier for a dynamically growing set of tasks."""
from __future__ import annotations

import asyncio

__all__ = ("CompletionBarrier",)


class CompletionBarrier:
    """
    Counter incremented before each dispatch and decremented when the task
    finishes; :meth:`wait` returns once it is back at zero.

    A task always calls :meth:`add` for its children before its own
    :meth:`done`, so the counter cannot hit zero while work is still pending.
    """

    def __init__(self) -> None:
        self._pending = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def pending(self) -> int:
        return self._pending

    def add(self, n: int = 1) -> None:
        if n <= 0:
            raise ValueError("n must be > 0")
        self._pending += n
        self._idle.clear()

    def done(self) -> None:
        if self._pending <= 0:
            raise RuntimeError("done() called more times than add()")
        self._pending -= 1
        if self._pending == 0:
            self._idle.set()

    async def wait(self) -> None:
        await self._idle.wait()
