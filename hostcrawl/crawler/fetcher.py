"""
Fetcher module: issues one GET per page and classifies the outcome.
"""
from __future__ import annotations

import asyncio

from aiohttp import ClientError, ClientSession

from hostcrawl.crawler.models import PageData
from hostcrawl.errors import PageFetchError


class Fetcher:
    """Thin wrapper over a shared :class:`ClientSession`."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def fetch(self, url: str) -> PageData:
        """
        GET *url* and return its body.

        Raises :class:`PageFetchError` on transport failure or non-2xx status.
        """
        try:
            async with self.session.get(url, raise_for_status=False) as resp:
                if not 200 <= resp.status < 300:
                    raise PageFetchError(url, resp.status, resp.reason or "")
                data = await resp.read()
                return PageData(url, resp.status, data)
        except (ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise PageFetchError(url, reason=str(exc) or type(exc).__name__) from exc
