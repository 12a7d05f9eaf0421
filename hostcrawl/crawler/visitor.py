"""
Page visitor: the unit of work of a crawl, one call per URL.
"""
from __future__ import annotations

import asyncio
from typing import List, Optional

from hostcrawl.crawler.barrier import CompletionBarrier
from hostcrawl.crawler.fetcher import Fetcher
from hostcrawl.crawler.link_extractor import extract_links, normalize_url
from hostcrawl.crawler.models import CrawlNode
from hostcrawl.crawler.registry import VisitedRegistry
from hostcrawl.crawler.robots import RobotsGroup
from hostcrawl.crawler.scope import dedupe_and_strip_fragments, in_scope
from hostcrawl.crawler.sink import ErrorSink
from hostcrawl.errors import MalformedURLError, PageFetchError, RobotsViolation
from hostcrawl.logger import logger

__all__ = ("PageVisitor",)


class PageVisitor:
    """
    Fetches one page, records its links and fans out over the new ones.

    All collaborators are shared by every task of one crawl; the visitor
    itself holds no per-page state, each :meth:`visit` call owns its node.
    """

    def __init__(
        self,
        *,
        root: str,
        fetcher: Fetcher,
        registry: VisitedRegistry,
        robots: RobotsGroup,
        sink: ErrorSink,
        barrier: CompletionBarrier,
        enforce_robots: bool = False,
    ) -> None:
        self.root = root
        self.fetcher = fetcher
        self.registry = registry
        self.robots = robots
        self.sink = sink
        self.barrier = barrier
        self.enforce_robots = enforce_robots

    async def visit(self, url: str) -> Optional[CrawlNode]:
        """
        Visit *url* and return its node once the whole subtree is done.

        Returns None when *url* was already reserved by another task.
        """
        if not await self.registry.reserve(url):
            return None

        node = CrawlNode(url)

        if not self.robots.test(url):
            self.sink.report(RobotsViolation(url))
            if self.enforce_robots:
                return node

        try:
            page = await self.fetcher.fetch(url)
        except PageFetchError as exc:
            node.status = exc.status
            self.sink.report(exc)
            return node

        node.status = page.status
        node.fetched = True
        logger.debug("Fetched %s (%d bytes)", url, len(page.content))

        candidates = await self._record_links(node, extract_links(page.content))
        if candidates:
            await self._fan_out(node, candidates)
        return node

    async def _record_links(self, node: CrawlNode, raw_links: List[str]) -> List[str]:
        """Fill ``node.outbound_links``; return the links worth dispatching."""
        candidates: List[str] = []
        for raw in dedupe_and_strip_fragments(raw_links):
            try:
                link = normalize_url(raw, node.location)
            except MalformedURLError as exc:
                self.sink.report(exc)
                continue

            # self-loop
            if link == node.location:
                continue

            node.outbound_links.append(link)

            if not in_scope(link, self.root):
                continue
            if not await self.registry.is_visited(link):
                candidates.append(link)
        return candidates

    async def _fan_out(self, node: CrawlNode, links: List[str]) -> None:
        tasks = []
        for link in links:
            self.barrier.add()
            task = asyncio.create_task(self.visit(link))
            # runs even for a task cancelled before it started
            task.add_done_callback(self._release)
            tasks.append(task)

        try:
            for finished in asyncio.as_completed(tasks):
                child = await finished
                if child is not None and child.fetched:
                    node.children.append(child)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    def _release(self, _task: asyncio.Task[Optional[CrawlNode]]) -> None:
        self.barrier.done()
