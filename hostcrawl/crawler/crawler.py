from __future__ import annotations

import enum
import time
from typing import Optional

from aiohttp import ClientSession, ClientTimeout

from hostcrawl.config import CrawlerConfig
from hostcrawl.crawler.barrier import CompletionBarrier
from hostcrawl.crawler.fetcher import Fetcher
from hostcrawl.crawler.models import CrawlNode
from hostcrawl.crawler.registry import VisitedRegistry
from hostcrawl.crawler.robots import RobotsGroup, load_robots
from hostcrawl.crawler.sink import ErrorSink
from hostcrawl.crawler.visitor import PageVisitor
from hostcrawl.errors import RobotsPolicyError
from hostcrawl.logger import logger

__all__ = ("AsyncCrawler", "CrawlState")


class CrawlState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    POLICY_LOADING = "policy_loading"
    CRAWLING = "crawling"
    DRAINED = "drained"
    FAILED = "failed"


class AsyncCrawler:
    """Асинхронный краулер одного хоста с учётом robots.txt."""

    def __init__(self, config: CrawlerConfig) -> None:
        self.config = config
        self.root: str = config.root_url
        self.state = CrawlState.UNINITIALIZED
        self.session: Optional[ClientSession] = None
        self.registry: Optional[VisitedRegistry] = None
        self.sink: Optional[ErrorSink] = None
        self.robots: Optional[RobotsGroup] = None
        self.logger = logger

    async def __aenter__(self) -> AsyncCrawler:
        # no per-request deadline: a fetch runs until the server answers or fails
        self.session = ClientSession(
            timeout=ClientTimeout(total=None),
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> CrawlNode:
        """
        Crawl everything reachable from the root on the root's host.

        Raises :class:`RobotsPolicyError` if robots.txt cannot be loaded; in that
        case no tree is produced.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")

        self.logger.info("Старт обхода: %s", self.root)
        start = time.monotonic()
        self.registry = VisitedRegistry()
        self.sink = ErrorSink(self.logger)
        self.sink.start()
        self.state = CrawlState.POLICY_LOADING

        try:
            self.robots = await load_robots(
                self.session,
                self.root,
                self.config.user_agent,
                at_host_root=self.config.robots_at_host_root,
            )
        except RobotsPolicyError as exc:
            self.state = CrawlState.FAILED
            self.logger.error("%s, shutting down", exc)
            await self.sink.close()
            raise

        self.state = CrawlState.CRAWLING
        barrier = CompletionBarrier()
        visitor = PageVisitor(
            root=self.root,
            fetcher=Fetcher(self.session),
            registry=self.registry,
            robots=self.robots,
            sink=self.sink,
            barrier=barrier,
            enforce_robots=self.config.enforce_robots,
        )

        barrier.add()
        try:
            try:
                root = await visitor.visit(self.root)
            finally:
                barrier.done()
            await barrier.wait()
        except BaseException:
            self.state = CrawlState.FAILED
            raise
        finally:
            await self.sink.close()
        self.state = CrawlState.DRAINED

        if root is None:
            # fresh registry: the root reservation cannot lose a race
            raise RuntimeError(f"root {self.root} was not visited")

        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц за %.2f с, ошибок: %d",
            len(self.registry),
            duration,
            len(self.sink.errors),
        )
        for kind, count in sorted(self.sink.counts().items()):
            self.logger.info("  %s: %d", kind, count)
        return root
