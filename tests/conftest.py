# File: tests/conftest.py
from __future__ import annotations

import socket
from collections import Counter
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Dict, List, Tuple

import pytest
import pytest_asyncio
from aiohttp import web

from hostcrawl.config import CrawlerConfig
from hostcrawl.crawler.crawler import AsyncCrawler
from hostcrawl.crawler.models import CrawlNode

#: path -> (status, body); paths missing from the map answer 404
Site = Dict[str, Tuple[int, str]]
Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


async def _serve_app(app: web.Application) -> AsyncIterator[str]:
    """Start *app* on an ephemeral port, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    port = runner.addresses[0][1]
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


class SiteServer:
    """Serves a dict of pages and counts requests per path."""

    def __init__(self) -> None:
        self.pages: Site = {}
        self.hits: Counter[str] = Counter()
        self.base = ""

    def page(self, path: str, body: str = "", status: int = 200) -> str:
        self.pages[path] = (status, body)
        return f"{self.base}{path}"

    async def handle(self, request: web.Request) -> web.Response:
        self.hits[request.path_qs] += 1
        if request.path_qs not in self.pages:
            raise web.HTTPNotFound()
        status, body = self.pages[request.path_qs]
        content_type = "text/plain" if request.path == "/robots.txt" else "text/html"
        return web.Response(status=status, text=body, content_type=content_type)


@pytest.fixture()
def unused_port() -> int:
    """A port nothing listens on (bound once, then released)."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest_asyncio.fixture
async def serve_routes() -> AsyncIterator[Callable[[Dict[str, Handler]], Awaitable[str]]]:
    """Factory: serve a path -> handler mapping, return its base URL."""
    runners: List[web.AppRunner] = []

    async def _start(routes: Dict[str, Handler]) -> str:
        app = web.Application()
        for path, handler in routes.items():
            app.router.add_get(path, handler)
        runner = web.AppRunner(app)
        await runner.setup()
        runners.append(runner)
        await web.TCPSite(runner, "127.0.0.1", 0).start()
        return f"http://127.0.0.1:{runner.addresses[0][1]}"

    yield _start
    for runner in runners:
        await runner.cleanup()


@pytest_asyncio.fixture
async def site() -> AsyncIterator[SiteServer]:
    server = SiteServer()
    app = web.Application()
    app.router.add_route("GET", "/{tail:.*}", server.handle)
    async for base in _serve_app(app):
        server.base = base
        yield server


@pytest.fixture()
def make_config() -> Callable[..., CrawlerConfig]:
    def _make(root: str, **kwargs) -> CrawlerConfig:
        kwargs.setdefault("user_agent", "TestAgent/1.0")
        return CrawlerConfig(root_url=root, **kwargs)

    return _make


@pytest.fixture()
def run_crawler() -> Callable[[CrawlerConfig], Awaitable[Tuple[CrawlNode, AsyncCrawler]]]:
    async def _run(config: CrawlerConfig) -> Tuple[CrawlNode, AsyncCrawler]:
        async with AsyncCrawler(config) as crawler:
            tree = await crawler.crawl()
        return tree, crawler

    return _run
