"""hostcrawl.errors: иерархия исключений краулера.

Fatal errors (:class:`InvalidRootError`, :class:`RobotsPolicyError`) abort the
whole crawl and are raised to the caller. Everything else is reported to the
crawl's :class:`~hostcrawl.crawler.sink.ErrorSink` and only logged.
"""
from __future__ import annotations

from typing import Optional

__all__ = (
    "CrawlError",
    "InvalidRootError",
    "RobotsPolicyError",
    "PageFetchError",
    "MalformedURLError",
    "RobotsViolation",
)


class CrawlError(Exception):
    """Базовое исключение HostCrawl."""


class InvalidRootError(CrawlError, ValueError):
    """Root URL is empty or cannot be parsed."""

    def __init__(self, root: str, reason: str = "url is invalid") -> None:
        super().__init__(f"{reason}: got '{root}'")
        self.root = root


class RobotsPolicyError(CrawlError):
    """robots.txt could not be fetched or parsed."""

    def __init__(self, robots_url: str, reason: str) -> None:
        super().__init__(f"unable to load {robots_url}: {reason}")
        self.robots_url = robots_url


class PageFetchError(CrawlError):
    """Transport failure or non-2xx status for one page."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = "") -> None:
        if status is None:
            message = f"unable to get {url}: {reason}"
        else:
            message = f"received {status} {reason}".rstrip() + f" for {url}"
        super().__init__(message)
        self.url = url
        self.status = status


class MalformedURLError(CrawlError, ValueError):
    """A link (or its base) cannot be parsed as a URL."""

    def __init__(self, link: str, reason: str = "malformed url") -> None:
        super().__init__(f"issue cleaning {link!r}: {reason}")
        self.link = link


class RobotsViolation(CrawlError):
    """Notice: a visited URL is disallowed for our user-agent."""

    def __init__(self, url: str) -> None:
        super().__init__(f"visiting {url} violates robots.txt")
        self.url = url
