"""
Data models for the HostCrawl crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional


@dataclass(slots=True)
class PageData:
    """Successful fetch: final status and raw body."""

    url: str
    status: int
    content: bytes


@dataclass(slots=True, eq=False)
class CrawlNode:
    """One visited page, the links found on it and its fetched children."""

    location: str
    outbound_links: List[str] = field(default_factory=list)
    children: List[CrawlNode] = field(default_factory=list)
    fetched: bool = False
    status: Optional[int] = None

    def walk(self) -> Iterator[CrawlNode]:
        """Depth-first, parent before children."""
        yield self
        for child in self.children:
            yield from child.walk()

    def locations(self) -> List[str]:
        return [node.location for node in self.walk()]

    def find(self, location: str) -> Optional[CrawlNode]:
        for node in self.walk():
            if node.location == location:
                return node
        return None
