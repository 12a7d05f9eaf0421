"""Plain-text rendering of a crawl tree."""
from __future__ import annotations

from typing import List

from hostcrawl.crawler.models import CrawlNode


def render_text(node: CrawlNode) -> str:
    """
    Depth-first rendering::

        Visited: <location>
        \t<outbound link>
        ...
        <each child, recursively>
    """
    lines: List[str] = []
    _render(node, lines)
    return "".join(lines)


def _render(node: CrawlNode, lines: List[str]) -> None:
    lines.append(f"Visited: {node.location}\n")
    lines.extend(f"\t{link}\n" for link in node.outbound_links)
    for child in node.children:
        _render(child, lines)
