"""Scope decisions: which links belong to a crawl."""
from __future__ import annotations

from typing import Iterable, List, Optional
from urllib.parse import urlsplit

from hostcrawl.logger import logger

__all__ = ("strip_fragment", "dedupe_and_strip_fragments", "hostname", "in_scope")


def strip_fragment(href: str) -> str:
    """Keep everything before the first ``#``."""
    return href.split("#", 1)[0]


def dedupe_and_strip_fragments(raw_links: Iterable[str]) -> List[str]:
    """Strip fragments, then drop exact duplicates keeping first-seen order."""
    stripped = [strip_fragment(link) for link in raw_links]
    unique = list(dict.fromkeys(stripped))
    removed = len(stripped) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate links", removed)
    return unique


def hostname(url: str) -> Optional[str]:
    """Hostname of *url* or None when it has none or does not parse."""
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None


def in_scope(candidate: str, root: str) -> bool:
    """True iff *candidate* has exactly the hostname of *root*."""
    host = hostname(candidate)
    if host is None:
        return False
    return host == hostname(root)
