"""
Link extraction and URL normalization utilities for HostCrawl.
"""
from __future__ import annotations

import re
from typing import List, Union
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

from hostcrawl.errors import MalformedURLError

__all__ = ("extract_links", "normalize_url")

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def extract_links(content: Union[str, bytes]) -> List[str]:
    """
    Return the ``href`` value of every ``<a>`` tag in *content*, lower-cased.

    ``html.parser`` folds attribute names, so ``HREF`` and ``href`` are the same.
    Nothing is filtered here: empty, fragment-only and external values included.
    """
    soup = BeautifulSoup(content, "html.parser")
    links: List[str] = []
    for tag in soup.find_all("a"):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        links.append(href_val.lower())
    return links


def _check(url: str) -> None:
    if _CONTROL_RE.search(url):
        raise MalformedURLError(url, "invalid control character in url")
    if _BAD_ESCAPE_RE.search(url):
        raise MalformedURLError(url, "invalid percent escape")
    if url.startswith(":"):
        raise MalformedURLError(url, "missing protocol scheme")
    try:
        parts = urlsplit(url)
        # .port validates the port component lazily
        parts.port
    except ValueError as exc:
        raise MalformedURLError(url, str(exc)) from exc


def normalize_url(link: str, base: str) -> str:
    """
    Resolve *link* against *base* into an absolute URL.

    Standard relative resolution: scheme, host and path are inherited from
    *base* and dot segments are removed. Raises :class:`MalformedURLError` when
    either input does not parse. Fragments are not touched here.
    """
    _check(base)
    _check(link)
    return urljoin(base, link)
