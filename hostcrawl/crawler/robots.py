"""
robots.txt loading and rule evaluation (RFC 9309).
"""
from __future__ import annotations

import asyncio
import re
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlsplit, urlunsplit

from aiohttp import ClientError, ClientSession

from hostcrawl.errors import RobotsPolicyError
from hostcrawl.logger import logger

__all__ = ("RobotsTxtRules", "RobotsGroup", "robots_url", "load_robots")


class RobotsGroup:
    """Rules of the single group selected for one user-agent."""

    _WILDCARD_RE = re.compile(r"(\*|\$)")

    def __init__(self, directives: List[Tuple[str, str]], *, allow_all: bool = True) -> None:
        self.directives = directives
        self._default = allow_all
        self._regex_cache: Dict[str, re.Pattern[str]] = {}

    @classmethod
    def allow_everything(cls) -> RobotsGroup:
        return cls([], allow_all=True)

    @classmethod
    def disallow_everything(cls) -> RobotsGroup:
        return cls([], allow_all=False)

    def test(self, url: str) -> bool:
        """True if *url* may be fetched. Longest match wins, Allow wins ties."""
        parts = urlsplit(url)
        path = parts.path or "/"
        if parts.query:
            path = f"{path}?{parts.query}"
        return self.can_fetch_path(path)

    def can_fetch_path(self, path: str) -> bool:
        best_len = -1
        allow: Optional[bool] = None
        for directive, pattern in self.directives:
            if not self._match_path(path, pattern):
                continue
            length = self._rule_len(pattern)
            if length > best_len or (length == best_len and directive == "allow" and allow is False):
                best_len = length
                allow = directive == "allow"
        return self._default if allow is None else allow

    def _match_path(self, path: str, pattern: str) -> bool:
        if pattern not in self._regex_cache:
            esc = re.escape(pattern).replace(r"\*", ".*")
            if pattern.endswith("$"):
                esc = esc[:-2] + "$"
            else:
                esc += ".*"
            self._regex_cache[pattern] = re.compile(f"^{esc}")
        return bool(self._regex_cache[pattern].match(path))

    @classmethod
    def _rule_len(cls, pattern: str) -> int:
        return len(cls._WILDCARD_RE.sub("", pattern))


class RobotsTxtRules:
    """
    Парсит robots.txt (RFC 9309).
    Пустое Disallow считается разрешением всех путей.
    """

    def __init__(self, text: str) -> None:
        self._groups: List[Dict[str, list]] = []
        self._parse(text)

    def find_group(self, user_agent: str) -> RobotsGroup:
        """Group for *user_agent*, else the ``*`` group, else allow-all."""
        ua = user_agent.lower()
        for group in self._groups:
            if any(a != "*" and ua.startswith(a) for a in group["agents"]):
                return RobotsGroup(group["directives"])
        for group in self._groups:
            if "*" in group["agents"]:
                return RobotsGroup(group["directives"])
        return RobotsGroup.allow_everything()

    def _parse(self, text: str) -> None:
        current: Optional[Dict[str, list]] = None
        for raw in text.splitlines():
            line = raw.split("#", 1)[0].strip()
            if not line:
                continue
            key, _, val = line.partition(":")
            key = key.lower().strip()
            val = val.strip()
            if key == "user-agent":
                if current is None or current["directives"]:
                    current = {"agents": [], "directives": []}
                    self._groups.append(current)
                current["agents"].append(val.lower())
            elif key in ("allow", "disallow"):
                # пустой Disallow разрешает все, пропускаем
                if not val:
                    continue
                if current is None:
                    current = {"agents": ["*"], "directives": []}
                    self._groups.append(current)
                current["directives"].append((key, val))


def robots_url(root: str, *, at_host_root: bool = False) -> str:
    """``<root>/robots.txt``, or ``/robots.txt`` of the host when *at_host_root*."""
    if at_host_root:
        parsed = urlsplit(root)
        return urlunsplit((parsed.scheme, parsed.netloc, "/robots.txt", "", ""))
    return root.rstrip("/") + "/robots.txt"


async def load_robots(
    session: ClientSession, root: str, user_agent: str, *, at_host_root: bool = False
) -> RobotsGroup:
    """
    Fetch robots.txt for *root* (see :func:`robots_url`) and bind it to *user_agent*.

    2xx -> parsed rules, 4xx -> allow all, 5xx -> disallow all. A transport
    error or an undecodable body raises :class:`RobotsPolicyError`.
    """
    url = robots_url(root, at_host_root=at_host_root)
    try:
        async with session.get(url) as resp:
            status = resp.status
            body = await resp.read()
    except (ClientError, asyncio.TimeoutError, ValueError) as exc:
        raise RobotsPolicyError(url, str(exc) or type(exc).__name__) from exc

    if 400 <= status < 500:
        logger.debug("robots.txt %s -> HTTP %s, allowing all", url, status)
        return RobotsGroup.allow_everything()
    if status >= 500:
        logger.warning("robots.txt %s -> HTTP %s, disallowing all", url, status)
        return RobotsGroup.disallow_everything()
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RobotsPolicyError(url, f"cannot parse robots.txt: {exc}") from exc
    return RobotsTxtRules(text).find_group(user_agent)
