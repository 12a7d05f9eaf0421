# File: hostcrawl/engine.py
"""hostcrawl.engine: Orchestration layer для запуска обхода из CLI и тестов."""

from __future__ import annotations

from hostcrawl.config import CrawlerConfig
from hostcrawl.crawler.crawler import AsyncCrawler
from hostcrawl.crawler.models import CrawlNode
from hostcrawl.logger import logger

__all__ = ["start_crawl"]


async def start_crawl(config: CrawlerConfig) -> CrawlNode:
    """Открывает сессию, выполняет обход и возвращает корень дерева."""
    logger.info("Starting crawl…")
    async with AsyncCrawler(config) as crawler:
        return await crawler.crawl()
