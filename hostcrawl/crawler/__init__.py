"""hostcrawl.crawler: движок обхода (посетитель страниц, реестр, robots.txt)."""
from hostcrawl.crawler.models import CrawlNode, PageData

__all__ = ["CrawlNode", "PageData"]
