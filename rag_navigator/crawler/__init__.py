# File: rag_navigator/crawler/__init__.py
"""rag_navigator.crawler: sitemap resolution, robots.txt gate and page extraction."""

from .crawler import CrawlState, SitemapCrawler
from .extractor import PageContentExtractor
from .fetcher import FetchError, Fetcher
from .models import CrawlResult
from .robots import RobotsAvailable, RobotsGate, RobotsTxtRules, RobotsUnavailable
from .sitemaps import SitemapResolver

__all__ = [
    "CrawlResult",
    "CrawlState",
    "FetchError",
    "Fetcher",
    "PageContentExtractor",
    "RobotsAvailable",
    "RobotsGate",
    "RobotsTxtRules",
    "RobotsUnavailable",
    "SitemapCrawler",
    "SitemapResolver",
]
