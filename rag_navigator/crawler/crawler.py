# === FILE: rag_navigator/crawler/crawler.py ===
"""
Crawl orchestration: robots.txt gate, sitemap resolution and sequential page
extraction, producing a :class:`CrawlResult`.
"""
from __future__ import annotations

import time
from enum import Enum
from typing import List, Optional

from aiohttp import ClientSession

from rag_navigator.config import NavigatorConfig
from rag_navigator.crawler.extractor import PageContentExtractor
from rag_navigator.crawler.fetcher import Fetcher, open_session
from rag_navigator.crawler.models import CrawlResult
from rag_navigator.crawler.robots import RobotsDecision, RobotsGate, RobotsTxtRules, RulesFactory
from rag_navigator.crawler.sitemaps import SitemapResolver
from rag_navigator.logger import get_logger
from rag_navigator.utils import normalize_page_url, polite_delay

__all__ = ("CrawlState", "SitemapCrawler")

_DEFAULT_RULES = object()


class CrawlState(str, Enum):
    IDLE = "idle"
    RESOLVING_ROBOTS = "resolving_robots"
    RESOLVING_SITEMAPS = "resolving_sitemaps"
    FETCHING_PAGES = "fetching_pages"
    DONE = "done"


class SitemapCrawler:
    """Sitemap-driven crawler: strictly sequential, with politeness delays.

    Use as an async context manager; it owns one aiohttp session::

        async with SitemapCrawler(config) as crawler:
            result = await crawler.run("https://example.com/sitemap.xml")

    ``rules_factory`` defaults to :class:`RobotsTxtRules` when
    ``config.respect_robots`` is set; pass None to crawl without robots rules.
    """

    def __init__(self, config: NavigatorConfig, rules_factory: Optional[RulesFactory] | object = _DEFAULT_RULES) -> None:
        self.config = config
        if rules_factory is _DEFAULT_RULES:
            rules_factory = RobotsTxtRules if config.respect_robots else None
        self.rules_factory: Optional[RulesFactory] = rules_factory  # type: ignore[assignment]
        self.session: Optional[ClientSession] = None
        self.state = CrawlState.IDLE
        self.logger = get_logger("crawler")

    async def __aenter__(self) -> SitemapCrawler:
        self.session = open_session(self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def run(self, sitemap_url: str) -> CrawlResult:
        """Crawl the pages listed by *sitemap_url*.

        Always returns a result. If sitemap resolution itself blows up, the
        result is empty apart from one diagnostic carrying the exception text.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        fetcher = Fetcher(self.session, self.config)
        start = time.monotonic()
        self.logger.info("Crawl started: %s", sitemap_url)

        self.state = CrawlState.RESOLVING_ROBOTS
        gate = RobotsGate(fetcher, self.config.user_agent, self.rules_factory)
        robots = await gate.resolve(sitemap_url)

        self.state = CrawlState.RESOLVING_SITEMAPS
        try:
            page_urls, diagnostics = await SitemapResolver(fetcher, self.config).resolve(sitemap_url)
        except Exception as exc:
            self.logger.exception("Sitemap resolution failed for %s", sitemap_url)
            self.state = CrawlState.DONE
            return CrawlResult.failed(f"Failed to parse sitemap(s): {exc}")

        result = CrawlResult(errors=list(diagnostics))
        self.state = CrawlState.FETCHING_PAGES
        await self._fetch_pages(page_urls, robots, PageContentExtractor(fetcher, self.config), result)

        self.state = CrawlState.DONE
        self.logger.info(
            "Crawl finished in %.2f s: %d indexed, %d skipped, %d diagnostics",
            time.monotonic() - start,
            len(result.indexed_urls),
            len(result.skipped_urls),
            len(result.errors),
        )
        return result

    async def _fetch_pages(
        self,
        page_urls: List[str],
        robots: RobotsDecision,
        extractor: PageContentExtractor,
        result: CrawlResult,
    ) -> None:
        for raw_url in page_urls:
            try:
                url = normalize_page_url(raw_url)
            except ValueError as exc:
                result.skipped_urls.append(raw_url)
                result.errors.append(f"Invalid URL from sitemap: {raw_url} - {exc}")
                continue

            if not robots.is_allowed(url):
                result.skipped_urls.append(url)
                self.logger.info("Skipping %s due to robots.txt", url)
                continue

            await polite_delay(self.config.fetch_delay)
            content = await extractor.extract(url)
            if content is None:
                result.skipped_urls.append(url)
                result.errors.append(f"Failed to fetch content for {url}.")
            elif not content.strip():
                result.skipped_urls.append(url)
                result.errors.append(f"Content for {url} was empty or only whitespace after processing.")
            else:
                result.indexed_urls.append(url)
                result.contents[url] = content
