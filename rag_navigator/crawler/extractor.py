# rag_navigator/crawler/extractor.py
"""
Page content extraction: fetch one page and reduce it to plain text.
"""
from __future__ import annotations

from typing import Optional

from rag_navigator.config import NavigatorConfig
from rag_navigator.crawler.fetcher import FetchError, Fetcher
from rag_navigator.logger import get_logger
from rag_navigator.parser.html_parser import extract_text

log = get_logger("extractor")


class PageContentExtractor:
    """Fetches a page and returns its readable text."""

    def __init__(self, fetcher: Fetcher, config: NavigatorConfig) -> None:
        self.fetcher = fetcher
        self.config = config

    async def extract(self, url: str) -> Optional[str]:
        """
        Text content of *url*.

        Returns None when the page could not be fetched or parsed, and a
        possibly empty string otherwise. Never raises for fetch problems.
        """
        try:
            html = await self.fetcher.get_text(url)
        except FetchError as exc:
            log.error("Error fetching content from %s: %s", url, exc)
            return None
        try:
            text = extract_text(html, min_length=self.config.min_content_length)
        except Exception as exc:  # malformed markup must not end the crawl
            log.error("Error extracting content from %s: %s", url, exc)
            return None
        log.info("Indexed content from %s (length: %d)", url, len(text))
        return text
