# File: rag_navigator/engine.py
"""rag_navigator.engine: the session facade used by the CLI and tests.

A :class:`NavigatorSession` indexes one sitemap at a time, keeps the
extracted page text in memory and answers questions against it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from rag_navigator.answering import ContextAnswerer, OpenAIAnswerer
from rag_navigator.config import NavigatorConfig
from rag_navigator.crawler.crawler import SitemapCrawler
from rag_navigator.crawler.models import CrawlResult
from rag_navigator.logger import logger

__all__ = [
    "CONTEXT_SEPARATOR",
    "NavigatorSession",
    "NoIndexedContentError",
    "QueryAnswer",
    "start_index",
    "start_query",
]

CONTEXT_SEPARATOR = "\n\n---\n\n"


class NoIndexedContentError(RuntimeError):
    """A question was asked before any usable content was indexed."""


@dataclass(slots=True)
class QueryAnswer:
    answer: str
    confidence: float
    sources: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {"answer": self.answer, "confidence": self.confidence, "sources": list(self.sources)}


class NavigatorSession:
    """Index a site, then ask questions about it. State lives until reset()."""

    def __init__(
        self,
        config: NavigatorConfig,
        answerer: Optional[ContextAnswerer] = None,
        crawler_factory: Callable[[NavigatorConfig], SitemapCrawler] = SitemapCrawler,
    ) -> None:
        self.config = config
        self._answerer = answerer
        self._crawler_factory = crawler_factory
        self._content: Dict[str, str] = {}
        self.last_result: Optional[CrawlResult] = None

    @property
    def answerer(self) -> ContextAnswerer:
        if self._answerer is None:
            self._answerer = OpenAIAnswerer(self.config)
        return self._answerer

    @property
    def content_map(self) -> Mapping[str, str]:
        return MappingProxyType(self._content)

    @property
    def indexed_urls(self) -> List[str]:
        return list(self._content)

    async def index(self, sitemap_url: str) -> CrawlResult:
        """Crawl *sitemap_url*, replacing whatever was indexed before."""
        self.reset()
        logger.info("Indexing %s", sitemap_url)
        async with self._crawler_factory(self.config) as crawler:
            result = await crawler.run(sitemap_url)
        self.last_result = result
        for url in result.indexed_urls:
            self._content[url] = result.contents[url]
        if result.errors:
            logger.warning("Indexing finished with %d diagnostics", len(result.errors))
        return result

    def context(self) -> str:
        return CONTEXT_SEPARATOR.join(self._content.values())

    async def ask(self, query: str) -> QueryAnswer:
        if not query.strip():
            raise ValueError("Query must not be empty")
        if not self._content:
            raise NoIndexedContentError("No content available for querying. Index a sitemap first.")
        context = self.context()
        if not context.strip():
            raise NoIndexedContentError("The indexed content is empty. Cannot perform query.")
        result = await self.answerer.answer(query, context)
        return QueryAnswer(answer=result.answer, confidence=result.confidence, sources=self.indexed_urls)

    def reset(self) -> None:
        self._content.clear()
        self.last_result = None


async def start_index(config: NavigatorConfig, sitemap_url: str) -> CrawlResult:
    """Run one indexing pass and return its result."""
    return await NavigatorSession(config).index(sitemap_url)


async def start_query(
    config: NavigatorConfig,
    sitemap_url: str,
    question: str,
    answerer: Optional[ContextAnswerer] = None,
) -> Tuple[CrawlResult, QueryAnswer]:
    """Index *sitemap_url* and answer *question* against it."""
    session = NavigatorSession(config, answerer=answerer)
    result = await session.index(sitemap_url)
    return result, await session.ask(question)
