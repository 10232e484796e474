# rag_navigator/crawler/sitemaps.py
"""
Breadth-first resolution of a sitemap (or sitemap index tree) into a bounded
list of page URLs.

Failures of individual sitemap files never abort resolution: they become
human-readable diagnostics and the queue moves on.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional, Set, Tuple

from rag_navigator.config import NavigatorConfig
from rag_navigator.crawler.fetcher import FetchError, Fetcher
from rag_navigator.logger import get_logger
from rag_navigator.parser.sitemap_parser import SitemapDocument, SitemapParseError, parse_sitemap
from rag_navigator.utils import polite_delay

log = get_logger("sitemaps")

INDEX_DETECTED_PREFIX = "Detected sitemap index"


class SitemapResolver:
    """Collects up to ``config.max_urls`` page URLs starting from a root sitemap."""

    def __init__(self, fetcher: Fetcher, config: NavigatorConfig) -> None:
        self.fetcher = fetcher
        self.config = config

    async def resolve(self, root_url: str) -> Tuple[List[str], List[str]]:
        """Return ``(page_urls, diagnostics)`` for the tree rooted at *root_url*."""
        cap = self.config.max_urls
        page_urls: List[str] = []
        diagnostics: List[str] = []
        visited: Set[str] = set()
        queue: Deque[str] = deque([root_url])

        while queue and len(page_urls) < cap:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)

            if current != root_url:
                await polite_delay(self.config.sitemap_fetch_delay)

            doc = await self._load(current, diagnostics)
            if doc is None:
                continue

            if doc.is_index:
                if current == root_url:
                    diagnostics.append(
                        f"{INDEX_DETECTED_PREFIX} at {current}. Processing sub-sitemaps listed within."
                    )
                fresh = [loc for loc in doc.sitemap_locs if loc not in visited]
                queue.extend(fresh)
                log.debug("Sitemap index %s: %d sub-sitemaps queued", current, len(fresh))
                continue

            if not doc.page_locs and doc.has_text:
                diagnostics.append(
                    f"Sitemap at {current} (not an index) contained no <loc> tags or was malformed "
                    f"for <loc> extraction, despite having content."
                )
            for page_url in doc.page_locs:
                if len(page_urls) < cap:
                    page_urls.append(page_url)
                else:
                    diagnostics.append(
                        f"Reached MAX_URLS_TO_INDEX limit ({cap}) while processing {current}. "
                        f"Not all URLs from this sitemap were included."
                    )
                    queue.clear()
                    break
            log.debug("Sitemap %s: %d page URLs, %d collected so far", current, len(doc.page_locs), len(page_urls))

        if queue and len(page_urls) >= cap:
            diagnostics.append(
                f"Sitemap processing stopped due to MAX_URLS_TO_INDEX limit ({cap}). "
                f"There may be more sitemaps in the index or queue that were not processed."
            )

        if not page_urls and not any(not d.startswith(INDEX_DETECTED_PREFIX) for d in diagnostics):
            await self._classify_empty_root(root_url, diagnostics)

        return page_urls[:cap], diagnostics

    async def _load(self, url: str, diagnostics: List[str]) -> Optional[SitemapDocument]:
        """Fetch and parse one sitemap; failures are recorded and yield None."""
        try:
            body = await self.fetcher.get_bytes(url)
        except FetchError as exc:
            if exc.status is not None:
                diagnostics.append(f"Failed to fetch sitemap/index at {url}: {exc}")
            else:
                diagnostics.append(f"Error fetching or parsing XML for {url}: {exc}")
            return None
        if not body.strip():
            diagnostics.append(f"Sitemap/index at {url} is empty.")
            return None
        try:
            return parse_sitemap(body)
        except SitemapParseError as exc:
            diagnostics.append(f"Error fetching or parsing XML for {url}: {exc}")
            return None

    async def _classify_empty_root(self, root_url: str, diagnostics: List[str]) -> None:
        """Second look at the root when nothing was found and nothing explained why.

        Costs one extra request; its own failures are not recorded.
        """
        doc = await self._load(root_url, [])
        if doc is not None:
            diagnostics.append(
                f"No page URLs ultimately found from {root_url} (and its sub-sitemaps, if any). "
                f"The sitemap(s) might be empty of page links, malformed, or in an unsupported "
                f"format for page URL extraction."
            )
        else:
            diagnostics.append(
                f"Failed to fetch or parse the initial sitemap at {root_url}. It might be unavailable or empty."
            )
