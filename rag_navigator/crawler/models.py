# rag_navigator/crawler/models.py
"""
Data models for the sitemap crawler.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(slots=True)
class CrawlResult:
    """Outcome of one crawl.

    ``indexed_urls`` and ``skipped_urls`` partition the page URLs that were
    considered, in processing order. ``errors`` holds human-readable
    diagnostics in the order they were recorded. ``contents`` maps every
    indexed URL to its extracted text and is not part of the serialized shape.
    """

    indexed_urls: List[str] = field(default_factory=list)
    skipped_urls: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    contents: Dict[str, str] = field(default_factory=dict, repr=False)

    def to_dict(self) -> Dict[str, List[str]]:
        """Hand-off shape for UIs and reports."""
        return {
            "indexedUrls": list(self.indexed_urls),
            "skippedUrls": list(self.skipped_urls),
            "errors": list(self.errors),
        }

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)

    @classmethod
    def failed(cls, message: str) -> CrawlResult:
        """Empty result carrying a single diagnostic."""
        return cls(errors=[message])
