# rag_navigator/__init__.py
"""
RAG Navigator package initializer.
Defines the package version and the main public entry points.
"""
__version__ = "0.1.0"

from rag_navigator.config import NavigatorConfig, load_config
from rag_navigator.crawler.crawler import SitemapCrawler
from rag_navigator.crawler.models import CrawlResult
from rag_navigator.engine import NavigatorSession

__all__ = [
    "__version__",
    "NavigatorConfig",
    "load_config",
    "SitemapCrawler",
    "CrawlResult",
    "NavigatorSession",
]
