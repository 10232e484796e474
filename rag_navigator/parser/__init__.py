# File: rag_navigator/parser/__init__.py
"""rag_navigator.parser: sitemap XML and page HTML parsing."""
