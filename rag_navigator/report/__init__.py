# File: rag_navigator/report/__init__.py
"""rag_navigator.report: JSON and HTML reports of a crawl result."""

from __future__ import annotations

from rag_navigator.report.html_report import DEFAULT_TEMPLATE_DIR, render_html
from rag_navigator.report.json_report import render_json

__all__ = ["render_json", "render_html", "DEFAULT_TEMPLATE_DIR"]
