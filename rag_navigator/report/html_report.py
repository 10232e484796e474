# File: rag_navigator/report/html_report.py
"""rag_navigator.report.html_report: HTML crawl report rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from rag_navigator.crawler.models import CrawlResult

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def render_html(
    result: CrawlResult,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
    *,
    sitemap_url: Optional[str] = None,
) -> Path:
    """Render the HTML report from ``report.html.j2`` and save it.

    Args:
        result: CrawlResult of an indexing run.
        template_dir: directory holding the template; None uses the bundled one.
        output_path: target HTML file.
        sitemap_url: shown in the report heading when given.

    Returns:
        Path of the written file.
    """
    template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {
        "sitemap_url": sitemap_url,
        "indexed": [
            {"url": url, "length": len(result.contents.get(url, ""))} for url in result.indexed_urls
        ],
        "skipped": result.skipped_urls,
        "errors": result.errors,
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
