# rag_navigator/report/json_report.py

"""
JSON report for RAG Navigator.

Writes the caller-facing shape of a CrawlResult to a file.
"""
import json
from pathlib import Path

from rag_navigator.crawler.models import CrawlResult


def render_json(result: CrawlResult, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save *result* as JSON (``indexedUrls``, ``skippedUrls``, ``errors``).

    :param result: CrawlResult of an indexing run
    :param output_path: target JSON file, parent directories are created
    :param pretty: indent with two spaces
    :return: Path of the written file

    Example:
    ```python
    from rag_navigator.report.json_report import render_json
    report_path = render_json(result, 'reports/crawl.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(result.to_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
