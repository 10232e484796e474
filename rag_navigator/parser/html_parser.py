# === FILE: rag_navigator/parser/html_parser.py ===
"""HTML-to-text reduction for indexed pages.

:func:`extract_text` picks the most content-bearing container of a page:

* the first ``<article>``,
* else the first ``<main>``,
* else ``<body>``,
* else nothing.

When that text is missing or shorter than ``min_length`` characters, the
markup is parsed again with navigation, scripts, forms, ads and similar noise
removed, and the remaining body text is used instead. The result is
whitespace-normalized. The function is pure: the same markup always gives the
same text.
"""
from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Final

from rag_navigator.config import MIN_CONTENT_LENGTH
from rag_navigator.parser.dom import HtmlDocument

__all__: Sequence[str] = ("NOISE_SELECTORS", "extract_text", "normalize_whitespace")

NOISE_SELECTORS: Final[tuple[str, ...]] = (
    "script",
    "style",
    "nav",
    "footer",
    "header",
    "aside",
    "noscript",
    "iframe",
    "form",
    "button",
    "input",
    "select",
    "textarea",
    "label",
    ".sidebar",
    ".menu",
    ".advertisement",
    ".ad",
    ".banner",
    "#sidebar",
    "#navigation",
    "#footer",
    "#header",
)

_WS_RUN = re.compile(r"\s{2,}")


def normalize_whitespace(text: str) -> str:
    """Collapse runs of two or more whitespace characters into one space and trim."""
    return _WS_RUN.sub(" ", text).strip()


def _preferred_text(doc: HtmlDocument) -> str:
    for tag in ("article", "main", "body"):
        node = doc.find_first(tag)
        if node is not None and node.text:
            return node.text
    return ""


def _denoised_body_text(html: str) -> str:
    doc = HtmlDocument(html)
    doc.remove(NOISE_SELECTORS)
    body = doc.body
    return body.text if body is not None else ""


def extract_text(html: str, min_length: int = MIN_CONTENT_LENGTH) -> str:
    """Return the readable text of *html*; ``""`` when nothing usable is left."""
    text = _preferred_text(HtmlDocument(html))
    if not text or len(text) < min_length:
        text = _denoised_body_text(html)
    return normalize_whitespace(text)
