# File: rag_navigator/parser/sitemap_parser.py
"""rag_navigator.parser.sitemap_parser: turn a sitemap body into sitemap and page URLs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from rag_navigator.parser.dom import MarkupParseError, XmlDocument


class SitemapParseError(MarkupParseError):
    """The sitemap body is not usable XML."""


@dataclass(slots=True)
class SitemapDocument:
    """What a single sitemap file tells the resolver.

    ``is_index`` is set when a ``<sitemapindex>`` element is present; then
    ``sitemap_locs`` lists the ``<sitemap><loc>`` entries of the first such
    element. ``page_locs`` holds every ``<loc>`` text in document order and is
    what a leaf sitemap contributes. ``has_text`` tells an empty document from
    one whose content simply had no usable ``<loc>``.
    """

    is_index: bool
    sitemap_locs: List[str] = field(default_factory=list)
    page_locs: List[str] = field(default_factory=list)
    has_text: bool = False


def parse_sitemap(xml_content: Union[str, bytes]) -> SitemapDocument:
    """Parse a sitemap or sitemap index.

    Args:
        xml_content: the sitemap file, preferably as raw bytes so its
            declared encoding is honoured.

    Returns:
        SitemapDocument describing the file.

    Raises:
        SitemapParseError: the content cannot be parsed as XML at all.

    Example:
    ```python
    doc = parse_sitemap(Path("sitemap.xml").read_bytes())
    urls = doc.sitemap_locs if doc.is_index else doc.page_locs
    ```
    """
    try:
        doc = XmlDocument(xml_content)
    except MarkupParseError as exc:
        raise SitemapParseError(str(exc)) from exc

    has_text = bool(doc.text.strip())
    index = doc.find_first("sitemapindex")
    if index is not None:
        sitemap_locs: List[str] = []
        for entry in index.find_all("sitemap"):
            loc = entry.find_first("loc")
            if loc is not None and loc.text.strip():
                sitemap_locs.append(loc.text.strip())
        return SitemapDocument(is_index=True, sitemap_locs=sitemap_locs, has_text=has_text)

    page_locs = [loc.text.strip() for loc in doc.find_all("loc") if loc.text.strip()]
    return SitemapDocument(is_index=False, page_locs=page_locs, has_text=has_text)
