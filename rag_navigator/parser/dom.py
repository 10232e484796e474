# File: rag_navigator/parser/dom.py
"""Markup documents behind one small interface.

Sitemap and page parsing only need three things from a DOM: find elements by
tag name, read their text, and drop subtrees. :class:`XmlDocument` (lxml) and
:class:`HtmlDocument` (BeautifulSoup) provide exactly that, so the engines can
change without touching the extraction logic.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Protocol, Sequence, Union

from bs4 import BeautifulSoup
from bs4.element import Tag
from lxml import etree

__all__: Sequence[str] = ("MarkupNode", "XmlDocument", "HtmlDocument", "MarkupParseError")

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


class MarkupParseError(ValueError):
    """Markup could not be turned into a document."""


class MarkupNode(Protocol):
    def find_all(self, tag: str) -> List["MarkupNode"]: ...

    def find_first(self, tag: str) -> Optional["MarkupNode"]: ...

    @property
    def text(self) -> str: ...


class _XmlNode:
    __slots__ = ("_el",)

    def __init__(self, element: etree._Element) -> None:
        self._el = element

    def find_all(self, tag: str) -> List[_XmlNode]:
        # "{*}" matches the tag in any namespace, including none
        return [_XmlNode(el) for el in self._el.iterdescendants(f"{{*}}{tag}")]

    def find_first(self, tag: str) -> Optional[_XmlNode]:
        for el in self._el.iterdescendants(f"{{*}}{tag}"):
            return _XmlNode(el)
        return None

    @property
    def text(self) -> str:
        return "".join(self._el.itertext())


class XmlDocument(_XmlNode):
    """XML document parsed in lxml recovery mode.

    Bytes are handed to lxml untouched, so the document's own encoding
    declaration decides the decoding. Text is already decoded: its declaration
    is dropped and the characters are parsed as UTF-8.
    """

    __slots__ = ()

    def __init__(self, markup: Union[str, bytes]) -> None:
        parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False, no_network=True)
        if isinstance(markup, str):
            data = _XML_DECLARATION.sub("", markup.strip(), count=1).encode("utf-8")
        else:
            data = markup.strip()
        try:
            root = etree.fromstring(data, parser=parser)
        except etree.XMLSyntaxError as exc:
            raise MarkupParseError(str(exc)) from exc
        if root is None:
            raise MarkupParseError("document has no root element")
        super().__init__(root)

    @property
    def root_tag(self) -> str:
        return etree.QName(self._el).localname

    def find_all(self, tag: str) -> List[_XmlNode]:
        # the root element itself counts, like getElementsByTagName on a document
        found = [_XmlNode(self._el)] if self.root_tag == tag else []
        return found + super().find_all(tag)

    def find_first(self, tag: str) -> Optional[_XmlNode]:
        if self.root_tag == tag:
            return _XmlNode(self._el)
        return super().find_first(tag)


class _HtmlNode:
    __slots__ = ("_tag",)

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def find_all(self, tag: str) -> List[_HtmlNode]:
        return [_HtmlNode(t) for t in self._tag.find_all(tag) if isinstance(t, Tag)]

    def find_first(self, tag: str) -> Optional[_HtmlNode]:
        found = self._tag.find(tag)
        return _HtmlNode(found) if isinstance(found, Tag) else None

    @property
    def text(self) -> str:
        return self._tag.get_text()


class HtmlDocument(_HtmlNode):
    """HTML document parsed by BeautifulSoup on lxml, with a browser-like head/body split."""

    __slots__ = ()

    def __init__(self, markup: str) -> None:
        super().__init__(BeautifulSoup(markup, "lxml"))

    @property
    def body(self) -> Optional[_HtmlNode]:
        return self.find_first("body")

    def remove(self, selectors: Iterable[str]) -> int:
        """Drop every subtree matching one of the CSS *selectors*; returns how many."""
        removed = 0
        for element in self._tag.select(", ".join(selectors)):
            if element.decomposed:
                # nested inside an element removed earlier
                continue
            element.decompose()
            removed += 1
        return removed
