"""BeautifulSoup backed :class:`MarkupTree`."""

from __future__ import annotations

import copy
from typing import List, Mapping, Optional

from bs4 import BeautifulSoup, Tag
from bs4.element import Script

from .base import MarkupTree


class SoupTree(MarkupTree):
    """Wraps a ``BeautifulSoup`` document built by the html5lib tree builder.

    html5lib follows the browser parsing algorithm, so documents that omit the
    optional ``<html>``, ``<head>`` or ``<body>`` tags still get those elements.
    """

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup

    @classmethod
    def parse(cls, html: str) -> "SoupTree":
        return cls(BeautifulSoup(html, "html5lib"))

    def find_all(self, tag: str, root: Optional[Tag] = None) -> List[Tag]:
        scope = root if root is not None else self.soup
        return list(scope.find_all(tag))

    def get_attribute(self, node: Tag, name: str) -> Optional[str]:
        value = node.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def set_attribute(self, node: Tag, name: str, value: str) -> None:
        node[name] = value

    def text_content(self, node: Tag) -> str:
        return "".join(str(child) for child in node.contents)

    def remove(self, node: Tag) -> None:
        node.extract()

    def insert_after(self, reference: Tag, node: Tag) -> None:
        reference.insert_after(node)

    def append(self, parent: Tag, node: Tag) -> None:
        parent.append(node)

    def clone(self, node: Tag) -> Tag:
        return copy.copy(node)

    def create_element(
        self, tag: str, attributes: Optional[Mapping[str, str]] = None, text: Optional[str] = None
    ) -> Tag:
        element = self.soup.new_tag(tag)
        for key, value in (attributes or {}).items():
            if value is not None:
                element[key] = value
        if text:
            element.append(Script(text) if tag == "script" else text)
        return element

    def serialize(self) -> str:
        return str(self.soup)


def parse_document(html: str) -> SoupTree:
    """Parse markup into a mutable :class:`SoupTree`."""
    return SoupTree.parse(html)
