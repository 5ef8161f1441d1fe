"""Narrow tree interface the scanner and injector operate on."""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

Node = Any


class MarkupTree(ABC):
    """A parsed, mutable document. Nodes are opaque handles owned by the tree."""

    @abstractmethod
    def find_all(self, tag: str, root: Optional[Node] = None) -> List[Node]:
        """Return every element named ``tag`` under ``root`` (the document by default), in order."""

    def find(self, tag: str) -> Optional[Node]:
        matches = self.find_all(tag)
        return matches[0] if matches else None

    @abstractmethod
    def get_attribute(self, node: Node, name: str) -> Optional[str]:
        """Return the attribute value, or None when it is absent."""

    def has_attribute(self, node: Node, name: str) -> bool:
        return self.get_attribute(node, name) is not None

    @abstractmethod
    def set_attribute(self, node: Node, name: str, value: str) -> None:
        """Set or replace an attribute."""

    @abstractmethod
    def text_content(self, node: Node) -> str:
        """Return the raw text inside ``node``."""

    @abstractmethod
    def remove(self, node: Node) -> None:
        """Detach ``node`` from the document."""

    @abstractmethod
    def insert_after(self, reference: Node, node: Node) -> None:
        """Insert ``node`` as the next sibling of ``reference``."""

    @abstractmethod
    def append(self, parent: Node, node: Node) -> None:
        """Append ``node`` as the last child of ``parent``."""

    @abstractmethod
    def clone(self, node: Node) -> Node:
        """Return a detached deep copy of ``node``."""

    @abstractmethod
    def create_element(
        self, tag: str, attributes: Optional[Mapping[str, str]] = None, text: Optional[str] = None
    ) -> Node:
        """Create a detached element with optional attributes and text."""

    @abstractmethod
    def serialize(self) -> str:
        """Render the document back to markup."""
