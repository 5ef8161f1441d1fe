"""Markup parsing and tree manipulation."""

from .base import MarkupTree, Node
from .soup import SoupTree, parse_document

__all__ = ["MarkupTree", "Node", "SoupTree", "parse_document"]
