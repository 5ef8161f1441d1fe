"""Small helpers shared by the scanner, resolver and loader generator."""

from __future__ import annotations

import hashlib
from urllib.parse import urlsplit

import rjsmin

_HASH_LENGTH = 16


def content_hash(content: str) -> str:
    """Return a short, stable hex digest of ``content``."""
    digest = hashlib.sha256(content.encode("utf-8"))
    return digest.hexdigest()[:_HASH_LENGTH]


def minify_js(code: str) -> str:
    """Minify JavaScript source, keeping license comments."""
    return rjsmin.jsmin(code, keep_bang_comments=True)


def clean_import_path(path: str) -> str:
    """Prefix bare relative paths with ``./`` so browsers resolve them relative to the page."""
    if path.startswith(("/", "./", "../")):
        return path
    return f"./{path}"


def is_remote_uri(src: str | None) -> bool:
    """Return True when ``src`` points at a fully-qualified URI (CDN, data URI, other origin)."""
    if not src:
        return False
    value = src.strip()
    if value.startswith("//"):
        return True
    return bool(urlsplit(value).scheme)


__all__ = ["clean_import_path", "content_hash", "is_remote_uri", "minify_js"]
