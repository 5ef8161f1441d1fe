"""Loader code generation."""

from .generator import (
    LoaderGenerator,
    PolyfillsLoader,
    create_polyfills_loader,
    shim_file_path,
)

__all__ = [
    "LoaderGenerator",
    "PolyfillsLoader",
    "create_polyfills_loader",
    "shim_file_path",
]
