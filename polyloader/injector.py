"""Inject a polyfills loader into an HTML document."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .config import ConfigError, InjectionConfig, InvalidDocumentError
from .constants import (
    DEFAULT_POLYFILLS_DIR,
    IMPORTMAP_TYPE,
    RESOURCE_SYSTEMJS,
    SYSTEMJS_IMPORTMAP_TYPE,
)
from .loader.generator import LoaderGenerator
from .logging import get_logger
from .markup.base import MarkupTree, Node
from .markup.soup import parse_document
from .models import GeneratedFile
from .scanner import DocumentScanner, script_type
from .shims.resolver import ShimResolver


@dataclass
class InjectResult:
    """Transformed document plus the files the caller must write next to it."""

    html: str
    inline_scripts: List[GeneratedFile] = field(default_factory=list)
    polyfills: List[GeneratedFile] = field(default_factory=list)

    @property
    def generated_files(self) -> List[GeneratedFile]:
        return [*self.inline_scripts, *self.polyfills]


def find_importmap_scripts(tree: MarkupTree, root: Optional[Node] = None) -> List[Node]:
    """Return import map scripts under ``root``, external ones first, each group in document order."""
    external: List[Node] = []
    inline: List[Node] = []
    for script in tree.find_all("script", root):
        if script_type(tree, script) != IMPORTMAP_TYPE:
            continue
        if tree.get_attribute(script, "src"):
            external.append(script)
        else:
            inline.append(script)
    return [*external, *inline]


class PolyfillsInjector:
    """Coordinates scanning, polyfill resolution and loader generation for one document."""

    def __init__(
        self,
        scanner: DocumentScanner | None = None,
        resolver: ShimResolver | None = None,
        generator: LoaderGenerator | None = None,
        parser: Callable[[str], MarkupTree] = parse_document,
    ) -> None:
        self.scanner = scanner or DocumentScanner()
        self.resolver = resolver or ShimResolver()
        self.generator = generator or LoaderGenerator()
        self._parse = parser
        self.logger = get_logger("injector")

    def inject(self, html: str, config: InjectionConfig) -> InjectResult:
        """Return ``html`` with its scripts replaced by a polyfills loader."""
        if config.is_noop():
            self.logger.debug("No polyfills, legacy branches or module type override; skipping")
            return InjectResult(html=html)

        tree = self._parse(html)
        result = self.inject_tree(tree, config)
        result.html = tree.serialize()
        return result

    def inject_tree(self, tree: MarkupTree, config: InjectionConfig) -> InjectResult:
        """Transform ``tree`` in place; the returned ``html`` is left empty."""
        head = tree.find("head")
        body = tree.find("body")
        if head is None or body is None:
            raise InvalidDocumentError("Invalid index.html: missing <head> or <body>")

        scan = self.scanner.scan(tree, config)
        polyfills_dir = posixpath.join(config.generated_file_dir or "", DEFAULT_POLYFILLS_DIR)
        _check_collisions(scan.inline_scripts, polyfills_dir)

        shims = self.resolver.resolve(config.polyfills, scan.kinds())
        loader = self.generator.generate(
            scan.resources,
            scan.legacy_resources,
            shims,
            polyfills_dir,
        )
        tree.append(body, tree.create_element("script", text=loader.code))

        if _uses_systemjs(config):
            self._inject_importmap_polyfills(tree, head)

        self.logger.info(
            "Injected loader for %d resources with %d polyfills",
            len(scan.resources),
            len(shims),
        )
        return InjectResult(
            html="",
            inline_scripts=list(scan.inline_scripts),
            polyfills=list(loader.generated_files),
        )

    def _inject_importmap_polyfills(self, tree: MarkupTree, head: Node) -> None:
        for script in find_importmap_scripts(tree, head):
            systemjs_script = tree.clone(script)
            tree.set_attribute(systemjs_script, "type", SYSTEMJS_IMPORTMAP_TYPE)
            tree.insert_after(script, systemjs_script)


def _uses_systemjs(config: InjectionConfig) -> bool:
    module_kinds = [config.module_kind, *(branch.module_kind for branch in config.legacy)]
    return RESOURCE_SYSTEMJS in module_kinds


def _check_collisions(inline_scripts: Sequence[GeneratedFile], polyfills_dir: str) -> None:
    prefix = posixpath.normpath(polyfills_dir) + "/"
    for generated in inline_scripts:
        if posixpath.normpath(generated.path).startswith(prefix):
            raise ConfigError(
                f"Inline script name {generated.path} collides with the polyfills directory {polyfills_dir}"
            )


def inject_polyfills_loader(
    html: str,
    config: InjectionConfig,
    *,
    resolver: ShimResolver | None = None,
) -> InjectResult:
    """Transform an index.html, injecting a polyfills loader for older browsers."""
    return PolyfillsInjector(resolver=resolver).inject(html, config)


__all__ = [
    "InjectResult",
    "PolyfillsInjector",
    "find_importmap_scripts",
    "inject_polyfills_loader",
]
