"""Document scanning: find, classify, order and extract script resources."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .config import InjectionConfig
from .constants import (
    CLASSIC_SCRIPT_TYPES,
    FILE_MODULE,
    FILE_SCRIPT,
    RESOURCE_MODULE,
    RESOURCE_SCRIPT,
)
from .logging import get_logger
from .markup.base import MarkupTree, Node
from .models import GeneratedFile, LegacyResources, Resource, ResourceKinds
from .utils import is_remote_uri


@dataclass
class ScriptElement:
    """A script element that qualified for loading through the loader."""

    node: Node
    inline: bool
    module: bool
    is_async: bool
    deferred: bool
    src: Optional[str] = None


@dataclass
class ScanResult:
    """Resources extracted from a document, ready for shim resolution."""

    resources: List[Resource] = field(default_factory=list)
    legacy_resources: List[LegacyResources] = field(default_factory=list)
    inline_scripts: List[GeneratedFile] = field(default_factory=list)

    def kinds(self) -> ResourceKinds:
        """Return the resource kinds used by the default and legacy sets."""
        return ResourceKinds.collect(self.resources, self.legacy_resources)


def script_type(tree: MarkupTree, node: Node) -> Optional[str]:
    """Return the lowercased, stripped ``type`` attribute of a script element."""
    value = tree.get_attribute(node, "type")
    return value.strip().lower() if value is not None else None


def _classify(tree: MarkupTree, node: Node, config: InjectionConfig) -> Optional[ScriptElement]:
    src = tree.get_attribute(node, "src")
    inline = src is None
    if not inline and is_remote_uri(src):
        # Cross-origin scripts keep loading natively.
        return None

    kind = script_type(tree, node)
    if not kind or kind in CLASSIC_SCRIPT_TYPES:
        module = False
        included = config.inline_scripts if inline else config.external_scripts
    elif kind == "module":
        module = True
        included = config.inline_modules if inline else config.external_modules
    else:
        return None

    if not included:
        return None

    return ScriptElement(
        node=node,
        inline=inline,
        module=module,
        is_async=tree.has_attribute(node, "async"),
        deferred=module or tree.has_attribute(node, "defer"),
        src=src,
    )


def find_scripts(tree: MarkupTree, config: InjectionConfig) -> List[ScriptElement]:
    """Return qualifying script elements in document order."""
    scripts: List[ScriptElement] = []
    for node in tree.find_all("script"):
        element = _classify(tree, node, config)
        if element is not None:
            scripts.append(element)
    return scripts


def _execution_rank(script: ScriptElement) -> int:
    if script.is_async:
        return 0
    if not script.deferred:
        return 1
    return 2


def sort_scripts(scripts: Sequence[ScriptElement]) -> List[ScriptElement]:
    """Order scripts the way browsers execute them.

    Async scripts come first, then regular blocking scripts, then deferred
    scripts and modules. The sort is stable, so document order breaks ties.
    """
    return sorted(scripts, key=_execution_rank)


def _map_module_kind(resource: Resource, module_kind: Optional[str]) -> Resource:
    if module_kind and resource.kind == RESOURCE_MODULE:
        return Resource(kind=module_kind, path=resource.path)
    return resource


def build_legacy_resources(
    resources: Sequence[Resource], config: InjectionConfig
) -> List[LegacyResources]:
    """Derive one resource set per legacy branch from the scanned resources."""
    legacy: List[LegacyResources] = []
    for branch in config.legacy:
        mapped = [_map_module_kind(resource, branch.module_kind) for resource in resources]
        legacy.append(
            LegacyResources(
                test=branch.test,
                resources=tuple(list(branch.extra_resources) + mapped),
            )
        )
    return legacy


class DocumentScanner:
    """Extracts script resources from a document and removes their elements."""

    def __init__(self) -> None:
        self.logger = get_logger("scanner")

    def scan(self, tree: MarkupTree, config: InjectionConfig) -> ScanResult:
        """Return resources for the loader; scanned elements are removed from ``tree``."""
        scripts = sort_scripts(find_scripts(tree, config))
        self.logger.debug("Found %d scripts to load through the loader", len(scripts))

        inline_scripts: List[GeneratedFile] = []
        scanned: List[Resource] = []
        inline_index = 0
        for script in scripts:
            path, generated = self._resolve_path(tree, script, config, inline_index)
            if generated is not None:
                inline_scripts.append(generated)
                inline_index += 1

            kind = RESOURCE_MODULE if script.module else RESOURCE_SCRIPT
            scanned.append(Resource(kind=kind, path=path))
            tree.remove(script.node)

        resources = list(config.extra_resources)
        resources.extend(_map_module_kind(resource, config.module_kind) for resource in scanned)

        return ScanResult(
            resources=resources,
            legacy_resources=build_legacy_resources(scanned, config),
            inline_scripts=inline_scripts,
        )

    @staticmethod
    def _resolve_path(
        tree: MarkupTree,
        script: ScriptElement,
        config: InjectionConfig,
        inline_index: int,
    ) -> Tuple[str, Optional[GeneratedFile]]:
        if not script.inline:
            return script.src or "", None
        name = config.inline_script_name(inline_index)
        path = posixpath.join(config.generated_file_dir or "", name)
        generated = GeneratedFile(
            path=path,
            kind=FILE_MODULE if script.module else FILE_SCRIPT,
            content=tree.text_content(script.node),
        )
        return path, generated


__all__ = [
    "DocumentScanner",
    "ScanResult",
    "ScriptElement",
    "build_legacy_resources",
    "find_scripts",
    "script_type",
    "sort_scripts",
]
