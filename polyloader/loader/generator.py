"""Generation of the polyfills loader script."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..config import CompatibilityConfig
from ..constants import (
    DEFAULT_POLYFILLS_DIR,
    FILE_MODULE,
    FILE_SCRIPT,
    RESOURCE_MODULE,
    RESOURCE_MODULE_SHIM,
    RESOURCE_SCRIPT,
)
from ..logging import get_logger
from ..models import GeneratedFile, LegacyResources, Resource, ResourceKinds, ShimDescriptor
from ..shims.resolver import ShimResolver
from . import fragments

_SCRIPT_LOADED_KINDS = frozenset({RESOURCE_SCRIPT, RESOURCE_MODULE, RESOURCE_MODULE_SHIM})


@dataclass
class PolyfillsLoader:
    """Loader code plus the polyfill files it references."""

    code: str
    generated_files: List[GeneratedFile] = field(default_factory=list)


def shim_file_path(shim: ShimDescriptor, polyfills_dir: str = DEFAULT_POLYFILLS_DIR) -> str:
    """Return ``<dir>/<name>[.<hash>].<ext>`` for a polyfill."""
    extension = "mjs" if shim.module else "js"
    name = f"{shim.name}.{shim.hash}" if shim.hash else shim.name
    return posixpath.join(polyfills_dir, f"{name}.{extension}")


class LoaderGenerator:
    """Builds the loader program from resources and resolved polyfills."""

    def __init__(self) -> None:
        self.logger = get_logger("loader")

    def generate(
        self,
        resources: Sequence[Resource],
        legacy_resources: Sequence[LegacyResources] = (),
        shims: Sequence[ShimDescriptor] = (),
        polyfills_dir: str = DEFAULT_POLYFILLS_DIR,
    ) -> PolyfillsLoader:
        resource_sets = [list(resources), *(list(group.resources) for group in legacy_resources)]
        needs_load_script = bool(shims) or any(
            resource.kind in _SCRIPT_LOADED_KINDS
            for resource_set in resource_sets
            for resource in resource_set
        )
        needs_fold = any(len(resource_set) > 1 for resource_set in resource_sets)

        lines: List[str] = []
        if needs_load_script or needs_fold:
            lines.extend(fragments.deferred_helper())
            lines.append("")
        if needs_load_script:
            lines.extend(fragments.load_script_helper())
            lines.append("")

        resource_lines = fragments.branch_chain(
            legacy_resources, fragments.load_resources(resources)
        )

        generated_files: List[GeneratedFile] = []
        if shims:
            lines.extend(fragments.wait_helper())
            lines.append("")
            lines.append("var polyfills = [];")
            for shim in shims:
                path = shim_file_path(shim, polyfills_dir)
                lines.append(fragments.shim_gate(shim, path))
                generated_files.append(
                    GeneratedFile(
                        path=path,
                        kind=FILE_MODULE if shim.module else FILE_SCRIPT,
                        content=shim.code,
                    )
                )
            lines.append("")
            lines.append("function loadResources() {")
            lines.extend(fragments.indent(resource_lines))
            lines.append("}")
            lines.append("")
            lines.append("polyfills.length ? whenAll(polyfills, loadResources) : loadResources();")
        else:
            # Nothing to wait for, load entries straight away.
            lines.extend(resource_lines)

        body = "\n".join(fragments.indent(lines))
        code = f"\n(function () {{\n{body}\n}})();\n"
        self.logger.debug(
            "Generated loader for %d resources, %d legacy sets and %d polyfills",
            len(resources),
            len(legacy_resources),
            len(shims),
        )
        return PolyfillsLoader(code=code, generated_files=generated_files)


def create_polyfills_loader(
    resources: Sequence[Resource],
    *,
    legacy_resources: Sequence[LegacyResources] = (),
    polyfills: Optional[CompatibilityConfig] = None,
    polyfills_dir: str = DEFAULT_POLYFILLS_DIR,
    resolver: ShimResolver | None = None,
) -> PolyfillsLoader:
    """Resolve polyfills for ``resources`` and generate a loader that runs immediately."""
    resolver = resolver or ShimResolver()
    shims = resolver.resolve(polyfills, ResourceKinds.collect(resources, legacy_resources))
    return LoaderGenerator().generate(resources, legacy_resources, shims, polyfills_dir)


__all__ = [
    "LoaderGenerator",
    "PolyfillsLoader",
    "create_polyfills_loader",
    "shim_file_path",
]
