"""Helpers for building a throwaway node_modules tree with polyfill sources."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

PACKAGE_FILES: Mapping[str, str] = {
    "core-js-bundle/minified.js": "/* core-js */ window.coreJs = true;\n",
    "regenerator-runtime/runtime.js": "/* regenerator */ window.regeneratorRuntime = {};\n",
    "whatwg-fetch/dist/fetch.umd.js": "/* fetch */ window.fetch = function () {};\n",
    "systemjs/dist/s.min.js": "/* systemjs plain */ window.System = {};\n",
    "systemjs/dist/system.min.js": "/* systemjs extended */ window.System = { importMap: true };\n",
    "dynamic-import-polyfill/dist/dynamic-import-polyfill.umd.js": "/* dynamic import */\n",
    "es-module-shims/dist/es-module-shims.min.js": "/* es-module-shims */\n",
    "intersection-observer/intersection-observer.js": (
        "/* intersection observer */\n"
        "function IntersectionObserver ( callback ) {\n"
        "    this.callback = callback ;\n"
        "}\n"
    ),
    "@webcomponents/webcomponentsjs/webcomponents-bundle.js": "/* webcomponents */\n",
    "@webcomponents/webcomponentsjs/custom-elements-es5-adapter.js": "/* es5 adapter */\n",
}


def build_node_modules(root: Path, files: Mapping[str, str] = PACKAGE_FILES) -> Path:
    """Write ``files`` below ``root/node_modules`` and return that directory."""
    node_modules = root / "node_modules"
    for relative, content in files.items():
        path = node_modules / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return node_modules


__all__ = ["PACKAGE_FILES", "build_node_modules"]
