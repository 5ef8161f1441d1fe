"""Composable JavaScript fragments for the generated loader.

Fragments return lists of unindented lines; callers nest them with
:func:`indent`. The emitted code targets es5 browsers and never relies on a
native ``Promise``: polyfills may not have loaded yet when it runs.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from ..constants import (
    RESOURCE_MODULE,
    RESOURCE_MODULE_SHIM,
    RESOURCE_SCRIPT,
    RESOURCE_SYSTEMJS,
)
from ..models import LegacyResources, Resource, ShimDescriptor
from ..utils import clean_import_path

_INDENT = "  "
_LOG_PREFIX = "[polyloader]"

DEFERRED_HELPER: tuple[str, ...] = (
    "function deferred() {",
    "  var settled = false, callbacks = [];",
    "  return {",
    "    resolve: function () {",
    "      if (settled) return;",
    "      settled = true;",
    "      for (var i = 0; i < callbacks.length; i++) callbacks[i]();",
    "    },",
    "    then: function (cb) {",
    "      var next = deferred();",
    "      function run() {",
    "        var result = cb ? cb() : null;",
    "        if (result && typeof result.then === 'function') {",
    "          result.then(next.resolve, next.resolve);",
    "        } else {",
    "          next.resolve();",
    "        }",
    "      }",
    "      settled ? run() : callbacks.push(run);",
    "      return next;",
    "    }",
    "  };",
    "}",
    "",
    "function resolved() {",
    "  var d = deferred();",
    "  d.resolve();",
    "  return d;",
    "}",
)

LOAD_SCRIPT_HELPER: tuple[str, ...] = (
    "function loadScript(src, type) {",
    "  var d = deferred(), s = document.createElement('script');",
    "  function settle() {",
    "    if (s.parentNode) s.parentNode.removeChild(s);",
    "    d.resolve();",
    "  }",
    "  s.src = src;",
    "  s.onload = settle;",
    "  s.onerror = function () {",
    f"    console.error('{_LOG_PREFIX} failed to load: ' + src + ' check the network tab for HTTP status.');",
    "    settle();",
    "  };",
    "  if (type) s.type = type;",
    "  document.head.appendChild(s);",
    "  return d;",
    "}",
)

WAIT_HELPER: tuple[str, ...] = (
    "function whenAll(list, cb) {",
    "  var remaining = list.length;",
    "  for (var i = 0; i < list.length; i++) {",
    "    list[i].then(function () {",
    "      remaining -= 1;",
    "      if (remaining === 0) cb();",
    "    });",
    "  }",
    "}",
)

_SCRIPT_TYPES = {
    RESOURCE_SCRIPT: None,
    RESOURCE_MODULE: "module",
    RESOURCE_MODULE_SHIM: "module-shim",
}


def indent(lines: Iterable[str], level: int = 1) -> List[str]:
    """Indent non-empty lines by ``level`` steps."""
    prefix = _INDENT * level
    return [f"{prefix}{line}" if line else "" for line in lines]


def js_string(value: str) -> str:
    """Return ``value`` as a single-quoted JavaScript string literal."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("</", "<\\/")
    )
    return f"'{escaped}'"


def deferred_helper() -> List[str]:
    return list(DEFERRED_HELPER)


def load_script_helper() -> List[str]:
    return list(LOAD_SCRIPT_HELPER)


def wait_helper() -> List[str]:
    return list(WAIT_HELPER)


def load_script_call(path: str, script_type: str | None = None) -> str:
    args = js_string(clean_import_path(path))
    if script_type:
        args += f", {js_string(script_type)}"
    return f"loadScript({args})"


def load_resource(resource: Resource) -> str:
    """Return an expression that loads ``resource`` and evaluates to a thenable."""
    if resource.kind in _SCRIPT_TYPES:
        return load_script_call(resource.path, _SCRIPT_TYPES[resource.kind])
    if resource.kind == RESOURCE_SYSTEMJS:
        path = js_string(clean_import_path(resource.path))
        return (
            f"System.import({path}).then(null, function (e) {{ "
            f"console.error('{_LOG_PREFIX} failed to import: ' + {path}, e); }})"
        )
    raise ValueError(f"Unknown resource type: {resource.kind}")


def load_resources(resources: Sequence[Resource]) -> List[str]:
    """Return statements loading ``resources`` one after another."""
    if not resources:
        return []
    if len(resources) == 1:
        return [f"{load_resource(resources[0])};"]

    steps = [f"function () {{ return {load_resource(resource)}; }}" for resource in resources]
    lines = ["["]
    lines.extend(
        f"{_INDENT}{step}{',' if index < len(steps) - 1 else ''}"
        for index, step in enumerate(steps)
    )
    lines.extend(
        [
            "].reduce(function (a, c) {",
            f"{_INDENT}return a.then(c);",
            "}, resolved());",
        ]
    )
    return lines


def branch_chain(legacy_resources: Sequence[LegacyResources], default: Sequence[str]) -> List[str]:
    """Pick the first legacy set whose test passes, falling back to ``default``."""
    if not legacy_resources:
        return list(default)
    lines: List[str] = []
    for index, legacy in enumerate(legacy_resources):
        keyword = "if" if index == 0 else "} else if"
        lines.append(f"{keyword} ({legacy.test}) {{")
        lines.extend(indent(load_resources(legacy.resources)))
    lines.append("} else {")
    lines.extend(indent(default))
    lines.append("}")
    return lines


def shim_gate(shim: ShimDescriptor, path: str) -> str:
    """Return a statement that starts loading ``shim`` when its test passes."""
    load = load_script_call(path, "module" if shim.module else None)
    if shim.initializer:
        load += f".then(function () {{ {shim.initializer} }})"
    push = f"polyfills.push({load});"
    if shim.test:
        return f"if ({shim.test}) {{ {push} }}"
    return push


__all__ = [
    "branch_chain",
    "deferred_helper",
    "indent",
    "js_string",
    "load_resource",
    "load_resources",
    "load_script_call",
    "load_script_helper",
    "shim_gate",
    "wait_helper",
]
