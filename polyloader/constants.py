"""Shared constants for resource kinds, generated files and runtime tests."""

from __future__ import annotations

RESOURCE_SCRIPT = "script"
RESOURCE_MODULE = "module"
RESOURCE_MODULE_SHIM = "module-shim"
RESOURCE_SYSTEMJS = "systemjs"

RESOURCE_KINDS: tuple[str, ...] = (
    RESOURCE_SCRIPT,
    RESOURCE_MODULE,
    RESOURCE_MODULE_SHIM,
    RESOURCE_SYSTEMJS,
)

FILE_SCRIPT = "script"
FILE_MODULE = "module"

CLASSIC_SCRIPT_TYPES = frozenset({"text/javascript", "application/javascript"})
IMPORTMAP_TYPE = "importmap"
SYSTEMJS_IMPORTMAP_TYPE = "systemjs-importmap"

DEFAULT_POLYFILLS_DIR = "polyfills"
DEFAULT_INLINE_SCRIPT_NAME = "inline-script-{index}.js"

NO_MODULE_SUPPORT_TEST = "!('noModule' in HTMLScriptElement.prototype)"
MODULE_SUPPORT_TEST = "'noModule' in HTMLScriptElement.prototype"
NO_FETCH_TEST = "!('fetch' in window)"
DYNAMIC_IMPORT_TEST = (
    f"{MODULE_SUPPORT_TEST} && "
    "(function () { try { Function('window.importShim = s => import(s);').call(); return true; } "
    "catch (_) { return false } })()"
)
NO_INTERSECTION_OBSERVER_TEST = (
    "!('IntersectionObserver' in window && 'IntersectionObserverEntry' in window && "
    "'intersectionRatio' in window.IntersectionObserverEntry.prototype)"
)
NO_SHADOW_DOM_TEST = "!('attachShadow' in Element.prototype) || !('getRootNode' in Element.prototype)"
CUSTOM_ELEMENTS_ADAPTER_TEST = f"{NO_MODULE_SUPPORT_TEST} && 'getRootNode' in Element.prototype"


__all__ = [
    "CLASSIC_SCRIPT_TYPES",
    "CUSTOM_ELEMENTS_ADAPTER_TEST",
    "DEFAULT_INLINE_SCRIPT_NAME",
    "DEFAULT_POLYFILLS_DIR",
    "DYNAMIC_IMPORT_TEST",
    "FILE_MODULE",
    "FILE_SCRIPT",
    "IMPORTMAP_TYPE",
    "MODULE_SUPPORT_TEST",
    "NO_FETCH_TEST",
    "NO_INTERSECTION_OBSERVER_TEST",
    "NO_MODULE_SUPPORT_TEST",
    "NO_SHADOW_DOM_TEST",
    "RESOURCE_KINDS",
    "RESOURCE_MODULE",
    "RESOURCE_MODULE_SHIM",
    "RESOURCE_SCRIPT",
    "RESOURCE_SYSTEMJS",
    "SYSTEMJS_IMPORTMAP_TYPE",
]
