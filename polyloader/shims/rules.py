"""Ordered rule table mapping a compatibility config to polyfills.

Rule order is the order polyfills start loading in the generated code, so
new rules must be inserted deliberately rather than appended.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..config import CompatibilityConfig, ConfigError
from ..constants import (
    CUSTOM_ELEMENTS_ADAPTER_TEST,
    DYNAMIC_IMPORT_TEST,
    MODULE_SUPPORT_TEST,
    NO_FETCH_TEST,
    NO_INTERSECTION_OBSERVER_TEST,
    NO_MODULE_SUPPORT_TEST,
    NO_SHADOW_DOM_TEST,
    RESOURCE_SYSTEMJS,
)
from ..models import ResourceKinds


@dataclass(frozen=True)
class ShimSpec:
    """An unresolved polyfill: where its source lives and how it is gated."""

    name: str
    source: str
    test: Optional[str] = None
    package: Optional[str] = None
    module: bool = False
    minify: bool = False
    initializer: Optional[str] = None

    @property
    def from_package(self) -> bool:
        return self.package is not None


Predicate = Callable[[CompatibilityConfig, ResourceKinds], bool]
Factory = Callable[[CompatibilityConfig, ResourceKinds], List[ShimSpec]]


@dataclass(frozen=True)
class ShimRule:
    """Adds the specs from ``build`` when ``applies`` holds."""

    name: str
    applies: Predicate
    build: Factory


def _custom(config: CompatibilityConfig, kinds: ResourceKinds) -> List[ShimSpec]:
    specs: List[ShimSpec] = []
    for custom in config.custom:
        if not custom.name or not custom.path:
            raise ConfigError("A polyfill should have a name and a path property.")
        specs.append(
            ShimSpec(
                name=custom.name,
                source=custom.path,
                test=custom.test,
                module=custom.module,
                minify=custom.minify,
                initializer=custom.initializer,
            )
        )
    return specs


def _core_js(config: CompatibilityConfig, kinds: ResourceKinds) -> List[ShimSpec]:
    return [
        ShimSpec(
            name="core-js",
            source="core-js-bundle/minified.js",
            package="core-js-bundle",
            test=NO_MODULE_SUPPORT_TEST,
        )
    ]


def _regenerator_runtime(config: CompatibilityConfig, kinds: ResourceKinds) -> List[ShimSpec]:
    always = config.regenerator_runtime == "always"
    return [
        ShimSpec(
            name="regenerator-runtime",
            source="regenerator-runtime/runtime.js",
            package="regenerator-runtime",
            test=None if always else NO_MODULE_SUPPORT_TEST,
        )
    ]


def _fetch(config: CompatibilityConfig, kinds: ResourceKinds) -> List[ShimSpec]:
    return [
        ShimSpec(
            name="fetch",
            source="whatwg-fetch/dist/fetch.umd.js",
            package="whatwg-fetch",
            test=NO_FETCH_TEST,
        )
    ]


def _systemjs(config: CompatibilityConfig, kinds: ResourceKinds) -> List[ShimSpec]:
    # Required outright when the default set loads through systemjs; only a
    # fallback for browsers without modules when legacy branches use it.
    test = None if kinds.default_uses(RESOURCE_SYSTEMJS) else NO_MODULE_SUPPORT_TEST
    source = "systemjs/dist/system.min.js" if config.systemjs_extended else "systemjs/dist/s.min.js"
    return [ShimSpec(name="systemjs", source=source, package="systemjs", test=test)]


def _dynamic_import(config: CompatibilityConfig, kinds: ResourceKinds) -> List[ShimSpec]:
    return [
        ShimSpec(
            name="dynamic-import",
            source="dynamic-import-polyfill/dist/dynamic-import-polyfill.umd.js",
            package="dynamic-import-polyfill",
            test=DYNAMIC_IMPORT_TEST,
            initializer="window.dynamicImportPolyfill.initialize({ importFunctionName: 'importShim' });",
        )
    ]


def _es_module_shims(config: CompatibilityConfig, kinds: ResourceKinds) -> List[ShimSpec]:
    return [
        ShimSpec(
            name="es-module-shims",
            source="es-module-shims/dist/es-module-shims.min.js",
            package="es-module-shims",
            test=MODULE_SUPPORT_TEST,
            module=True,
        )
    ]


def _intersection_observer(config: CompatibilityConfig, kinds: ResourceKinds) -> List[ShimSpec]:
    return [
        ShimSpec(
            name="intersection-observer",
            source="intersection-observer/intersection-observer.js",
            package="intersection-observer",
            test=NO_INTERSECTION_OBSERVER_TEST,
            minify=True,
        )
    ]


def _webcomponents(config: CompatibilityConfig, kinds: ResourceKinds) -> List[ShimSpec]:
    package = "@webcomponents/webcomponentsjs"
    return [
        ShimSpec(
            name="webcomponents",
            source=f"{package}/webcomponents-bundle.js",
            package=package,
            test=NO_SHADOW_DOM_TEST,
        ),
        # Browsers with custom elements but without nomodule (Safari 10.1)
        # need the es5 adapter.
        ShimSpec(
            name="custom-elements-es5-adapter",
            source=f"{package}/custom-elements-es5-adapter.js",
            package=package,
            test=CUSTOM_ELEMENTS_ADAPTER_TEST,
        ),
    ]


SHIM_RULES: Tuple[ShimRule, ...] = (
    ShimRule("custom", lambda config, kinds: bool(config.custom), _custom),
    ShimRule("core-js", lambda config, kinds: bool(config.core_js), _core_js),
    ShimRule(
        "regenerator-runtime",
        lambda config, kinds: bool(config.regenerator_runtime),
        _regenerator_runtime,
    ),
    ShimRule("fetch", lambda config, kinds: bool(config.fetch), _fetch),
    ShimRule("systemjs", lambda config, kinds: kinds.uses(RESOURCE_SYSTEMJS), _systemjs),
    ShimRule("dynamic-import", lambda config, kinds: bool(config.dynamic_import), _dynamic_import),
    ShimRule("es-module-shims", lambda config, kinds: bool(config.es_module_shims), _es_module_shims),
    ShimRule(
        "intersection-observer",
        lambda config, kinds: bool(config.intersection_observer),
        _intersection_observer,
    ),
    ShimRule("webcomponents", lambda config, kinds: bool(config.webcomponents), _webcomponents),
)


__all__ = ["SHIM_RULES", "ShimRule", "ShimSpec"]
