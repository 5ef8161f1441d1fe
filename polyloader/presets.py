"""Named compatibility presets selectable with ``preset:`` in .polyloader.yml."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .config import CompatibilityConfig, ConfigError
from .constants import RESOURCE_SYSTEMJS


@dataclass(frozen=True)
class Preset:
    """Polyfill toggles plus the module kind a preset implies."""

    name: str
    polyfills: CompatibilityConfig
    module_kind: Optional[str] = None


def _none() -> Preset:
    return Preset(name="none", polyfills=CompatibilityConfig())


def _min() -> Preset:
    return Preset(
        name="min",
        polyfills=CompatibilityConfig(
            core_js=True,
            regenerator_runtime=True,
            fetch=True,
            webcomponents=True,
        ),
    )


def _max() -> Preset:
    # Everything is compiled down to es5 and loaded through systemjs, so the
    # regenerator runtime is needed on every browser.
    return Preset(
        name="max",
        polyfills=CompatibilityConfig(
            core_js=True,
            regenerator_runtime="always",
            fetch=True,
            webcomponents=True,
            systemjs_extended=True,
        ),
        module_kind=RESOURCE_SYSTEMJS,
    )


_PRESETS: Dict[str, Callable[[], Preset]] = {
    "none": _none,
    "min": _min,
    "max": _max,
}


def get_preset(name: str) -> Preset:
    """Return a fresh preset by name."""
    factory = _PRESETS.get(name.strip().lower())
    if factory is None:
        known = ", ".join(sorted(_PRESETS))
        raise ConfigError(f"Unknown preset '{name}' (expected one of {known})")
    return factory()


__all__ = ["Preset", "get_preset"]
