"""Configuration loading for polyloader (.polyloader.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

import yaml

from .constants import DEFAULT_INLINE_SCRIPT_NAME, RESOURCE_KINDS, RESOURCE_MODULE
from .models import Resource

CONFIG_FILENAME = ".polyloader.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration is invalid or cannot be satisfied."""


class InvalidDocumentError(ConfigError):
    """Raised when a document lacks the regions the loader is injected into."""


@dataclass
class CustomShimConfig:
    """A user supplied polyfill loaded before the built-in ones."""

    name: Optional[str]
    path: Optional[str]
    test: Optional[str] = None
    module: bool = False
    minify: bool = False
    initializer: Optional[str] = None


@dataclass
class CompatibilityConfig:
    """Which polyfills the generated loader should provide."""

    core_js: bool = False
    regenerator_runtime: Union[bool, str] = False
    fetch: bool = False
    webcomponents: bool = False
    intersection_observer: bool = False
    dynamic_import: bool = False
    es_module_shims: bool = False
    systemjs_extended: bool = False
    hash: bool = False
    custom: List[CustomShimConfig] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Return True when no polyfill is requested.

        ``hash`` and ``systemjs_extended`` only shape polyfills requested by
        other settings, so neither counts on its own.
        """
        toggles = (
            self.core_js,
            self.regenerator_runtime,
            self.fetch,
            self.webcomponents,
            self.intersection_observer,
            self.dynamic_import,
            self.es_module_shims,
        )
        return not any(toggles) and not self.custom


@dataclass
class LegacyConfig:
    """A legacy branch: resources remapped to ``module_kind`` when ``test`` passes."""

    test: str
    module_kind: str
    extra_resources: List[Resource] = field(default_factory=list)


def default_inline_script_name(index: int) -> str:
    return DEFAULT_INLINE_SCRIPT_NAME.format(index=index)


@dataclass
class InjectionConfig:
    """Settings for scanning a document and injecting the loader into it."""

    external_scripts: bool = True
    inline_scripts: bool = True
    external_modules: bool = True
    inline_modules: bool = True
    module_kind: Optional[str] = None
    extra_resources: List[Resource] = field(default_factory=list)
    legacy: List[LegacyConfig] = field(default_factory=list)
    generated_file_dir: str = ""
    inline_script_name: Callable[[int], str] = default_inline_script_name
    polyfills: Optional[CompatibilityConfig] = None

    def overrides_module_kind(self) -> bool:
        return bool(self.module_kind) and self.module_kind != RESOURCE_MODULE

    def is_noop(self) -> bool:
        """Return True when injecting would leave the document untouched."""
        no_polyfills = self.polyfills is None or self.polyfills.is_empty()
        return not self.legacy and no_polyfills and not self.overrides_module_kind()


@dataclass
class PolyloaderConfig:
    """Represents the settings defined in .polyloader.yml."""

    root: Path
    injection: InjectionConfig = field(default_factory=InjectionConfig)
    node_modules: List[Path] = field(default_factory=list)
    preset: Optional[str] = None


def load_config(config_path: Path) -> PolyloaderConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return PolyloaderConfig(root=root)

    data = _read_config(config_file)
    return parse_config(data, root=root)


def parse_config(data: Mapping[str, Any], *, root: Path) -> PolyloaderConfig:
    """Build a :class:`PolyloaderConfig` from an already parsed mapping."""
    if not isinstance(data, Mapping):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    # Imported lazily: presets build on the config dataclasses.
    from .presets import get_preset

    preset_name = _as_str(data.get("preset"))
    preset = get_preset(preset_name) if preset_name else None

    inject_data = _as_dict(data.get("inject"))
    injection = InjectionConfig(
        external_scripts=_flag(inject_data, "external_scripts"),
        inline_scripts=_flag(inject_data, "inline_scripts"),
        external_modules=_flag(inject_data, "external_modules"),
        inline_modules=_flag(inject_data, "inline_modules"),
        generated_file_dir=_as_str(inject_data.get("generated_file_dir")) or "",
    )

    module_kind = _as_str(inject_data.get("module_kind"))
    if module_kind is None and preset is not None:
        module_kind = preset.module_kind
    if module_kind is not None:
        injection.module_kind = _validate_kind(module_kind, "inject.module_kind")

    template = _as_str(inject_data.get("inline_script_name"))
    if template:
        injection.inline_script_name = _template_namer(template)

    injection.extra_resources = _parse_resources(
        inject_data.get("extra_resources"), "inject.extra_resources"
    )
    injection.legacy = _parse_legacy(inject_data.get("legacy"))

    polyfills_data = data.get("polyfills")
    if polyfills_data is not None and not isinstance(polyfills_data, Mapping):
        raise ConfigError("polyfills must be a mapping of polyfill toggles")
    base = preset.polyfills if preset is not None else None
    if polyfills_data or base is not None:
        injection.polyfills = _parse_polyfills(_as_dict(polyfills_data), base, root)

    node_modules = [root / entry for entry in _as_str_list(data.get("node_modules"))]

    return PolyloaderConfig(
        root=root,
        injection=injection,
        node_modules=node_modules,
        preset=preset_name,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _parse_polyfills(
    data: Mapping[str, Any],
    base: Optional[CompatibilityConfig],
    root: Path,
) -> CompatibilityConfig:
    config = CompatibilityConfig(**_toggle_values(base)) if base is not None else CompatibilityConfig()
    for toggle in (
        "core_js",
        "fetch",
        "webcomponents",
        "intersection_observer",
        "dynamic_import",
        "es_module_shims",
        "systemjs_extended",
        "hash",
    ):
        if toggle in data:
            value = _as_bool(data.get(toggle))
            if value is None:
                raise ConfigError(f"polyfills.{toggle} must be a boolean")
            setattr(config, toggle, value)

    if "regenerator_runtime" in data:
        raw = data.get("regenerator_runtime")
        if isinstance(raw, str) and raw.strip().lower() == "always":
            config.regenerator_runtime = "always"
        else:
            value = _as_bool(raw)
            if value is None:
                raise ConfigError("polyfills.regenerator_runtime must be a boolean or 'always'")
            config.regenerator_runtime = value

    custom = data.get("custom")
    if custom is not None:
        if not isinstance(custom, list):
            raise ConfigError("polyfills.custom must be a list")
        config.custom = [_parse_custom_shim(entry, root) for entry in custom]
    return config


def _toggle_values(config: CompatibilityConfig) -> Dict[str, Any]:
    values = {item.name: getattr(config, item.name) for item in fields(config)}
    values["custom"] = list(config.custom)
    return values


def _parse_custom_shim(entry: Any, root: Path) -> CustomShimConfig:
    if not isinstance(entry, Mapping):
        raise ConfigError("Each custom polyfill must be a mapping with a name and a path")
    path = _as_str(entry.get("path"))
    if path is not None:
        path = str(root / path)
    return CustomShimConfig(
        name=_as_str(entry.get("name")),
        path=path,
        test=_as_str(entry.get("test")),
        module=_as_bool(entry.get("module")) or False,
        minify=_as_bool(entry.get("minify")) or False,
        initializer=_as_str(entry.get("initializer")),
    )


def _parse_legacy(value: Any) -> List[LegacyConfig]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError("inject.legacy must be a list")
    branches: List[LegacyConfig] = []
    for index, entry in enumerate(value):
        label = f"inject.legacy[{index}]"
        if not isinstance(entry, Mapping):
            raise ConfigError(f"{label} must be a mapping")
        test = _as_str(entry.get("test"))
        if not test:
            raise ConfigError(f"{label} requires a test expression")
        module_kind = _as_str(entry.get("module_kind"))
        if not module_kind:
            raise ConfigError(f"{label} requires a module_kind")
        branches.append(
            LegacyConfig(
                test=test,
                module_kind=_validate_kind(module_kind, f"{label}.module_kind"),
                extra_resources=_parse_resources(
                    entry.get("extra_resources"), f"{label}.extra_resources"
                ),
            )
        )
    return branches


def _parse_resources(value: Any, label: str) -> List[Resource]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{label} must be a list")
    resources: List[Resource] = []
    for entry in value:
        if not isinstance(entry, Mapping):
            raise ConfigError(f"{label} entries must be mappings with kind and path")
        kind = _as_str(entry.get("kind"))
        path = _as_str(entry.get("path"))
        if not kind or not path:
            raise ConfigError(f"{label} entries require both kind and path")
        resources.append(Resource(kind=_validate_kind(kind, label), path=path))
    return resources


def _validate_kind(kind: str, label: str) -> str:
    if kind not in RESOURCE_KINDS:
        allowed = ", ".join(RESOURCE_KINDS)
        raise ConfigError(f"{label}: unknown resource kind '{kind}' (expected one of {allowed})")
    return kind


def _template_namer(template: str) -> Callable[[int], str]:
    if "{index}" not in template:
        raise ConfigError("inject.inline_script_name must contain an {index} placeholder")

    def _name(index: int) -> str:
        return template.replace("{index}", str(index))

    return _name


def _flag(data: Mapping[str, Any], key: str) -> bool:
    if key not in data:
        return True
    value = _as_bool(data.get(key))
    if value is None:
        raise ConfigError(f"inject.{key} must be a boolean")
    return value


def _as_dict(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "CompatibilityConfig",
    "ConfigError",
    "CustomShimConfig",
    "InjectionConfig",
    "InvalidDocumentError",
    "LegacyConfig",
    "PolyloaderConfig",
    "default_inline_script_name",
    "load_config",
    "parse_config",
]
