"""Tests for polyloader.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from polyloader.config import (
    CompatibilityConfig,
    ConfigError,
    InjectionConfig,
    LegacyConfig,
    PolyloaderConfig,
    load_config,
)
from polyloader.constants import NO_MODULE_SUPPORT_TEST
from polyloader.models import Resource


def _write_config(root: Path, text: str) -> Path:
    path = root / ".polyloader.yml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, PolyloaderConfig)
    assert config.root == tmp_path.resolve()
    assert config.injection.polyfills is None
    assert config.injection.legacy == []
    assert config.injection.module_kind is None
    assert config.injection.external_scripts is True
    assert config.injection.inline_modules is True
    assert config.node_modules == []
    assert config.injection.is_noop() is True


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = _write_config(
        tmp_path,
        """
node_modules:
  - vendor/node_modules
inject:
  inline_scripts: false
  module_kind: systemjs
  generated_file_dir: generated
  inline_script_name: "inline-{index}.js"
  extra_resources:
    - kind: systemjs
      path: /resolver.js
  legacy:
    - test: "!('noModule' in HTMLScriptElement.prototype)"
      module_kind: systemjs
      extra_resources:
        - {kind: script, path: legacy-setup.js}
polyfills:
  hash: true
  core_js: true
  fetch: yes
  regenerator_runtime: always
  custom:
    - name: my-polyfill
      path: polyfills/my-polyfill.js
      test: "'foo' in window"
      initializer: "window.setupFoo();"
""",
    )

    config = load_config(config_file)
    injection = config.injection

    assert config.node_modules == [tmp_path.resolve() / "vendor" / "node_modules"]
    assert injection.inline_scripts is False
    assert injection.external_scripts is True
    assert injection.module_kind == "systemjs"
    assert injection.generated_file_dir == "generated"
    assert injection.inline_script_name(3) == "inline-3.js"
    assert injection.extra_resources == [Resource(kind="systemjs", path="/resolver.js")]
    assert injection.legacy == [
        LegacyConfig(
            test=NO_MODULE_SUPPORT_TEST,
            module_kind="systemjs",
            extra_resources=[Resource(kind="script", path="legacy-setup.js")],
        )
    ]

    polyfills = injection.polyfills
    assert isinstance(polyfills, CompatibilityConfig)
    assert polyfills.hash is True
    assert polyfills.core_js is True
    assert polyfills.fetch is True
    assert polyfills.regenerator_runtime == "always"
    assert polyfills.webcomponents is False
    assert len(polyfills.custom) == 1
    custom = polyfills.custom[0]
    assert custom.name == "my-polyfill"
    assert custom.path == str(tmp_path.resolve() / "polyfills" / "my-polyfill.js")
    assert custom.test == "'foo' in window"
    assert custom.initializer == "window.setupFoo();"
    assert custom.module is False


def test_preset_provides_defaults_that_explicit_toggles_override(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
preset: max
polyfills:
  webcomponents: false
  intersection_observer: true
""",
    )

    config = load_config(tmp_path)
    polyfills = config.injection.polyfills

    assert config.preset == "max"
    assert config.injection.module_kind == "systemjs"
    assert polyfills is not None
    assert polyfills.core_js is True
    assert polyfills.regenerator_runtime == "always"
    assert polyfills.systemjs_extended is True
    assert polyfills.webcomponents is False
    assert polyfills.intersection_observer is True


def test_unknown_preset_is_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "preset: ultra\n")

    with pytest.raises(ConfigError, match="Unknown preset"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "text, message",
    [
        ("inject:\n  module_kind: amd\n", "unknown resource kind"),
        ("inject:\n  legacy:\n    - module_kind: systemjs\n", "requires a test"),
        ("inject:\n  inline_script_name: inline.js\n", "placeholder"),
        ("polyfills:\n  fetch: maybe\n", "polyfills.fetch"),
        ("polyfills: [fetch]\n", "mapping"),
        ("- just\n- a list\n", "mapping at the root"),
    ],
)
def test_invalid_config_raises_config_error(tmp_path: Path, text: str, message: str) -> None:
    _write_config(tmp_path, text)

    with pytest.raises(ConfigError, match=message):
        load_config(tmp_path)


def test_malformed_yaml_raises_config_error(tmp_path: Path) -> None:
    _write_config(tmp_path, "inject: [unterminated\n")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_injection_noop_detection() -> None:
    assert InjectionConfig().is_noop() is True
    assert InjectionConfig(module_kind="module").is_noop() is True
    assert InjectionConfig(polyfills=CompatibilityConfig(hash=True)).is_noop() is True

    assert InjectionConfig(module_kind="systemjs").is_noop() is False
    assert InjectionConfig(polyfills=CompatibilityConfig(fetch=True)).is_noop() is False
    assert (
        InjectionConfig(legacy=[LegacyConfig(test="true", module_kind="systemjs")]).is_noop()
        is False
    )


def test_systemjs_variant_alone_is_noop() -> None:
    polyfills = CompatibilityConfig(systemjs_extended=True, hash=True)

    assert polyfills.is_empty() is True
    assert InjectionConfig(polyfills=polyfills).is_noop() is True
    assert InjectionConfig(polyfills=polyfills, module_kind="systemjs").is_noop() is False
