from __future__ import annotations

import pytest

from polyloader.config import ConfigError
from polyloader.presets import get_preset
from polyloader.utils import clean_import_path, content_hash, is_remote_uri, minify_js


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("app.js", "./app.js"),
        ("./app.js", "./app.js"),
        ("../app.js", "../app.js"),
        ("/app.js", "/app.js"),
        ("assets/app.js", "./assets/app.js"),
    ],
)
def test_clean_import_path(path: str, expected: str) -> None:
    assert clean_import_path(path) == expected


@pytest.mark.parametrize(
    ("src", "expected"),
    [
        ("https://cdn.example.com/a.js", True),
        ("//cdn.example.com/a.js", True),
        ("data:text/javascript,alert(1)", True),
        ("./a.js", False),
        ("/a.js", False),
        ("a.js", False),
        (None, False),
    ],
)
def test_is_remote_uri(src, expected: bool) -> None:
    assert is_remote_uri(src) is expected


def test_content_hash_is_short_and_stable() -> None:
    assert content_hash("a") == content_hash("a")
    assert content_hash("a") != content_hash("b")
    assert len(content_hash("a")) == 16


def test_minify_js_keeps_license_comments() -> None:
    code = "/*! license */\nfunction a ( b ) {\n  return b ;\n}\n"

    minified = minify_js(code)

    assert minified.startswith("/*! license */")
    assert "function a(b){return b;}" in minified


def test_presets() -> None:
    assert get_preset("none").polyfills.is_empty()
    assert get_preset("min").module_kind is None
    maximal = get_preset("MAX")
    assert maximal.module_kind == "systemjs"
    assert maximal.polyfills.regenerator_runtime == "always"

    with pytest.raises(ConfigError, match="Unknown preset"):
        get_preset("huge")
