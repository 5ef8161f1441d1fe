from __future__ import annotations

import pytest

from polyloader.constants import NO_MODULE_SUPPORT_TEST
from polyloader.loader import fragments
from polyloader.models import LegacyResources, Resource, ShimDescriptor


def test_js_string_escapes_quotes_and_closing_tags() -> None:
    assert fragments.js_string("it's") == "'it\\'s'"
    assert fragments.js_string("a\\b") == "'a\\\\b'"
    assert fragments.js_string("</script>") == "'<\\/script>'"
    assert fragments.js_string("line\nbreak") == "'line\\nbreak'"


def test_indent_leaves_blank_lines_empty() -> None:
    assert fragments.indent(["a", "", "b"], 2) == ["    a", "", "    b"]


@pytest.mark.parametrize(
    ("resource", "expected"),
    [
        (Resource("script", "app.js"), "loadScript('./app.js')"),
        (Resource("module", "/app.js"), "loadScript('/app.js', 'module')"),
        (Resource("module-shim", "../app.js"), "loadScript('../app.js', 'module-shim')"),
        (
            Resource("systemjs", "./app.js"),
            "System.import('./app.js').then(null, function (e) { "
            "console.error('[polyloader] failed to import: ' + './app.js', e); })",
        ),
    ],
)
def test_load_resource_per_kind(resource: Resource, expected: str) -> None:
    assert fragments.load_resource(resource) == expected


def test_load_resource_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError, match="Unknown resource type: wasm"):
        fragments.load_resource(Resource("wasm", "app.wasm"))


def test_load_resources_single_and_empty() -> None:
    assert fragments.load_resources([]) == []
    assert fragments.load_resources([Resource("script", "a.js")]) == ["loadScript('./a.js');"]


def test_load_resources_chains_in_order() -> None:
    lines = fragments.load_resources(
        [Resource("script", "a.js"), Resource("module", "b.js"), Resource("script", "c.js")]
    )

    assert lines == [
        "[",
        "  function () { return loadScript('./a.js'); },",
        "  function () { return loadScript('./b.js', 'module'); },",
        "  function () { return loadScript('./c.js'); }",
        "].reduce(function (a, c) {",
        "  return a.then(c);",
        "}, resolved());",
    ]


def test_branch_chain_falls_back_to_default() -> None:
    legacy = [
        LegacyResources(test=NO_MODULE_SUPPORT_TEST, resources=(Resource("systemjs", "app.js"),)),
        LegacyResources(test="'foo' in window", resources=(Resource("module-shim", "app.js"),)),
    ]

    lines = fragments.branch_chain(legacy, ["loadScript('./app.js', 'module');"])

    assert lines == [
        f"if ({NO_MODULE_SUPPORT_TEST}) {{",
        "  System.import('./app.js').then(null, function (e) { "
        "console.error('[polyloader] failed to import: ' + './app.js', e); });",
        "} else if ('foo' in window) {",
        "  loadScript('./app.js', 'module-shim');",
        "} else {",
        "  loadScript('./app.js', 'module');",
        "}",
    ]


def test_branch_chain_without_legacy_is_default() -> None:
    assert fragments.branch_chain([], ["x();"]) == ["x();"]


def test_shim_gate_variants() -> None:
    gated = ShimDescriptor(name="fetch", code="", test="!('fetch' in window)")
    always = ShimDescriptor(name="systemjs", code="")
    module = ShimDescriptor(
        name="shim",
        code="",
        test="'a' in window",
        module=True,
        initializer="window.init();",
    )

    assert fragments.shim_gate(gated, "polyfills/fetch.js") == (
        "if (!('fetch' in window)) { polyfills.push(loadScript('./polyfills/fetch.js')); }"
    )
    assert fragments.shim_gate(always, "polyfills/systemjs.js") == (
        "polyfills.push(loadScript('./polyfills/systemjs.js'));"
    )
    assert fragments.shim_gate(module, "polyfills/shim.mjs") == (
        "if ('a' in window) { polyfills.push(loadScript('./polyfills/shim.mjs', 'module')"
        ".then(function () { window.init(); })); }"
    )


def test_helpers_avoid_native_promise() -> None:
    code = "\n".join(
        fragments.deferred_helper() + fragments.load_script_helper() + fragments.wait_helper()
    )

    assert "Promise" not in code
    assert "[polyloader] failed to load: " in code
