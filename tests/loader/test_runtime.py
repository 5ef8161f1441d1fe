"""Run generated loaders under Node with a stubbed DOM and record what they do."""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Sequence

import pytest

from polyloader.loader import LoaderGenerator
from polyloader.models import Resource, ShimDescriptor

NODE = shutil.which("node")

pytestmark = pytest.mark.skipif(NODE is None, reason="node is not installed")

DOM_STUB = """
var events = global.events = [];
var failing = %(failing)s;
var delays = %(delays)s;
global.window = global;
console.error = function (message) { events.push('error ' + message); };
global.System = {
  import: function (path) {
    events.push('import ' + path);
    return Promise.reject(new Error('cannot import ' + path));
  }
};
global.document = {
  createElement: function () { return { parentNode: null }; },
  head: {
    appendChild: function (script) {
      script.parentNode = global.document.head;
      events.push('start ' + script.src);
      setTimeout(function () {
        events.push('settle ' + script.src);
        if (failing.indexOf(script.src) !== -1) {
          script.onerror();
        } else {
          script.onload();
        }
      }, delays[script.src] || 0);
    },
    removeChild: function (script) { script.parentNode = null; }
  }
};
"""

REPORT = """
setTimeout(function () { process.stdout.write(JSON.stringify(events)); }, 200);
"""


def _run(
    code: str,
    tmp_path: Path,
    *,
    failing: Sequence[str] = (),
    delays: Dict[str, int] | None = None,
) -> List[str]:
    stub = DOM_STUB % {"failing": json.dumps(list(failing)), "delays": json.dumps(delays or {})}
    script = tmp_path / "loader.js"
    script.write_text(stub + code + REPORT, encoding="utf-8")
    completed = subprocess.run(
        [NODE, str(script)],
        capture_output=True,
        text=True,
        check=True,
        timeout=30,
    )
    return json.loads(completed.stdout)


def test_resources_wait_for_every_polyfill(tmp_path: Path) -> None:
    shims = [
        ShimDescriptor(name="slow", code="", test="true"),
        ShimDescriptor(name="fast", code="", initializer="events.push('init fast');"),
        ShimDescriptor(name="skipped", code="", test="false"),
    ]
    loader = LoaderGenerator().generate(
        [Resource("script", "a.js"), Resource("module", "b.js")], shims=shims
    )

    events = _run(
        loader.code,
        tmp_path,
        failing=["./polyfills/slow.js"],
        delays={"./polyfills/slow.js": 30, "./polyfills/fast.js": 5},
    )

    assert events == [
        "start ./polyfills/slow.js",
        "start ./polyfills/fast.js",
        "settle ./polyfills/fast.js",
        "init fast",
        "settle ./polyfills/slow.js",
        "error [polyloader] failed to load: ./polyfills/slow.js check the network tab for HTTP status.",
        "start ./a.js",
        "settle ./a.js",
        "start ./b.js",
        "settle ./b.js",
    ]


def test_failed_resources_do_not_stop_the_sequence(tmp_path: Path) -> None:
    loader = LoaderGenerator().generate(
        [Resource("script", "a.js"), Resource("script", "b.js"), Resource("script", "c.js")]
    )

    events = _run(loader.code, tmp_path, failing=["./b.js"])

    assert events == [
        "start ./a.js",
        "settle ./a.js",
        "start ./b.js",
        "settle ./b.js",
        "error [polyloader] failed to load: ./b.js check the network tab for HTTP status.",
        "start ./c.js",
        "settle ./c.js",
    ]


def test_rejected_system_imports_are_logged_and_settled(tmp_path: Path) -> None:
    loader = LoaderGenerator().generate(
        [Resource("systemjs", "a.js"), Resource("systemjs", "b.js")]
    )

    events = _run(loader.code, tmp_path)

    assert events == [
        "import ./a.js",
        "error [polyloader] failed to import: ./a.js",
        "import ./b.js",
        "error [polyloader] failed to import: ./b.js",
    ]


def test_loader_without_polyfills_runs_immediately(tmp_path: Path) -> None:
    loader = LoaderGenerator().generate(
        [Resource("module", "app.js")],
        shims=[ShimDescriptor(name="never", code="", test="false")],
    )

    events = _run(loader.code, tmp_path)

    assert events == ["start ./app.js", "settle ./app.js"]
