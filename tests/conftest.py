from __future__ import annotations

from pathlib import Path

import pytest

from polyloader.shims import ShimResolver, ShimSourceLoader
from tests._fixtures.node_modules import build_node_modules


@pytest.fixture
def node_modules(tmp_path: Path) -> Path:
    """Provide a node_modules directory holding every built-in polyfill."""
    return build_node_modules(tmp_path)


@pytest.fixture
def resolver(node_modules: Path) -> ShimResolver:
    """Resolver reading polyfill sources from the temporary node_modules."""
    return ShimResolver(ShimSourceLoader([node_modules]))
