"""Polyfill selection and source resolution."""

from .resolver import ShimResolver
from .rules import SHIM_RULES, ShimRule, ShimSpec
from .sources import ShimNotFoundError, ShimSourceLoader, node_modules_dirs

__all__ = [
    "SHIM_RULES",
    "ShimNotFoundError",
    "ShimResolver",
    "ShimRule",
    "ShimSourceLoader",
    "ShimSpec",
    "node_modules_dirs",
]
