"""Feature-detecting polyfills loader generation for HTML documents."""

from .config import (
    CompatibilityConfig,
    ConfigError,
    CustomShimConfig,
    InjectionConfig,
    InvalidDocumentError,
    LegacyConfig,
    load_config,
)
from .constants import (
    NO_MODULE_SUPPORT_TEST,
    RESOURCE_MODULE,
    RESOURCE_MODULE_SHIM,
    RESOURCE_SCRIPT,
    RESOURCE_SYSTEMJS,
)
from .injector import InjectResult, PolyfillsInjector, inject_polyfills_loader
from .loader import LoaderGenerator, PolyfillsLoader, create_polyfills_loader
from .models import GeneratedFile, LegacyResources, Resource, ResourceKinds, ShimDescriptor
from .scanner import DocumentScanner, ScanResult
from .shims import ShimResolver, ShimSourceLoader

__all__ = [
    "CompatibilityConfig",
    "ConfigError",
    "CustomShimConfig",
    "DocumentScanner",
    "GeneratedFile",
    "InjectResult",
    "InjectionConfig",
    "InvalidDocumentError",
    "LegacyConfig",
    "LegacyResources",
    "LoaderGenerator",
    "NO_MODULE_SUPPORT_TEST",
    "PolyfillsInjector",
    "PolyfillsLoader",
    "RESOURCE_MODULE",
    "RESOURCE_MODULE_SHIM",
    "RESOURCE_SCRIPT",
    "RESOURCE_SYSTEMJS",
    "Resource",
    "ResourceKinds",
    "ScanResult",
    "ShimDescriptor",
    "ShimResolver",
    "ShimSourceLoader",
    "create_polyfills_loader",
    "inject_polyfills_loader",
    "load_config",
]
