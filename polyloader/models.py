"""Core data models shared across polyloader components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Tuple


@dataclass(frozen=True)
class Resource:
    """A script or module the generated loader must schedule."""

    kind: str
    path: str


@dataclass(frozen=True)
class LegacyResources:
    """Alternate resource set loaded instead of the default when ``test`` passes."""

    test: str
    resources: Tuple[Resource, ...]


@dataclass(frozen=True)
class ShimDescriptor:
    """A resolved polyfill ready to be written out and gated in the loader."""

    name: str
    code: str
    test: Optional[str] = None
    module: bool = False
    hash: Optional[str] = None
    initializer: Optional[str] = None


@dataclass(frozen=True)
class GeneratedFile:
    """Output artifact; callers persist ``content`` at ``path``."""

    path: str
    kind: str
    content: str


@dataclass(frozen=True)
class ResourceKinds:
    """Resource kinds present in the default set and across legacy sets."""

    default: FrozenSet[str] = field(default_factory=frozenset)
    legacy: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def collect(
        cls,
        resources: Iterable[Resource],
        legacy_resources: Iterable[LegacyResources] = (),
    ) -> "ResourceKinds":
        return cls(
            default=frozenset(resource.kind for resource in resources),
            legacy=frozenset(
                resource.kind for group in legacy_resources for resource in group.resources
            ),
        )

    def uses(self, kind: str) -> bool:
        return kind in self.default or kind in self.legacy

    def default_uses(self, kind: str) -> bool:
        return kind in self.default
