"""Resolve a compatibility config into concrete, loadable polyfills."""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Set

from ..config import CompatibilityConfig, ConfigError
from ..logging import get_logger
from ..models import ResourceKinds, ShimDescriptor
from ..utils import content_hash, minify_js
from .rules import SHIM_RULES, ShimRule, ShimSpec
from .sources import ShimNotFoundError, ShimSourceLoader


class ShimResolver:
    """Evaluates the shim rule table and loads each polyfill's source."""

    def __init__(
        self,
        sources: ShimSourceLoader | None = None,
        *,
        minify: Callable[[str], str] = minify_js,
        digest: Callable[[str], str] = content_hash,
        rules: Sequence[ShimRule] = SHIM_RULES,
    ) -> None:
        self.sources = sources or ShimSourceLoader()
        self._minify = minify
        self._digest = digest
        self._rules = tuple(rules)
        self.logger = get_logger("shims")

    def collect(
        self, config: Optional[CompatibilityConfig], kinds: ResourceKinds
    ) -> List[ShimSpec]:
        """Return the unresolved specs the config asks for, in load order."""
        config = config or CompatibilityConfig()
        specs: List[ShimSpec] = []
        seen: Set[str] = set()
        for rule in self._rules:
            if not rule.applies(config, kinds):
                continue
            for spec in rule.build(config, kinds):
                if spec.name in seen:
                    raise ConfigError(f"Polyfill '{spec.name}' is configured more than once")
                seen.add(spec.name)
                specs.append(spec)
        return specs

    def resolve(
        self, config: Optional[CompatibilityConfig], kinds: ResourceKinds
    ) -> List[ShimDescriptor]:
        """Return descriptors for every applicable polyfill, in load order."""
        hashing = bool(config and config.hash)
        descriptors = [self._load(spec, hashing) for spec in self.collect(config, kinds)]
        self.logger.debug(
            "Resolved %d polyfills: %s",
            len(descriptors),
            ", ".join(descriptor.name for descriptor in descriptors) or "(none)",
        )
        return descriptors

    def _load(self, spec: ShimSpec, hashing: bool) -> ShimDescriptor:
        try:
            if spec.from_package:
                code = self.sources.load_package_file(spec.source)
            else:
                code = self.sources.load_file(spec.source)
        except ShimNotFoundError as exc:
            if spec.from_package:
                raise ConfigError(
                    f"configured to polyfill {spec.name}, but no polyfills found. "
                    f'Install with "npm i -D {spec.package}"'
                ) from exc
            raise ConfigError(str(exc)) from exc

        if spec.minify:
            code = self._minify(code)

        return ShimDescriptor(
            name=spec.name,
            code=code,
            test=spec.test,
            module=spec.module,
            hash=self._digest(code) if hashing else None,
            initializer=spec.initializer,
        )


__all__ = ["ShimResolver"]
