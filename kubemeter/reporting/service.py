"""DependencyResolver: resolves a ReportingDefinition by namespace and name."""

from __future__ import annotations

from kubemeter.models.config import ResolverConfig
from kubemeter.models.dependencies import ResolvedDependencies
from kubemeter.observability.logging import resolution_context
from kubemeter.reporting.getters import Getters
from kubemeter.reporting.validation import resolve_dependencies


class DependencyResolver:
    """Binds a set of getters and resolver settings for repeated use.

    Holds no per-call state, so one instance may serve concurrent callers
    as long as its getters are safe for concurrent reads.
    """

    def __init__(self, getters: Getters, config: ResolverConfig | None = None) -> None:
        self.getters = getters
        self.config = config or ResolverConfig()

    def resolve(self, namespace: str, name: str) -> ResolvedDependencies:
        with resolution_context(namespace, name):
            root = self.getters.queries.get(namespace, name)
            return resolve_dependencies(
                self.getters,
                root,
                max_depth=self.config.max_depth,
                strict_cycles=self.config.strict_cycles,
            )
