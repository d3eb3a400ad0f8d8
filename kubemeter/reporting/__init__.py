"""Reporting dependency resolution.

Resolves every transitive dependency of a ReportingDefinition, checks each
for readiness, and produces either a ResolvedDependencies bundle or an error.

Submodules:
    getters     -- Per-kind lookup capabilities (store, live client, mapping).
    resolver    -- Depth-bounded traversal, flat fetches, readiness partition.
    validation  -- Violation collection and the resolve_dependencies entry point.
    service     -- DependencyResolver bound to getters and resolver settings.
    errors      -- NotFound / CycleExceeded / DependencyValidation errors.
"""

from kubemeter.reporting.errors import (
    CycleExceededError,
    DependencyValidationError,
    KubeAPIError,
    NotFoundError,
    ResolutionError,
)
from kubemeter.reporting.getters import Getters, GetterFunc, client_getters, mapping_getter, store_getters
from kubemeter.reporting.resolver import (
    MAX_DEPTH,
    dependencies_status,
    dependent_data_sources,
    dependent_queries,
    dependent_reports,
    dependent_scheduled_reports,
    traverse,
)
from kubemeter.reporting.service import DependencyResolver
from kubemeter.reporting.validation import collect_violations, resolve_dependencies, validate_dependencies

__all__ = [
    "MAX_DEPTH",
    "CycleExceededError",
    "DependencyResolver",
    "DependencyValidationError",
    "GetterFunc",
    "Getters",
    "KubeAPIError",
    "NotFoundError",
    "ResolutionError",
    "client_getters",
    "collect_violations",
    "dependencies_status",
    "dependent_data_sources",
    "dependent_queries",
    "dependent_reports",
    "dependent_scheduled_reports",
    "mapping_getter",
    "resolve_dependencies",
    "store_getters",
    "traverse",
    "validate_dependencies",
]
