"""Dependency validation and the resolution entry point.

A ReportingDefinition can only be built once every ordinary query, data
source, report and scheduled report it depends on is backed by storage.
Validation collects every violation at once so an operator can fix all
blocking dependencies in a single pass.
"""

from __future__ import annotations

from kubemeter.models.dependencies import (
    DependenciesStatus,
    ResolvedDependencies,
    Violation,
    ViolationCategory,
)
from kubemeter.models.resources import ReportingDefinition
from kubemeter.observability.logging import get_logger
from kubemeter.reporting.errors import DependencyValidationError
from kubemeter.reporting.getters import Getters
from kubemeter.reporting.resolver import MAX_DEPTH, dependencies_status

_logger = get_logger("reporting.validation")


def collect_violations(status: DependenciesStatus) -> list[Violation]:
    """Group every not-ready dependency by category, in reporting order.

    A disabled-view query is reported only as disabled, never also as
    uninitialized.
    """
    view_disabled: list[str] = []
    uninitialized_queries: list[str] = []
    for query in status.uninitialized_queries:
        if query.view_disabled:
            view_disabled.append(query.name)
        else:
            uninitialized_queries.append(query.name)

    by_category = {
        ViolationCategory.VIEW_DISABLED: view_disabled,
        ViolationCategory.UNINITIALIZED_DATA_SOURCE: [d.name for d in status.uninitialized_data_sources],
        ViolationCategory.UNINITIALIZED_QUERY: uninitialized_queries,
        ViolationCategory.UNINITIALIZED_REPORT: [r.name for r in status.uninitialized_reports],
        ViolationCategory.UNINITIALIZED_SCHEDULED_REPORT: [s.name for s in status.uninitialized_scheduled_reports],
    }
    return [Violation(category=category, names=tuple(names)) for category, names in by_category.items() if names]


def validate_dependencies(status: DependenciesStatus) -> ResolvedDependencies:
    """Turn a partitioned status into the resolved bundle.

    Raises:
        DependencyValidationError: at least one required dependency is not ready.
    """
    violations = collect_violations(status)
    if violations:
        raise DependencyValidationError(violations)

    return ResolvedDependencies(
        queries=status.initialized_queries,
        dynamic_queries=status.dynamic_queries,
        data_sources=status.initialized_data_sources,
        reports=status.initialized_reports,
        scheduled_reports=status.initialized_scheduled_reports,
    )


def resolve_dependencies(
    getters: Getters,
    root: ReportingDefinition,
    max_depth: int = MAX_DEPTH,
    strict_cycles: bool = False,
) -> ResolvedDependencies:
    """Resolve and validate every dependency of *root*.

    Either the full bundle is returned or an error is raised; there is no
    partial result.
    """
    status = dependencies_status(getters, root, max_depth=max_depth, strict_cycles=strict_cycles)
    try:
        resolved = validate_dependencies(status)
    except DependencyValidationError as exc:
        _logger.warning(
            "dependencies_invalid",
            query=root.name,
            namespace=root.namespace,
            violations=exc.to_dict(),
        )
        raise

    _logger.info(
        "dependencies_resolved",
        query=root.name,
        namespace=root.namespace,
        queries=len(resolved.queries),
        dynamic_queries=len(resolved.dynamic_queries),
        data_sources=len(resolved.data_sources),
        reports=len(resolved.reports),
        scheduled_reports=len(resolved.scheduled_reports),
    )
    return resolved
