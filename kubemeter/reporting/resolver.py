"""Dependency discovery for ReportingDefinitions.

ReportingDefinitions reference each other through two channels (ordinary
``report_queries`` and ``dynamic_report_queries``); both are walked
depth-first with a shared accumulator, and a node is recorded only after its
own dependencies have been resolved.  Cycles are caught by a depth bound,
not a visited-path check: a loop of period k fails once the walk has
descended ``max_depth`` levels, and an acyclic chain deeper than the bound
fails the same way.  The walk keeps an explicit stack, so any bound the
configuration allows is reached without touching the interpreter
recursion limit.

DataFeeds, Reports and ScheduledReports are leaves and are fetched flat,
exactly as listed.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TypeVar

from kubemeter.models.config import DEFAULT_MAX_DEPTH
from kubemeter.models.dependencies import DependenciesStatus, DependentQueries
from kubemeter.models.resources import DataFeed, ReportingDefinition, ScheduledReport, SingleReport
from kubemeter.observability.logging import get_logger
from kubemeter.reporting.errors import CycleExceededError
from kubemeter.reporting.getters import (
    DataFeedGetter,
    Getter,
    Getters,
    ReportingDefinitionGetter,
    ScheduledReportGetter,
    SingleReportGetter,
)

_logger = get_logger("reporting.resolver")

MAX_DEPTH = DEFAULT_MAX_DEPTH

T = TypeVar("T")


def _references(query: ReportingDefinition, want_dynamic: bool) -> Iterator[str]:
    return iter(query.dynamic_report_queries if want_dynamic else query.report_queries)


def _collect_queries(
    getter: ReportingDefinitionGetter,
    root: ReportingDefinition,
    max_depth: int,
    accumulator: dict[str, ReportingDefinition],
    want_dynamic: bool,
    path: set[str] | None,
) -> None:
    # Each frame is (node, its depth, its unvisited references). A node is
    # recorded when its frame is popped, after every child frame is gone.
    if max_depth <= 0:
        raise CycleExceededError(0, root.name)
    stack = [(root, 0, _references(root, want_dynamic))]
    while stack:
        query, depth, pending = stack[-1]
        for name in pending:
            if name in accumulator:
                continue
            if path is not None and name in path:
                raise CycleExceededError(depth + 1, name)
            dependency = getter.get(query.namespace, name)
            if depth + 1 >= max_depth:
                raise CycleExceededError(depth + 1, dependency.name)
            if path is not None:
                path.add(dependency.name)
            stack.append((dependency, depth + 1, _references(dependency, want_dynamic)))
            break
        else:
            stack.pop()
            if stack:
                if path is not None:
                    path.discard(query.name)
                accumulator[query.name] = query


def traverse(
    getter: ReportingDefinitionGetter,
    root: ReportingDefinition,
    want_dynamic: bool,
    max_depth: int = MAX_DEPTH,
    strict_cycles: bool = False,
) -> list[ReportingDefinition]:
    """Return every ReportingDefinition reachable from *root* through one channel.

    Args:
        getter:        ReportingDefinition lookup.
        root:          Definition whose dependencies are resolved; not included
                       in the result unless it references itself.
        want_dynamic:  Follow ``dynamic_report_queries`` instead of
                       ``report_queries``.
        max_depth:     Depth at which traversal gives up with CycleExceededError.
        strict_cycles: Also fail as soon as a name on the current path is
                       re-entered, instead of waiting for the depth bound.

    Raises:
        CycleExceededError: the depth bound (or, in strict mode, a re-entry) was hit.
        Exception:          any getter failure, unchanged; remaining siblings
                            are not fetched.
    """
    accumulator: dict[str, ReportingDefinition] = {}
    path = {root.name} if strict_cycles else None
    _collect_queries(getter, root, max_depth, accumulator, want_dynamic, path)
    _logger.debug(
        "queries_traversed",
        root=root.name,
        namespace=root.namespace,
        dynamic=want_dynamic,
        count=len(accumulator),
    )
    return list(accumulator.values())


def dependent_queries(
    getter: ReportingDefinitionGetter,
    root: ReportingDefinition,
    max_depth: int = MAX_DEPTH,
    strict_cycles: bool = False,
) -> DependentQueries:
    """Walk both reference channels with independent accumulators."""
    view = traverse(getter, root, False, max_depth=max_depth, strict_cycles=strict_cycles)
    dynamic = traverse(getter, root, True, max_depth=max_depth, strict_cycles=strict_cycles)
    return DependentQueries(view=view, dynamic=dynamic)


def _fetch_all(getter: Getter[T], namespace: str, names: list[str]) -> list[T]:
    return [getter.get(namespace, name) for name in names]


def dependent_data_sources(getter: DataFeedGetter, root: ReportingDefinition) -> list[DataFeed]:
    return _fetch_all(getter, root.namespace, root.data_sources)


def dependent_reports(getter: SingleReportGetter, root: ReportingDefinition) -> list[SingleReport]:
    return _fetch_all(getter, root.namespace, root.reports)


def dependent_scheduled_reports(getter: ScheduledReportGetter, root: ReportingDefinition) -> list[ScheduledReport]:
    return _fetch_all(getter, root.namespace, root.scheduled_reports)


def dependencies_status(
    getters: Getters,
    root: ReportingDefinition,
    max_depth: int = MAX_DEPTH,
    strict_cycles: bool = False,
) -> DependenciesStatus:
    """Fetch every dependency of *root* and split each kind by readiness.

    Encounter order is preserved within each list.  Dynamic queries are
    carried through without inspection.
    """
    queries = dependent_queries(getters.queries, root, max_depth=max_depth, strict_cycles=strict_cycles)
    data_sources = dependent_data_sources(getters.data_sources, root)
    reports = dependent_reports(getters.reports, root)
    scheduled_reports = dependent_scheduled_reports(getters.scheduled_reports, root)

    status = DependenciesStatus(dynamic_queries=queries.dynamic)
    for query in queries.view:
        (status.initialized_queries if query.is_ready else status.uninitialized_queries).append(query)
    for data_source in data_sources:
        (status.initialized_data_sources if data_source.is_ready else status.uninitialized_data_sources).append(
            data_source
        )
    for report in reports:
        (status.initialized_reports if report.is_ready else status.uninitialized_reports).append(report)
    for scheduled in scheduled_reports:
        (
            status.initialized_scheduled_reports if scheduled.is_ready else status.uninitialized_scheduled_reports
        ).append(scheduled)
    return status
