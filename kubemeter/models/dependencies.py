"""Dependency resolution result structures.

DependenciesStatus is the partitioned (initialized / uninitialized) view
produced by the readiness partitioner.  ResolvedDependencies is the bundle
handed to table provisioning once every required dependency is ready.
Both are transient and live only for one resolution call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from kubemeter.models.resources import DataFeed, ReportingDefinition, ScheduledReport, SingleReport


class ViolationCategory(StrEnum):
    """Categories of not-ready dependencies, in reporting order."""

    VIEW_DISABLED = "view_disabled"
    UNINITIALIZED_DATA_SOURCE = "uninitialized_data_source"
    UNINITIALIZED_QUERY = "uninitialized_query"
    UNINITIALIZED_REPORT = "uninitialized_report"
    UNINITIALIZED_SCHEDULED_REPORT = "uninitialized_scheduled_report"


@dataclass(frozen=True)
class Violation:
    """Names of every dependency blocked for one category."""

    category: ViolationCategory
    names: tuple[str, ...]


@dataclass
class DependentQueries:
    """Transitive ReportingDefinition dependencies, per reference channel."""

    view: list[ReportingDefinition] = field(default_factory=list)
    dynamic: list[ReportingDefinition] = field(default_factory=list)


@dataclass
class DependenciesStatus:
    """Every fetched dependency of a root, split by readiness."""

    uninitialized_queries: list[ReportingDefinition] = field(default_factory=list)
    initialized_queries: list[ReportingDefinition] = field(default_factory=list)
    # Dynamic queries are never partitioned; they are always usable.
    dynamic_queries: list[ReportingDefinition] = field(default_factory=list)

    uninitialized_data_sources: list[DataFeed] = field(default_factory=list)
    initialized_data_sources: list[DataFeed] = field(default_factory=list)

    uninitialized_reports: list[SingleReport] = field(default_factory=list)
    initialized_reports: list[SingleReport] = field(default_factory=list)

    uninitialized_scheduled_reports: list[ScheduledReport] = field(default_factory=list)
    initialized_scheduled_reports: list[ScheduledReport] = field(default_factory=list)


@dataclass
class ResolvedDependencies:
    """Fully resolved, ready dependencies of a ReportingDefinition.

    Contract between the resolver and table provisioning: consumers read
    names and readiness attributes only and never trigger further resolution.
    """

    queries: list[ReportingDefinition] = field(default_factory=list)
    dynamic_queries: list[ReportingDefinition] = field(default_factory=list)
    data_sources: list[DataFeed] = field(default_factory=list)
    reports: list[SingleReport] = field(default_factory=list)
    scheduled_reports: list[ScheduledReport] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        """JSON-safe form exposing names and readiness attributes."""
        return {
            "queries": [{"name": q.name, "view_name": q.view_name} for q in self.queries],
            "dynamic_queries": [{"name": q.name, "view_name": q.view_name} for q in self.dynamic_queries],
            "data_sources": [{"name": d.name, "table_name": d.table_name} for d in self.data_sources],
            "reports": [{"name": r.name, "table_name": r.table_name} for r in self.reports],
            "scheduled_reports": [{"name": s.name, "table_name": s.table_name} for s in self.scheduled_reports],
        }
