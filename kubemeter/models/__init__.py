"""Core data structures for kubemeter."""

from kubemeter.models.config import KubeMeterConfig
from kubemeter.models.dependencies import (
    DependenciesStatus,
    DependentQueries,
    ResolvedDependencies,
    Violation,
    ViolationCategory,
)
from kubemeter.models.resources import (
    DataFeed,
    ReportingDefinition,
    ResourceKind,
    ScheduledReport,
    SingleReport,
)

__all__ = [
    "DataFeed",
    "DependenciesStatus",
    "DependentQueries",
    "KubeMeterConfig",
    "ReportingDefinition",
    "ResolvedDependencies",
    "ResourceKind",
    "ScheduledReport",
    "SingleReport",
    "Violation",
    "ViolationCategory",
]
