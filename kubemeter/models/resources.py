"""Metering custom resource data structures.

Each kind is a read-only snapshot of a namespaced custom resource owned by
the metering operator.  Readiness is signalled solely by a non-empty
storage attribute written by the table provisioner: ``view_name`` for
ReportingDefinitions and ``table_name`` for the other three kinds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

API_GROUP = "metering.openshift.io"
API_VERSION = "v1"


class ResourceKind(StrEnum):
    """Custom resource kinds referenced by a ReportingDefinition."""

    REPORTING_DEFINITION = "ReportGenerationQuery"
    DATA_FEED = "ReportDataSource"
    SINGLE_REPORT = "Report"
    SCHEDULED_REPORT = "ScheduledReport"

    @property
    def plural(self) -> str:
        """Lower-case plural used in API paths."""
        return _PLURALS[self]


_PLURALS = {
    ResourceKind.REPORTING_DEFINITION: "reportgenerationqueries",
    ResourceKind.DATA_FEED: "reportdatasources",
    ResourceKind.SINGLE_REPORT: "reports",
    ResourceKind.SCHEDULED_REPORT: "scheduledreports",
}


def _metadata(obj: dict[str, Any]) -> tuple[str, str]:
    metadata = obj.get("metadata") or {}
    return str(metadata.get("namespace", "")), str(metadata.get("name", ""))


def _str_list(value: object) -> list[str]:
    if not value:
        return []
    return [str(item) for item in value]  # type: ignore[union-attr]


@dataclass
class ReportingDefinition:
    """A ReportGenerationQuery: the self-referential node of the graph."""

    name: str
    namespace: str
    report_queries: list[str] = field(default_factory=list)
    dynamic_report_queries: list[str] = field(default_factory=list)
    data_sources: list[str] = field(default_factory=list)
    reports: list[str] = field(default_factory=list)
    scheduled_reports: list[str] = field(default_factory=list)
    view_disabled: bool = False
    view_name: str = ""  # empty until the view is materialized

    kind = ResourceKind.REPORTING_DEFINITION

    @property
    def is_ready(self) -> bool:
        return self.view_name != ""

    @classmethod
    def from_manifest(cls, obj: dict[str, Any]) -> ReportingDefinition:
        namespace, name = _metadata(obj)
        spec = obj.get("spec") or {}
        status = obj.get("status") or {}
        view = spec.get("view") or {}
        return cls(
            name=name,
            namespace=namespace,
            report_queries=_str_list(spec.get("reportQueries")),
            dynamic_report_queries=_str_list(spec.get("dynamicReportQueries")),
            data_sources=_str_list(spec.get("reportDataSources")),
            reports=_str_list(spec.get("reports")),
            scheduled_reports=_str_list(spec.get("scheduledReports")),
            view_disabled=bool(view.get("disabled", False)),
            view_name=str(status.get("viewName") or ""),
        )


@dataclass
class _TableBacked:
    name: str
    namespace: str
    table_name: str = ""  # empty until the backing table exists

    @property
    def is_ready(self) -> bool:
        return self.table_name != ""

    @classmethod
    def from_manifest(cls, obj: dict[str, Any]) -> Any:
        namespace, name = _metadata(obj)
        status = obj.get("status") or {}
        return cls(name=name, namespace=namespace, table_name=str(status.get("tableName") or ""))


@dataclass
class DataFeed(_TableBacked):
    """A ReportDataSource: raw usage data backed by a storage table."""

    kind = ResourceKind.DATA_FEED


@dataclass
class SingleReport(_TableBacked):
    """A one-shot Report backed by a storage table once generated."""

    kind = ResourceKind.SINGLE_REPORT


@dataclass
class ScheduledReport(_TableBacked):
    """A recurring ScheduledReport backed by a storage table once generated."""

    kind = ResourceKind.SCHEDULED_REPORT


MODEL_FOR_KIND: dict[ResourceKind, type[Any]] = {
    ResourceKind.REPORTING_DEFINITION: ReportingDefinition,
    ResourceKind.DATA_FEED: DataFeed,
    ResourceKind.SINGLE_REPORT: SingleReport,
    ResourceKind.SCHEDULED_REPORT: ScheduledReport,
}
