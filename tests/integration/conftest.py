"""Shared fixtures for kubemeter integration tests.

Provides a ResourceStore populated with a realistic set of metering
resources and a DependencyResolver wired to it, so integration tests can
exercise the full resolution pipeline without a Kubernetes cluster.
"""

from __future__ import annotations

import pytest

from kubemeter.cache.resource_store import ResourceStore
from kubemeter.models.config import ResolverConfig
from kubemeter.models.resources import ResourceKind
from kubemeter.reporting.getters import store_getters
from kubemeter.reporting.service import DependencyResolver

NAMESPACE = "metering"


# ---------------------------------------------------------------------------
# Manifest factory helpers
# ---------------------------------------------------------------------------


def make_query_manifest(
    name: str,
    report_queries: list[str] | None = None,
    dynamic_report_queries: list[str] | None = None,
    data_sources: list[str] | None = None,
    reports: list[str] | None = None,
    scheduled_reports: list[str] | None = None,
    view_name: str = "",
    view_disabled: bool = False,
    namespace: str = NAMESPACE,
) -> dict:
    """Create a ReportGenerationQuery object as the API server returns it."""
    return {
        "apiVersion": "metering.openshift.io/v1",
        "kind": "ReportGenerationQuery",
        "metadata": {"name": name, "namespace": namespace},
        "spec": {
            "reportQueries": report_queries or [],
            "dynamicReportQueries": dynamic_report_queries or [],
            "reportDataSources": data_sources or [],
            "reports": reports or [],
            "scheduledReports": scheduled_reports or [],
            "view": {"disabled": view_disabled},
        },
        "status": {"viewName": view_name} if view_name else {},
    }


def make_table_manifest(kind: ResourceKind, name: str, table_name: str = "", namespace: str = NAMESPACE) -> dict:
    """Create a ReportDataSource / Report / ScheduledReport object."""
    return {
        "apiVersion": "metering.openshift.io/v1",
        "kind": str(kind),
        "metadata": {"name": name, "namespace": namespace},
        "spec": {},
        "status": {"tableName": table_name} if table_name else {},
    }


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


def _populate_store_with_test_data(store: ResourceStore) -> None:
    """Populate a ResourceStore with a pod/node usage reporting graph.

    pod-cpu-usage
      ├── pod-cpu-request-raw ── pod-cpu-request (data source, ready)
      │        └── node-capacity-raw (view ready)
      ├── node-capacity-raw
      ├── dynamic: cluster-cpu-capacity (never materialized)
      └── data sources: pod-cpu-request, node-capacity
    """
    queries = [
        make_query_manifest(
            "pod-cpu-usage",
            report_queries=["pod-cpu-request-raw", "node-capacity-raw"],
            dynamic_report_queries=["cluster-cpu-capacity"],
            data_sources=["pod-cpu-request", "node-capacity"],
        ),
        make_query_manifest(
            "pod-cpu-request-raw",
            report_queries=["node-capacity-raw"],
            data_sources=["pod-cpu-request"],
            view_name="view_pod_cpu_request_raw",
        ),
        make_query_manifest("node-capacity-raw", view_name="view_node_capacity_raw"),
        make_query_manifest("cluster-cpu-capacity", report_queries=["node-capacity-raw"]),
        # Reporting graph with blocking dependencies of every category.
        make_query_manifest(
            "namespace-cpu-usage",
            report_queries=["pod-cpu-request-raw", "pod-memory-raw", "pod-usage-no-view"],
            data_sources=["pod-cpu-request", "pod-memory-request"],
            reports=["last-month", "pending-report"],
            scheduled_reports=["hourly", "pending-schedule"],
        ),
        make_query_manifest("pod-memory-raw"),
        make_query_manifest("pod-usage-no-view", view_disabled=True),
        # Cycle: loop-a -> loop-b -> loop-c -> loop-a
        make_query_manifest("loop-a", report_queries=["loop-b"]),
        make_query_manifest("loop-b", report_queries=["loop-c"]),
        make_query_manifest("loop-c", report_queries=["loop-a"]),
        # References a query that does not exist.
        make_query_manifest("dangling", report_queries=["node-capacity-raw", "missing", "pod-cpu-request-raw"]),
    ]
    for obj in queries:
        store.update(ResourceKind.REPORTING_DEFINITION, obj)

    store.update(ResourceKind.DATA_FEED, make_table_manifest(ResourceKind.DATA_FEED, "pod-cpu-request", "ds_pod_cpu"))
    store.update(ResourceKind.DATA_FEED, make_table_manifest(ResourceKind.DATA_FEED, "node-capacity", "ds_node_cap"))
    store.update(ResourceKind.DATA_FEED, make_table_manifest(ResourceKind.DATA_FEED, "pod-memory-request"))
    store.update(
        ResourceKind.SINGLE_REPORT, make_table_manifest(ResourceKind.SINGLE_REPORT, "last-month", "report_last_month")
    )
    store.update(ResourceKind.SINGLE_REPORT, make_table_manifest(ResourceKind.SINGLE_REPORT, "pending-report"))
    store.update(
        ResourceKind.SCHEDULED_REPORT, make_table_manifest(ResourceKind.SCHEDULED_REPORT, "hourly", "report_hourly")
    )
    store.update(ResourceKind.SCHEDULED_REPORT, make_table_manifest(ResourceKind.SCHEDULED_REPORT, "pending-schedule"))


@pytest.fixture()
def resource_store() -> ResourceStore:
    """Pre-populated ResourceStore."""
    store = ResourceStore()
    _populate_store_with_test_data(store)
    return store


@pytest.fixture()
def resolver(resource_store: ResourceStore) -> DependencyResolver:
    """DependencyResolver reading through the populated store."""
    return DependencyResolver(store_getters(resource_store), ResolverConfig())


@pytest.fixture()
def strict_resolver(resource_store: ResourceStore) -> DependencyResolver:
    """DependencyResolver with path-based cycle detection enabled."""
    return DependencyResolver(store_getters(resource_store), ResolverConfig(strict_cycles=True))
