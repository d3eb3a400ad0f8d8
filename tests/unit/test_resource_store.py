"""Tests for the ResourceStore and the store-backed getters."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from kubemeter.cache.resource_store import ResourceStore, StoreReadiness
from kubemeter.models.resources import DataFeed, ReportingDefinition, ResourceKind
from kubemeter.reporting.errors import NotFoundError
from kubemeter.reporting.getters import store_getters


def _obj(name: str, namespace: str = "metering", **status: str) -> dict:
    return {"metadata": {"name": name, "namespace": namespace}, "spec": {}, "status": dict(status)}


def _list_result(*items: dict) -> dict:
    return {"items": list(items)}


class TestUpdateAndGet:
    def test_update_then_get(self) -> None:
        store = ResourceStore()
        store.update(ResourceKind.DATA_FEED, _obj("pods", tableName="t_pods"))
        feed = store.get(ResourceKind.DATA_FEED, "metering", "pods")
        assert isinstance(feed, DataFeed)
        assert feed.table_name == "t_pods"

    def test_miss_returns_none(self) -> None:
        assert ResourceStore().get(ResourceKind.DATA_FEED, "metering", "pods") is None

    def test_namespaces_isolated(self) -> None:
        store = ResourceStore()
        store.update(ResourceKind.DATA_FEED, _obj("pods", namespace="a"))
        assert store.get(ResourceKind.DATA_FEED, "b", "pods") is None

    def test_kinds_isolated(self) -> None:
        store = ResourceStore()
        store.update(ResourceKind.SINGLE_REPORT, _obj("shared"))
        assert store.get(ResourceKind.SCHEDULED_REPORT, "metering", "shared") is None

    def test_update_replaces(self) -> None:
        store = ResourceStore()
        store.update(ResourceKind.REPORTING_DEFINITION, _obj("q"))
        store.update(ResourceKind.REPORTING_DEFINITION, _obj("q", viewName="v_q"))
        query = store.get(ResourceKind.REPORTING_DEFINITION, "metering", "q")
        assert isinstance(query, ReportingDefinition)
        assert query.is_ready

    def test_remove(self) -> None:
        store = ResourceStore()
        store.update(ResourceKind.DATA_FEED, _obj("pods"))
        store.remove(ResourceKind.DATA_FEED, "metering", "pods")
        assert store.get(ResourceKind.DATA_FEED, "metering", "pods") is None
        store.remove(ResourceKind.DATA_FEED, "metering", "pods")

    def test_object_without_name_ignored(self) -> None:
        store = ResourceStore()
        store.update(ResourceKind.DATA_FEED, {"metadata": {"namespace": "metering"}})
        assert store.count(ResourceKind.DATA_FEED) == 0


class TestPopulate:
    async def test_populate_all_kinds_cluster_wide(self) -> None:
        api = MagicMock()
        api.list_cluster_custom_object = AsyncMock(return_value=_list_result(_obj("x"), _obj("y")))
        store = ResourceStore()
        assert store.readiness() == StoreReadiness.WARMING

        await store.populate(api)

        assert store.readiness() == StoreReadiness.READY
        assert api.list_cluster_custom_object.await_count == len(ResourceKind)
        plurals = {call.args[2] for call in api.list_cluster_custom_object.await_args_list}
        assert plurals == {kind.plural for kind in ResourceKind}
        assert store.count(ResourceKind.SCHEDULED_REPORT) == 2

    async def test_populate_namespaced(self) -> None:
        api = MagicMock()
        api.list_namespaced_custom_object = AsyncMock(return_value=_list_result(_obj("x")))
        store = ResourceStore()
        await store.populate(api, namespace="metering")
        first = api.list_namespaced_custom_object.await_args_list[0]
        assert first.args[:3] == ("metering.openshift.io", "v1", "metering")

    async def test_populate_replaces_previous_contents(self) -> None:
        api = MagicMock()
        api.list_cluster_custom_object = AsyncMock(return_value=_list_result(_obj("old")))
        store = ResourceStore()
        await store.populate(api)
        api.list_cluster_custom_object = AsyncMock(return_value=_list_result(_obj("new")))
        await store.populate(api)
        assert store.get(ResourceKind.DATA_FEED, "metering", "old") is None
        assert store.get(ResourceKind.DATA_FEED, "metering", "new") is not None

    async def test_partial_failure_reraises_after_other_kinds(self) -> None:
        async def _list(group: str, version: str, plural: str) -> dict:
            if plural == ResourceKind.SINGLE_REPORT.plural:
                raise RuntimeError("forbidden")
            return _list_result(_obj("x"))

        api = MagicMock()
        api.list_cluster_custom_object = AsyncMock(side_effect=_list)
        store = ResourceStore()
        with pytest.raises(RuntimeError, match="forbidden"):
            await store.populate(api)
        assert store.readiness() == StoreReadiness.PARTIALLY_READY
        assert store.get(ResourceKind.SCHEDULED_REPORT, "metering", "x") is not None


class TestStoreGetters:
    def test_hit(self) -> None:
        store = ResourceStore()
        store.update(ResourceKind.REPORTING_DEFINITION, _obj("q"))
        assert store_getters(store).queries.get("metering", "q").name == "q"

    def test_miss_raises_not_found(self) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            store_getters(ResourceStore()).scheduled_reports.get("metering", "daily")
        assert exc_info.value.kind == ResourceKind.SCHEDULED_REPORT
        assert str(exc_info.value) == 'ScheduledReport "daily" not found in namespace "metering"'

    def test_reads_current_contents(self) -> None:
        store = ResourceStore()
        getters = store_getters(store)
        store.update(ResourceKind.DATA_FEED, _obj("late", tableName="t"))
        assert getters.data_sources.get("metering", "late").table_name == "t"
