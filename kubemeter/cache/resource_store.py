"""In-memory store of metering custom resources.

Filled from list calls at startup and refreshed by relisting every kind on
a fixed interval; each relist replaces that kind wholesale, so deleted
objects drop out at the next resync.  ``update`` and ``remove`` edit single
entries.  Reads are lock-protected so concurrent resolution calls for
different roots see a consistent snapshot per lookup.
"""

from __future__ import annotations

import threading
from enum import StrEnum
from typing import Any

from kubemeter.models.resources import API_GROUP, API_VERSION, MODEL_FOR_KIND, ResourceKind
from kubemeter.observability.logging import get_logger

_logger = get_logger("cache.resource_store")


class StoreReadiness(StrEnum):
    """Population state of the store."""

    WARMING = "warming"
    PARTIALLY_READY = "partially_ready"
    READY = "ready"


class ResourceStore:
    """Thread-safe kind -> namespace -> name -> resource map."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._store: dict[ResourceKind, dict[str, dict[str, Any]]] = {kind: {} for kind in ResourceKind}
        self._ready_kinds: set[ResourceKind] = set()

    def update(self, kind: ResourceKind, obj: dict[str, Any]) -> None:
        """Insert or replace a resource from its raw API object."""
        resource = MODEL_FOR_KIND[kind].from_manifest(obj)
        if not resource.name:
            _logger.debug("store_update_skipped", kind=str(kind), reason="missing name")
            return
        with self._lock:
            self._store[kind].setdefault(resource.namespace, {})[resource.name] = resource

    def remove(self, kind: ResourceKind, namespace: str, name: str) -> None:
        with self._lock:
            self._store[kind].get(namespace, {}).pop(name, None)

    def get(self, kind: ResourceKind, namespace: str, name: str) -> Any | None:
        with self._lock:
            return self._store[kind].get(namespace, {}).get(name)

    def count(self, kind: ResourceKind) -> int:
        with self._lock:
            return sum(len(names) for names in self._store[kind].values())

    def readiness(self) -> StoreReadiness:
        with self._lock:
            ready = len(self._ready_kinds)
        if ready == 0:
            return StoreReadiness.WARMING
        if ready < len(ResourceKind):
            return StoreReadiness.PARTIALLY_READY
        return StoreReadiness.READY

    def _replace(self, kind: ResourceKind, items: list[dict[str, Any]]) -> None:
        """Swap in a freshly listed set of objects for *kind*."""
        fresh: dict[str, dict[str, Any]] = {}
        model = MODEL_FOR_KIND[kind]
        for item in items:
            resource = model.from_manifest(item)
            if resource.name:
                fresh.setdefault(resource.namespace, {})[resource.name] = resource
        with self._lock:
            self._store[kind] = fresh
            self._ready_kinds.add(kind)

    async def populate(self, api: Any, namespace: str = "") -> None:
        """List every kind through a kubernetes_asyncio CustomObjectsApi.

        Each successfully listed kind replaces its previous contents, so the
        call doubles as a periodic resync.

        An empty *namespace* lists across the whole cluster.  A failing list
        leaves that kind unchanged and is re-raised after the other kinds
        have been attempted.
        """
        first_error: Exception | None = None
        for kind in ResourceKind:
            try:
                if namespace:
                    result = await api.list_namespaced_custom_object(API_GROUP, API_VERSION, namespace, kind.plural)
                else:
                    result = await api.list_cluster_custom_object(API_GROUP, API_VERSION, kind.plural)
            except Exception as exc:
                _logger.error("store_populate_failed", kind=str(kind), error=str(exc))
                first_error = first_error or exc
                continue
            self._replace(kind, result.get("items", []))
            _logger.info("store_populated", kind=str(kind), count=self.count(kind))
        if first_error is not None:
            raise first_error
