"""Narrow lookup capabilities, one per resource kind.

The resolver depends only on these protocols, so the same algorithm runs
against the in-memory ResourceStore, a live KubeAPIClient, or a plain dict
in tests.  A getter returns the resource or raises; NotFoundError is the
conventional miss but any exception is propagated unchanged.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar

from kubemeter.models.resources import (
    MODEL_FOR_KIND,
    DataFeed,
    ReportingDefinition,
    ResourceKind,
    ScheduledReport,
    SingleReport,
)
from kubemeter.reporting.errors import NotFoundError

if TYPE_CHECKING:
    from kubemeter.cache.resource_store import ResourceStore
    from kubemeter.kube.client import KubeAPIClient

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Getter(Protocol[T_co]):
    def get(self, namespace: str, name: str) -> T_co: ...


ReportingDefinitionGetter = Getter[ReportingDefinition]
DataFeedGetter = Getter[DataFeed]
SingleReportGetter = Getter[SingleReport]
ScheduledReportGetter = Getter[ScheduledReport]


class GetterFunc(Generic[T]):
    """Adapt a ``(namespace, name) -> resource`` callable into a Getter."""

    def __init__(self, fn: Callable[[str, str], T]) -> None:
        self._fn = fn

    def get(self, namespace: str, name: str) -> T:
        return self._fn(namespace, name)


@dataclass(frozen=True)
class Getters:
    """The four getters a resolution call needs."""

    queries: ReportingDefinitionGetter
    data_sources: DataFeedGetter
    reports: SingleReportGetter
    scheduled_reports: ScheduledReportGetter


def mapping_getter(kind: ResourceKind, resources: dict[tuple[str, str], T]) -> GetterFunc[T]:
    """Getter over a ``{(namespace, name): resource}`` mapping."""

    def _get(namespace: str, name: str) -> T:
        try:
            return resources[(namespace, name)]
        except KeyError:
            raise NotFoundError(kind, namespace, name) from None

    return GetterFunc(_get)


def store_getters(store: ResourceStore) -> Getters:
    """Getters reading through the local ResourceStore."""

    def _for(kind: ResourceKind) -> GetterFunc:
        def _get(namespace: str, name: str):  # type: ignore[no-untyped-def]
            resource = store.get(kind, namespace, name)
            if resource is None:
                raise NotFoundError(kind, namespace, name)
            return resource

        return GetterFunc(_get)

    return Getters(
        queries=_for(ResourceKind.REPORTING_DEFINITION),
        data_sources=_for(ResourceKind.DATA_FEED),
        reports=_for(ResourceKind.SINGLE_REPORT),
        scheduled_reports=_for(ResourceKind.SCHEDULED_REPORT),
    )


def client_getters(client: KubeAPIClient) -> Getters:
    """Getters issuing a live API read on every call."""

    def _for(kind: ResourceKind) -> GetterFunc:
        model = MODEL_FOR_KIND[kind]
        return GetterFunc(lambda namespace, name: model.from_manifest(client.get(kind, namespace, name)))

    return Getters(
        queries=_for(ResourceKind.REPORTING_DEFINITION),
        data_sources=_for(ResourceKind.DATA_FEED),
        reports=_for(ResourceKind.SINGLE_REPORT),
        scheduled_reports=_for(ResourceKind.SCHEDULED_REPORT),
    )
