"""Synchronous Kubernetes API reader for metering custom resources.

Used by the live getters: every lookup is a GET against the API server,
with no caching and no retries.
"""

from __future__ import annotations

import ssl
from pathlib import Path
from typing import Any

import httpx

from kubemeter.models.config import KubeAPIConfig
from kubemeter.models.resources import API_GROUP, API_VERSION, ResourceKind
from kubemeter.observability.logging import get_logger
from kubemeter.reporting.errors import KubeAPIError, NotFoundError

_logger = get_logger("kube.client")


class KubeAPIClient:
    """Reads metering custom resources from the Kubernetes API server."""

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    @classmethod
    def from_config(cls, config: KubeAPIConfig) -> KubeAPIClient:
        """Build a client authenticated with the service-account token."""
        headers: dict[str, str] = {}
        token_file = Path(config.token_path)
        if token_file.exists():
            headers["Authorization"] = f"Bearer {token_file.read_text().strip()}"
        verify: ssl.SSLContext | bool = True
        if Path(config.ca_path).exists():
            verify = ssl.create_default_context(cafile=config.ca_path)
        http = httpx.Client(
            base_url=config.server,
            headers=headers,
            verify=verify,
            timeout=config.timeout_seconds,
        )
        return cls(http)

    @staticmethod
    def resource_path(kind: ResourceKind, namespace: str, name: str) -> str:
        return f"/apis/{API_GROUP}/{API_VERSION}/namespaces/{namespace}/{kind.plural}/{name}"

    def get(self, kind: ResourceKind, namespace: str, name: str) -> dict[str, Any]:
        """Fetch one object.

        Raises:
            NotFoundError: the API server answered 404.
            KubeAPIError:  any other HTTP status, a transport failure, or a body
                          that is not JSON.
        """
        path = self.resource_path(kind, namespace, name)
        try:
            response = self._http.get(path)
        except httpx.HTTPError as exc:
            raise KubeAPIError(kind, namespace, name, exc) from exc

        if response.status_code == 404:
            raise NotFoundError(kind, namespace, name)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            _logger.warning(
                "kube_get_failed",
                kind=str(kind),
                namespace=namespace,
                name=name,
                status=response.status_code,
            )
            raise KubeAPIError(kind, namespace, name, exc) from exc
        try:
            return response.json()  # type: ignore[no-any-return]
        except ValueError as exc:
            _logger.warning("kube_get_invalid_body", kind=str(kind), namespace=namespace, name=name)
            raise KubeAPIError(kind, namespace, name, exc) from exc

    def close(self) -> None:
        self._http.close()
