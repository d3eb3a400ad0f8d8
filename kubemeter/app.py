"""Application bootstrap for kubemeter.

Wires all components in dependency order and manages the asyncio lifecycle.
Startup order: config → logging → K8s client → resource source (store or
              live client) → resolver → store resync → REST

Shutdown is graceful: components are stopped in reverse startup order and
each stop failure is logged without preventing the rest from stopping.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING, Any

from kubemeter.config import load_config
from kubemeter.models.config import KubeMeterConfig
from kubemeter.observability.logging import get_logger, setup_logging

if TYPE_CHECKING:
    import structlog

    from kubemeter.cache.resource_store import ResourceStore
    from kubemeter.kube.client import KubeAPIClient
    from kubemeter.reporting.service import DependencyResolver

_SHUTDOWN_GRACE_SECONDS = 15


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class KubeMeterApp:
    """Application root.  Owns every component and coordinates their lifecycle.

    Calling ``stop()`` on an app that was never started (or already stopped)
    is safe.
    """

    def __init__(self) -> None:
        self.config: KubeMeterConfig | None = None

        self._custom_objects_api: Any = None
        self._store: ResourceStore | None = None
        self._kube_client: KubeAPIClient | None = None
        self._resolver: DependencyResolver | None = None
        self._rest_server: Any = None

        self._background_tasks: list[asyncio.Task[None]] = []

        self._running = False
        self._log: structlog.stdlib.BoundLogger | None = None

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start all components in dependency order.

        Raises _ComponentError if a mandatory component cannot start.
        """
        self.config = load_config()

        setup_logging(self.config.log.level)
        self._log = get_logger("app")
        self._log.info("kubemeter starting", version=_kubemeter_version(), source=self.config.resolver.source)

        if self.config.resolver.source == "cache":
            await self._start_k8s_client()
            await self._start_store()
        else:
            self._start_kube_client()

        self._start_resolver()

        if self._store is not None:
            self._start_resync()

        await self._start_rest()

        self._running = True
        self._log.info("kubemeter started", port=self.config.api.port)

    async def _start_k8s_client(self) -> None:
        """Initialise kubernetes-asyncio from in-cluster config or kubeconfig."""
        assert self._log is not None
        self._log.debug("starting k8s client")
        try:
            import kubernetes_asyncio.config as k8s_config  # type: ignore[import-untyped]
            from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]

            try:
                k8s_config.load_incluster_config()
                self._log.info("k8s client configured from in-cluster service account")
            except k8s_config.ConfigException:
                await k8s_config.load_kube_config()
                self._log.info("k8s client configured from kubeconfig")

            self._custom_objects_api = k8s_client.CustomObjectsApi()
        except Exception as exc:
            raise _ComponentError("k8s_client", exc) from exc

    async def _start_store(self) -> None:
        """Populate the ResourceStore from initial list calls."""
        assert self._log is not None
        assert self.config is not None
        self._log.debug("starting resource store")
        try:
            from kubemeter.cache import ResourceStore

            store = ResourceStore()
            await store.populate(self._custom_objects_api, namespace=self.config.namespace)
            self._store = store
            self._log.info("resource store started", readiness=str(store.readiness()))
        except Exception as exc:
            raise _ComponentError("store", exc) from exc

    def _start_kube_client(self) -> None:
        """Create the synchronous API client used by live getters."""
        assert self._log is not None
        assert self.config is not None
        self._log.debug("starting live kube client")
        try:
            from kubemeter.kube import KubeAPIClient

            self._kube_client = KubeAPIClient.from_config(self.config.kube_api)
            self._log.info("live kube client started", server=self.config.kube_api.server)
        except Exception as exc:
            raise _ComponentError("kube_client", exc) from exc

    def _start_resolver(self) -> None:
        assert self._log is not None
        assert self.config is not None
        from kubemeter.reporting import DependencyResolver, client_getters, store_getters

        if self._store is not None:
            getters = store_getters(self._store)
        else:
            assert self._kube_client is not None
            getters = client_getters(self._kube_client)
        self._resolver = DependencyResolver(getters, self.config.resolver)
        self._log.info(
            "resolver started",
            max_depth=self.config.resolver.max_depth,
            strict_cycles=self.config.resolver.strict_cycles,
        )

    def _start_resync(self) -> None:
        """Launch a periodic task that relists every kind into the store."""
        assert self._log is not None
        assert self.config is not None
        store = self._store
        api = self._custom_objects_api
        namespace = self.config.namespace
        interval = self.config.cache.resync_seconds
        log = self._log

        async def _resync() -> None:
            while True:
                await asyncio.sleep(interval)
                try:
                    await store.populate(api, namespace=namespace)  # type: ignore[union-attr]
                except Exception as exc:
                    log.warning("store_resync_failed", error=str(exc))

        task = asyncio.create_task(_resync(), name="store-resync")
        self._background_tasks.append(task)
        self._log.info("store resync started", interval_seconds=interval)

    async def _start_rest(self) -> None:
        """Start the uvicorn REST server."""
        assert self._log is not None
        assert self.config is not None
        self._log.debug("starting rest api")
        try:
            import uvicorn

            from kubemeter.api import create_app

            fastapi_app = create_app(resolver=self._resolver, config=self.config)
            uv_config = uvicorn.Config(
                app=fastapi_app,
                host="0.0.0.0",
                port=self.config.api.port,
                log_config=None,  # structlog handles all logging
                access_log=False,
            )
            server = uvicorn.Server(uv_config)
            task = asyncio.create_task(server.serve(), name="rest-server")
            self._background_tasks.append(task)
            self._rest_server = server
            self._log.info("rest api started", port=self.config.api.port)
        except Exception as exc:
            raise _ComponentError("rest", exc) from exc

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        """Gracefully stop all components in reverse startup order."""
        if not self._running and self._log is None:
            return

        log = self._log or get_logger("app")
        log.info("kubemeter shutting down")

        self._running = False

        if self._rest_server is not None:
            self._rest_server.should_exit = True

        for task in reversed(self._background_tasks):
            if not task.done():
                task.cancel()
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)
        self._background_tasks.clear()

        self._resolver = None
        self._store = None
        if self._kube_client is not None:
            try:
                self._kube_client.close()
            except Exception as exc:
                log.error("component stop raised an error", component="kube_client", error=str(exc))
            self._kube_client = None
        await self._stop_k8s_client()

        log.info("kubemeter stopped")

    async def _stop_k8s_client(self) -> None:
        """Close the kubernetes-asyncio ApiClient connection pool."""
        if self._custom_objects_api is None:
            return
        log = self._log or get_logger("app")
        try:
            await asyncio.wait_for(self._custom_objects_api.api_client.close(), timeout=_SHUTDOWN_GRACE_SECONDS)
        except Exception as exc:
            log.debug("k8s client close raised (non-fatal)", error=str(exc))
        self._custom_objects_api = None


def _kubemeter_version() -> str:
    from kubemeter import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main() -> None:
    """Create the app, register OS signals, serve until SIGTERM or SIGINT."""
    app = KubeMeterApp()
    stop_requested = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, stop_requested.set)

    try:
        await app.start()
    except _ComponentError as exc:
        get_logger("app").critical("fatal startup error", component=exc.component, error=str(exc.cause))
        await app.stop()
        raise SystemExit(1) from exc

    try:
        await stop_requested.wait()
    finally:
        await app.stop()


def run() -> None:
    """Console-script entry point."""
    asyncio.run(main())
