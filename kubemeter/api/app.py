"""FastAPI application factory for kubemeter.

Usage::

    from kubemeter.api.app import create_app

    app = create_app(resolver=resolver, config=config)

The factory is designed for use by both the production bootstrap
(``kubemeter.app``) and unit tests.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from kubemeter.api.routes import router
from kubemeter.api.schemas import ErrorResponse

_log = structlog.get_logger(component="api.app")

_API_PREFIX = "/api/v1"


def create_app(resolver: Any, config: Any = None) -> FastAPI:
    """Create and configure the kubemeter FastAPI application.

    Args:
        resolver: DependencyResolver (anything with ``resolve(namespace, name)``).
        config:   KubeMeterConfig, stored for handlers that need it.

    Returns:
        Configured FastAPI application, ready to be served by uvicorn.
    """
    from kubemeter import __version__

    app = FastAPI(
        title="kubemeter",
        summary="Metering report dependency resolution API",
        version=__version__,
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
    )

    app.state.resolver = resolver
    app.state.config = config

    app.include_router(router, prefix=_API_PREFIX)

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all for unhandled exceptions; never expose stack traces."""
        _log.error(
            "unhandled_exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="INTERNAL_ERROR",
                detail="An unexpected error occurred.",
            ).model_dump(exclude_none=True),
        )

    return app
