"""REST API routes.

Route handlers read their collaborators from ``request.app.state``.
Resolution is synchronous and may block on getter I/O, so it runs in the
threadpool.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from kubemeter.api.schemas import DependenciesResponse, ErrorResponse, HealthResponse
from kubemeter.observability.logging import get_logger
from kubemeter.reporting.errors import CycleExceededError, DependencyValidationError, NotFoundError

_log = get_logger("api.routes")

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    from kubemeter import __version__

    return HealthResponse(version=__version__)


@router.get(
    "/dependencies/{namespace}/{name}",
    response_model=DependenciesResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def get_dependencies(namespace: str, name: str, request: Request) -> DependenciesResponse | JSONResponse:
    resolver = request.app.state.resolver
    try:
        resolved = await run_in_threadpool(resolver.resolve, namespace, name)
    except NotFoundError as exc:
        return _error(404, "NOT_FOUND", str(exc))
    except CycleExceededError as exc:
        return _error(409, "DEPENDENCY_CYCLE", str(exc))
    except DependencyValidationError as exc:
        return _error(422, "DEPENDENCIES_NOT_READY", str(exc), violations=exc.to_dict())

    _log.debug("dependencies_served", namespace=namespace, name=name)
    return DependenciesResponse(namespace=namespace, name=name, **resolved.to_dict())


def _error(status_code: int, error: str, detail: str, violations: dict[str, list[str]] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail, violations=violations).model_dump(exclude_none=True),
    )
