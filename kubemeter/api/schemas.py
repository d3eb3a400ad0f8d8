"""Pydantic response schemas for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error envelope shared by every non-2xx response."""

    error: str
    detail: str
    violations: dict[str, list[str]] | None = None


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str


class QueryRef(BaseModel):
    name: str
    view_name: str


class TableRef(BaseModel):
    name: str
    table_name: str


class DependenciesResponse(BaseModel):
    """Resolved, ready dependencies of one ReportGenerationQuery."""

    namespace: str
    name: str
    queries: list[QueryRef] = Field(default_factory=list)
    dynamic_queries: list[QueryRef] = Field(default_factory=list)
    data_sources: list[TableRef] = Field(default_factory=list)
    reports: list[TableRef] = Field(default_factory=list)
    scheduled_reports: list[TableRef] = Field(default_factory=list)
