"""Errors raised while resolving ReportingDefinition dependencies.

Every error propagates to the caller of the resolution entry point unchanged;
the resolver never retries, swallows, or downgrades a failure.
"""

from __future__ import annotations

from kubemeter.models.dependencies import Violation, ViolationCategory

_CATEGORY_MESSAGES = {
    ViolationCategory.VIEW_DISABLED: (
        "invalid ReportGenerationQuery, references ReportGenerationQueries with spec.view.disabled=true"
    ),
    ViolationCategory.UNINITIALIZED_DATA_SOURCE: (
        "ReportGenerationQuery has uninitialized ReportDataSource dependencies"
    ),
    ViolationCategory.UNINITIALIZED_QUERY: "ReportGenerationQuery has uninitialized ReportGenerationQuery dependencies",
    ViolationCategory.UNINITIALIZED_REPORT: "ReportGenerationQuery has uninitialized Report dependencies",
    ViolationCategory.UNINITIALIZED_SCHEDULED_REPORT: (
        "ReportGenerationQuery has uninitialized ScheduledReport dependencies"
    ),
}


class ResolutionError(Exception):
    """Base class for every dependency resolution failure."""


class NotFoundError(ResolutionError):
    """A referenced resource does not exist."""

    def __init__(self, kind: str, namespace: str, name: str) -> None:
        super().__init__(f'{kind} "{name}" not found in namespace "{namespace}"')
        self.kind = kind
        self.namespace = namespace
        self.name = name


class KubeAPIError(ResolutionError):
    """A live read against the Kubernetes API failed for a reason other than 404."""

    def __init__(self, kind: str, namespace: str, name: str, cause: Exception) -> None:
        super().__init__(f"failed to get {kind} {namespace}/{name}: {cause}")
        self.kind = kind
        self.namespace = namespace
        self.name = name
        self.cause = cause


class CycleExceededError(ResolutionError):
    """Traversal reached the depth bound before exhausting a reference list."""

    def __init__(self, depth: int, name: str) -> None:
        super().__init__(f"detected a cycle at depth {depth} for generationQuery {name}")
        self.depth = depth
        self.name = name


class DependencyValidationError(ResolutionError):
    """One or more dependencies are not ready.

    Carries the structured violations so status writers and loggers can use
    them directly; the message is only rendered for display.
    """

    def __init__(self, violations: list[Violation]) -> None:
        self.violations = violations
        parts = [f"{_CATEGORY_MESSAGES[v.category]}: {', '.join(v.names)}" for v in violations]
        super().__init__(f"ReportGenerationQuery dependency validation error: {', '.join(parts)}")

    def to_dict(self) -> dict[str, list[str]]:
        return {str(v.category): list(v.names) for v in self.violations}
