"""HTTP helper utilities shared across Flask blueprints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from flask import current_app, jsonify

from tscatalog.backend.app.localization import CatalogRegistry

REGISTRY_EXTENSION = "tscatalog.registry"


@dataclass(frozen=True)
class ProblemResponse:
    """JSON error payload of the form ``{"error", "message", ...}``."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error, **self.extra}
        if self.message:
            payload["message"] = self.message
        return payload

    def to_response(self) -> tuple[Any, int]:
        return jsonify(self.as_dict()), self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    return ProblemResponse(error=error, status=status, message=message, extra=extra)


def missing_argument(name: str) -> ProblemResponse:
    return problem_response(
        "bad_request",
        status=400,
        message=f"Query argument '{name}' is required",
        argument=name,
    )


def current_registry() -> CatalogRegistry:
    """Return the catalogue registry bound to the active Flask application."""

    return current_app.extensions[REGISTRY_EXTENSION]


__all__ = [
    "ProblemResponse",
    "REGISTRY_EXTENSION",
    "current_registry",
    "missing_argument",
    "problem_response",
]
