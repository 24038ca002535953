"""Typed failures raised or reported by the client state layer."""
from __future__ import annotations

from typing import Mapping

from ..constants import MUTATION_IN_FLIGHT


class AlumniConnectError(RuntimeError):
    """Base class for every recoverable, per-action failure."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FetchFailure(AlumniConnectError):
    """Raised when a view's initial load fails."""


class MutationFailure(AlumniConnectError):
    """Raised when a like, create or delete call is rejected by the API."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConcurrentMutation(AlumniConnectError):
    """A mutation of the same kind is already in flight for the entity."""

    def __init__(self, entity_id: str, kind: str) -> None:
        super().__init__(MUTATION_IN_FLIGHT)
        self.entity_id = entity_id
        self.kind = kind


class ValidationFailure(AlumniConnectError):
    """A profile draft broke one or more rules; nothing was sent."""

    def __init__(self, violations: Mapping[str, list[str]]) -> None:
        super().__init__("Please correct the highlighted fields")
        self.violations = {field: list(messages) for field, messages in violations.items()}


__all__ = [
    "AlumniConnectError",
    "FetchFailure",
    "MutationFailure",
    "ConcurrentMutation",
    "ValidationFailure",
]
