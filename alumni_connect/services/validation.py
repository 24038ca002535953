"""Profile draft rule-sets.

The form only asks a rule-set for violations; the rules themselves live in the
pydantic update schemas.
"""
from __future__ import annotations

from typing import Any, Mapping, Protocol

from pydantic import BaseModel, ValidationError

from ..constants import ROLE_ALUMNI, ROLE_STUDENT
from ..schemas import AlumniProfileUpdate, StudentProfileUpdate


class ValidationRuleSet(Protocol):
    def validate(self, role: str, payload: Mapping[str, Any]) -> dict[str, list[str]]: ...


class SchemaRuleSet:
    """Validates a payload against the role's update schema.

    Violations are keyed by dotted wire path, e.g. ``previousExperiences.1.company``.
    """

    def __init__(self, schemas: Mapping[str, type[BaseModel]] | None = None) -> None:
        self.schemas = dict(schemas or {ROLE_STUDENT: StudentProfileUpdate, ROLE_ALUMNI: AlumniProfileUpdate})

    def validate(self, role: str, payload: Mapping[str, Any]) -> dict[str, list[str]]:
        schema = self.schemas.get(role)
        if schema is None:
            raise KeyError(f"No profile rules for role {role!r}")
        try:
            schema.model_validate(dict(payload))
        except ValidationError as exc:
            violations: dict[str, list[str]] = {}
            for error in exc.errors():
                path = ".".join(str(part) for part in error["loc"]) or "__root__"
                violations.setdefault(path, []).append(error["msg"])
            return violations
        return {}


__all__ = ["ValidationRuleSet", "SchemaRuleSet"]
