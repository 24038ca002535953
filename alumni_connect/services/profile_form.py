"""Draft state for the student and alumni profile editors."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable
from uuid import uuid4

from ..clients import RequestService, RequestServiceError
from ..constants import FETCH_PROFILE_FAILED, PROFILE_UPDATED, ROLE_ALUMNI, UPDATE_PROFILE_FAILED
from ..schemas import UserProfile
from .errors import AlumniConnectError, FetchFailure, MutationFailure, ValidationFailure
from .session import SessionContext
from .validation import SchemaRuleSet, ValidationRuleSet

logger = logging.getLogger(__name__)

# attribute name -> wire name
STUDENT_FIELDS: dict[str, str] = {
    "first_name": "firstName",
    "last_name": "lastName",
    "phone": "phone",
    "profile_picture": "profilePicture",
}
ALUMNI_FIELDS: dict[str, str] = {
    **STUDENT_FIELDS,
    "current_company": "currentCompany",
    "current_position": "currentPosition",
    "current_city": "currentCity",
    "current_country": "currentCountry",
    "linkedin": "linkedin",
}
READ_ONLY_FIELDS = ("email", "department", "campus", "batch", "graduation_year")
EXPERIENCE_FIELDS = ("company", "position", "from_", "to")


def _new_key() -> str:
    return uuid4().hex


@dataclass
class ExperienceEntry:
    """One work-history row. ``key`` stays with the row when others are removed."""

    company: str = ""
    position: str = ""
    from_: str = ""
    to: str = ""
    key: str = field(default_factory=_new_key)

    def to_payload(self) -> dict[str, str]:
        return {"company": self.company, "position": self.position, "from": self.from_, "to": self.to}


def _build_payload(
    role: str,
    values: dict[str, str],
    experiences: list[dict[str, str]],
    skills: list[str],
) -> dict[str, Any]:
    fields = ALUMNI_FIELDS if role == ROLE_ALUMNI else STUDENT_FIELDS
    data: dict[str, Any] = {wire: values.get(name, "") for name, wire in fields.items()}
    if role == ROLE_ALUMNI:
        data["previousExperiences"] = list(experiences)
        data["skills"] = [{"name": name} for name in skills]
    return data


def _baseline_payload(profile: UserProfile) -> dict[str, Any]:
    fields = ALUMNI_FIELDS if profile.role == ROLE_ALUMNI else STUDENT_FIELDS
    return _build_payload(
        profile.role,
        {name: getattr(profile, name) or "" for name in fields},
        [
            {"company": item.company, "position": item.position, "from": item.from_, "to": item.to}
            for item in profile.previous_experiences
        ],
        [skill.name for skill in profile.skills],
    )


class ProfileEditForm:
    """Keeps an editable draft apart from the last profile fetched from the API.

    ``on_saved`` receives the updated profile after a successful submit so the
    caller can rebuild its :class:`SessionContext`.
    """

    def __init__(
        self,
        service: RequestService,
        session: SessionContext,
        *,
        rules: ValidationRuleSet | None = None,
        on_saved: Callable[[UserProfile], None] | None = None,
    ) -> None:
        self.service = service
        self.session = session
        self.rules = rules or SchemaRuleSet()
        self.on_saved = on_saved

        self.profile: UserProfile | None = None
        self.values: dict[str, str] = {}
        self.experiences: list[ExperienceEntry] = []
        self.skills: list[str] = []

        self.loading = False
        self.submitting = False
        self.error: AlumniConnectError | None = None
        self.success: str | None = None
        self.violations: dict[str, list[str]] = {}

    # -- loading -----------------------------------------------------------

    async def load(self) -> UserProfile | None:
        self.loading = True
        self.error = None
        try:
            profile = await self.service.fetch_user_profile()
        except RequestServiceError as exc:
            logger.warning("Profile load failed: %s", exc.message)
            self.error = FetchFailure(exc.message or FETCH_PROFILE_FAILED)
            return None
        finally:
            self.loading = False
        if profile is None:
            self.error = FetchFailure(FETCH_PROFILE_FAILED)
            return None
        self._rebase(profile)
        return profile

    def _rebase(self, profile: UserProfile) -> None:
        self.profile = profile
        fields = ALUMNI_FIELDS if profile.role == ROLE_ALUMNI else STUDENT_FIELDS
        self.values = {name: getattr(profile, name) or "" for name in fields}
        if profile.role == ROLE_ALUMNI:
            self.experiences = [
                ExperienceEntry(company=item.company, position=item.position, from_=item.from_, to=item.to)
                for item in profile.previous_experiences
            ]
            self.skills = [skill.name for skill in profile.skills]
        else:
            self.experiences = []
            self.skills = []
        self.violations = {}

    def reset(self) -> None:
        """Throw away draft edits."""
        if self.profile is not None:
            self._rebase(self.profile)

    # -- state -------------------------------------------------------------

    @property
    def loaded(self) -> bool:
        return self.profile is not None

    @property
    def role(self) -> str:
        return self.profile.role if self.profile is not None else self.session.role

    @property
    def is_alumni(self) -> bool:
        return self.role == ROLE_ALUMNI

    @property
    def editable_fields(self) -> tuple[str, ...]:
        return tuple(ALUMNI_FIELDS if self.is_alumni else STUDENT_FIELDS)

    @property
    def read_only(self) -> dict[str, Any]:
        if self.profile is None:
            return {}
        values = {name: getattr(self.profile, name) for name in READ_ONLY_FIELDS}
        values["cohort_year"] = self.profile.cohort_year
        return values

    @property
    def experience_keys(self) -> list[str]:
        return [entry.key for entry in self.experiences]

    @property
    def dirty(self) -> bool:
        if self.profile is None:
            return False
        return _baseline_payload(self.profile) != self.payload()

    @property
    def can_submit(self) -> bool:
        return self.loaded and self.dirty and not self.submitting

    @property
    def error_message(self) -> str | None:
        return self.error.message if self.error is not None else None

    # -- editing -----------------------------------------------------------

    def get_field(self, name: str) -> str:
        return self.values[name]

    def set_field(self, name: str, value: str | None) -> None:
        if name in READ_ONLY_FIELDS:
            raise ValueError(f"{name} is assigned by the server and cannot be edited")
        if name not in self.editable_fields:
            raise KeyError(name)
        self.values[name] = value or ""

    def _require_alumni(self) -> None:
        if not self.is_alumni:
            raise ValueError("Work history and skills are only editable on alumni profiles")

    def append_experience(self) -> ExperienceEntry:
        self._require_alumni()
        entry = ExperienceEntry()
        self.experiences.append(entry)
        return entry

    def remove_experience(self, index: int) -> ExperienceEntry:
        self._require_alumni()
        return self.experiences.pop(index)

    def update_experience(self, index: int, **fields: str) -> ExperienceEntry:
        self._require_alumni()
        unknown = set(fields) - set(EXPERIENCE_FIELDS)
        if unknown:
            raise KeyError(", ".join(sorted(unknown)))
        entry = self.experiences[index]
        for name, value in fields.items():
            setattr(entry, name, value or "")
        return entry

    def add_skill(self, name: str) -> bool:
        """Add a skill tag; blank names and exact duplicates are refused."""

        self._require_alumni()
        cleaned = (name or "").strip()
        if not cleaned or cleaned in self.skills:
            return False
        self.skills.append(cleaned)
        return True

    def remove_skill(self, index: int) -> str:
        self._require_alumni()
        return self.skills.pop(index)

    # -- submission --------------------------------------------------------

    def payload(self) -> dict[str, Any]:
        return _build_payload(self.role, self.values, [entry.to_payload() for entry in self.experiences], self.skills)

    async def submit(self) -> UserProfile | None:
        if not self.can_submit:
            return None
        self.error = None
        self.success = None

        payload = self.payload()
        self.violations = self.rules.validate(self.role, payload)
        if self.violations:
            self.error = ValidationFailure(self.violations)
            return None

        self.submitting = True
        try:
            profile = await self.service.update_user_profile(payload)
        except RequestServiceError as exc:
            logger.warning("Profile update failed: %s", exc.message)
            self.error = MutationFailure(exc.message or UPDATE_PROFILE_FAILED, status_code=exc.status_code)
            return None
        finally:
            self.submitting = False

        self._rebase(profile)
        self.success = PROFILE_UPDATED
        if self.on_saved is not None:
            self.on_saved(profile)
        return profile


__all__ = ["ProfileEditForm", "ExperienceEntry", "STUDENT_FIELDS", "ALUMNI_FIELDS", "READ_ONLY_FIELDS"]
