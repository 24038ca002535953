"""Schemas for user profiles and the role-specific update payloads."""
from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Role = Literal["student", "alumni"]


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Experience(_WireModel):
    company: str = ""
    position: str = ""
    from_: str = Field(default="", alias="from")
    to: str = ""

    @field_validator("from_", "to", mode="before")
    def coerce_year(cls, v):
        if v is None:
            return ""
        return str(v)


class Skill(_WireModel):
    name: str


class UserProfile(_WireModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    role: Role

    # Assigned by the server, never edited on the client.
    email: str | None = None
    department: str | None = None
    campus: str | None = None
    batch: str | None = None
    graduation_year: str | None = None

    first_name: str = ""
    last_name: str = ""
    phone: str | None = None
    profile_picture: str | None = None

    current_company: str | None = None
    current_position: str | None = None
    current_city: str | None = None
    current_country: str | None = None
    linkedin: str | None = Field(default=None, validation_alias=AliasChoices("linkedIn", "linkedin"))
    previous_experiences: list[Experience] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)

    @field_validator("batch", "graduation_year", mode="before")
    def coerce_cohort(cls, v):
        if v in (None, ""):
            return None
        return str(v)

    @property
    def cohort_year(self) -> str | None:
        return self.graduation_year if self.role == "alumni" else self.batch

    @property
    def is_alumni(self) -> bool:
        return self.role == "alumni"


class StudentProfileUpdate(_WireModel):
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    phone: str | None = Field(default=None, pattern=r"^$|^\+?[0-9 ()-]{7,20}$")
    profile_picture: str | None = None


class ExperienceUpdate(_WireModel):
    company: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)
    from_: str = Field(..., alias="from", pattern=r"^\d{4}$")
    to: str = Field(default="", pattern=r"^$|^\d{4}$|^[Pp]resent$")


class AlumniProfileUpdate(StudentProfileUpdate):
    current_company: str | None = Field(default=None, max_length=100)
    current_position: str | None = Field(default=None, max_length=100)
    current_city: str | None = Field(default=None, max_length=100)
    current_country: str | None = Field(default=None, max_length=100)
    linkedin: str | None = Field(default=None, pattern=r"^$|^https?://(www\.)?linkedin\.com/.+$")
    previous_experiences: list[ExperienceUpdate] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)


__all__ = [
    "Role",
    "Experience",
    "Skill",
    "UserProfile",
    "StudentProfileUpdate",
    "AlumniProfileUpdate",
    "ExperienceUpdate",
]
