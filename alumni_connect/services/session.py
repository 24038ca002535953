"""Identity of the signed-in user, passed explicitly to every view."""
from __future__ import annotations

from dataclasses import dataclass

from ..constants import ROLE_ALUMNI, ROLES
from ..schemas import Author, Post, Reply, UserProfile


@dataclass(frozen=True, slots=True)
class SessionContext:
    user_id: str
    role: str
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    profile_picture: str | None = None

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unknown role: {self.role!r}")

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "SessionContext":
        return cls(
            user_id=profile.id,
            role=profile.role,
            first_name=profile.first_name,
            last_name=profile.last_name,
            email=profile.email,
            profile_picture=profile.profile_picture,
        )

    @property
    def is_alumni(self) -> bool:
        return self.role == ROLE_ALUMNI

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def owns(self, entity: Post | Reply | Author) -> bool:
        author = entity if isinstance(entity, Author) else entity.author
        return author.id == self.user_id


__all__ = ["SessionContext"]
