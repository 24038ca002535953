"""Pydantic schemas for posts and replies mirrored from the API."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    """Accepts the API's camelCase keys and the snake_case attribute names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Author(_WireModel):
    id: str
    first_name: str = ""
    last_name: str = ""
    role: str | None = None
    profile_picture: str | None = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Post(_WireModel):
    """A question posted to the forum, as seen by the current viewer."""

    id: str
    author: Author
    title: str | None = None
    body: str
    created_at: datetime
    like_count: int = Field(default=0, ge=0)
    is_liked_by_current_user: bool = False
    reply_count: int = Field(default=0, ge=0)


class Reply(_WireModel):
    id: str
    post_id: str
    author: Author
    body: str
    created_at: datetime


class PostCreate(_WireModel):
    """Payload used when asking a new question."""

    title: str | None = Field(default=None, max_length=200)
    body: str = Field(..., min_length=1)


class ReplyCreate(_WireModel):
    body: str = Field(..., min_length=1)


__all__ = ["Author", "Post", "Reply", "PostCreate", "ReplyCreate"]
