"""Shared fixtures: an in-memory request service and entity factories."""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

import pytest

from alumni_connect.clients import RequestServiceError
from alumni_connect.schemas import Author, Post, PostCreate, Reply, ReplyCreate, UserProfile
from alumni_connect.services import SessionContext

CREATED_AT = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


def build_author(user_id: str = "u1", role: str = "alumni") -> Author:
    return Author(id=user_id, first_name="Ayesha", last_name="Khan", role=role)


def build_post(post_id: str = "p1", *, author_id: str = "u1", like_count: int = 0, liked: bool = False, reply_count: int = 0) -> Post:
    return Post(
        id=post_id,
        author=build_author(author_id),
        title=f"Question {post_id}",
        body="How do I prepare for campus interviews?",
        created_at=CREATED_AT,
        like_count=like_count,
        is_liked_by_current_user=liked,
        reply_count=reply_count,
    )


def build_reply(reply_id: str = "r1", *, post_id: str = "p1", author_id: str = "u2") -> Reply:
    return Reply(id=reply_id, post_id=post_id, author=build_author(author_id, "student"), body="Practice mock interviews.", created_at=CREATED_AT)


class FakeRequestService:
    """In-memory stand-in for the API.

    ``hold(method)`` parks calls to ``method`` until the returned event is set;
    ``fail(method)`` makes them raise :class:`RequestServiceError`.
    """

    def __init__(self, user_id: str = "u1") -> None:
        self.user_id = user_id
        self.posts: dict[str, Post] = {}
        self.replies: dict[str, Reply] = {}
        self.profiles: dict[str, UserProfile] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.failures: dict[str, RequestServiceError] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self._counter = 0

    def add_posts(self, *posts: Post) -> None:
        for post in posts:
            self.posts[post.id] = post

    def add_replies(self, *replies: Reply) -> None:
        for reply in replies:
            self.replies[reply.id] = reply

    def fail(self, method: str, message: str = "Server error", status_code: int = 500) -> None:
        self.failures[method] = RequestServiceError(message, status_code=status_code)

    def hold(self, method: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[method] = event
        return event

    def called(self, method: str) -> list[tuple[Any, ...]]:
        return [args for name, args in self.calls if name == method]

    async def _call(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        gate = self.gates.get(method)
        if gate is not None:
            await gate.wait()
        error = self.failures.get(method)
        if error is not None:
            raise error

    def _next_id(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}-new-{self._counter}"

    async def fetch_posts(self) -> list[Post]:
        await self._call("fetch_posts")
        return list(self.posts.values())

    async def fetch_post(self, post_id: str) -> Post | None:
        await self._call("fetch_post", post_id)
        return self.posts.get(post_id)

    async def fetch_replies(self, post_id: str) -> list[Reply]:
        await self._call("fetch_replies", post_id)
        return [reply for reply in self.replies.values() if reply.post_id == post_id]

    async def fetch_user_posts(self, user_id: str) -> list[Post]:
        await self._call("fetch_user_posts", user_id)
        return [post for post in self.posts.values() if post.author.id == user_id]

    async def fetch_user_replies(self, user_id: str) -> list[Reply]:
        await self._call("fetch_user_replies", user_id)
        return [reply for reply in self.replies.values() if reply.author.id == user_id]

    async def create_post(self, draft: PostCreate) -> Post:
        await self._call("create_post", draft)
        post = Post(
            id=self._next_id("p"),
            author=build_author(self.user_id),
            title=draft.title,
            body=draft.body,
            created_at=CREATED_AT,
        )
        self.posts[post.id] = post
        return post

    async def create_reply(self, post_id: str, draft: ReplyCreate) -> Reply:
        await self._call("create_reply", post_id, draft)
        reply = Reply(id=self._next_id("r"), post_id=post_id, author=build_author(self.user_id), body=draft.body, created_at=CREATED_AT)
        self.replies[reply.id] = reply
        return reply

    async def like_post(self, post_id: str) -> None:
        await self._call("like_post", post_id)

    async def unlike_post(self, post_id: str) -> None:
        await self._call("unlike_post", post_id)

    async def delete_post(self, post_id: str) -> None:
        await self._call("delete_post", post_id)
        self.posts.pop(post_id, None)

    async def delete_reply(self, reply_id: str) -> None:
        await self._call("delete_reply", reply_id)
        self.replies.pop(reply_id, None)

    async def fetch_user_profile(self, user_id: str | None = None) -> UserProfile | None:
        await self._call("fetch_user_profile", user_id)
        return self.profiles.get(user_id or self.user_id)

    async def update_user_profile(self, draft: Mapping[str, Any]) -> UserProfile:
        await self._call("update_user_profile", dict(draft))
        current = self.profiles[self.user_id]
        merged = {**current.model_dump(by_alias=True), **dict(draft)}
        profile = UserProfile.model_validate(merged)
        self.profiles[self.user_id] = profile
        return profile


async def settle() -> None:
    """Let freshly created tasks run up to their first real suspension."""
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.fixture
def service() -> FakeRequestService:
    return FakeRequestService()


@pytest.fixture
def alumni_session() -> SessionContext:
    return SessionContext(user_id="u1", role="alumni", first_name="Ayesha", last_name="Khan")


@pytest.fixture
def student_session() -> SessionContext:
    return SessionContext(user_id="u2", role="student", first_name="Bilal", last_name="Ahmed")


@pytest.fixture
def make_post() -> Callable[..., Post]:
    return build_post


@pytest.fixture
def make_reply() -> Callable[..., Reply]:
    return build_reply


@pytest.fixture
def settle_tasks() -> Callable[[], Any]:
    return settle
