"""Applies user mutations to a view's cache around the matching API call.

Likes are optimistic: the cache flips before the request and flips back if
it fails. Creates and deletes wait for the API. The split comes from
:data:`MUTATION_POLICIES` so it can be audited and overridden in one place.

Every public coroutine returns a :class:`MutationResult`; API failures never
escape as exceptions and never leave an optimistic patch behind.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping

from ..clients import RequestService, RequestServiceError
from ..schemas import Post, PostCreate, Reply, ReplyCreate
from .entity_cache import EntityCache
from .errors import AlumniConnectError, ConcurrentMutation, MutationFailure
from .mutation_policy import MutationKind, MutationPolicy, policy_for

logger = logging.getLogger(__name__)

_CREATE_KINDS = (MutationKind.CREATE_POST, MutationKind.CREATE_REPLY)


@dataclass(slots=True)
class MutationResult:
    kind: MutationKind
    entity_id: str | None
    ok: bool
    value: Any = None
    error: AlumniConnectError | None = None
    applied: bool = False

    @property
    def rejected(self) -> bool:
        """True when a duplicate request was turned away before reaching the API."""
        return isinstance(self.error, ConcurrentMutation)

    @property
    def message(self) -> str | None:
        return self.error.message if self.error is not None else None


class MutationExecutor:
    def __init__(
        self,
        cache: EntityCache,
        service: RequestService,
        *,
        policies: Mapping[MutationKind, MutationPolicy] | None = None,
    ) -> None:
        for kind in _CREATE_KINDS:
            if policy_for(kind, policies) is MutationPolicy.OPTIMISTIC:
                raise ValueError(f"{kind.value} needs a server-assigned id and cannot be optimistic")
        self.cache = cache
        self.service = service
        self.policies = policies
        self.closed = False

    def close(self) -> None:
        """Stop applying results; requests already sent still complete."""
        self.closed = True

    def is_busy(self, entity_id: str, kind: MutationKind) -> bool:
        return self.cache.locks.is_held(entity_id, kind.lock_kind)

    def _optimistic(self, kind: MutationKind) -> bool:
        return policy_for(kind, self.policies) is MutationPolicy.OPTIMISTIC

    def _rejected(self, kind: MutationKind, entity_id: str) -> MutationResult:
        logger.debug("Ignoring duplicate %s for %s", kind.value, entity_id)
        return MutationResult(kind, entity_id, ok=False, error=ConcurrentMutation(entity_id, kind.lock_kind))

    def _failed(self, kind: MutationKind, entity_id: str | None, exc: RequestServiceError) -> MutationResult:
        logger.warning("%s for %s failed: %s", kind.value, entity_id, exc.message)
        return MutationResult(
            kind,
            entity_id,
            ok=False,
            error=MutationFailure(exc.message, status_code=exc.status_code),
        )

    def _shift_likes(self, post_id: str, liked: bool, delta: int) -> int:
        """Set the like flag and move the counter; returns the delta actually applied."""

        post = self.cache.get(post_id)
        if post is None:
            return 0
        count = max(0, post.like_count + delta)
        self.cache.patch(post_id, is_liked_by_current_user=liked, like_count=count)
        return count - post.like_count

    async def toggle_like(self, post_id: str, currently_liked: bool | None = None) -> MutationResult:
        """Flip the like on ``post_id``.

        ``currently_liked`` is only a fallback for posts missing from the
        cache; a cached post's own flag always decides the direction.
        """

        kind = MutationKind.TOGGLE_LIKE
        if not self.cache.locks.acquire(post_id, kind.lock_kind):
            return self._rejected(kind, post_id)
        try:
            snapshot = self.cache.get(post_id)
            if snapshot is not None:
                currently_liked = snapshot.is_liked_by_current_user
            liked = not currently_liked
            optimistic = self._optimistic(kind) and not self.closed
            applied = self._shift_likes(post_id, liked, 1 if liked else -1) if optimistic else 0

            call = self.service.like_post if liked else self.service.unlike_post
            try:
                await call(post_id)
            except RequestServiceError as exc:
                if optimistic and snapshot is not None and not self.closed:
                    self._restore_likes(snapshot, applied)
                return self._failed(kind, post_id, exc)

            if self.closed:
                return MutationResult(kind, post_id, ok=True, value=liked)
            if not optimistic:
                self._shift_likes(post_id, liked, 1 if liked else -1)
            return MutationResult(kind, post_id, ok=True, value=liked, applied=True)
        finally:
            self.cache.locks.release(post_id, kind.lock_kind)

    def _restore_likes(self, snapshot: Post, applied: int) -> None:
        post = self.cache.get(snapshot.id)
        if post is None:
            return
        self.cache.patch(
            snapshot.id,
            is_liked_by_current_user=snapshot.is_liked_by_current_user,
            like_count=post.like_count - applied,
        )

    async def create_post(self, draft: PostCreate) -> MutationResult:
        kind = MutationKind.CREATE_POST
        try:
            post: Post = await self.service.create_post(draft)
        except RequestServiceError as exc:
            return self._failed(kind, None, exc)
        if self.closed:
            return MutationResult(kind, post.id, ok=True, value=post)
        self.cache.upsert(post, prepend=True)
        return MutationResult(kind, post.id, ok=True, value=post, applied=True)

    async def create_reply(self, post_id: str, draft: ReplyCreate) -> MutationResult:
        """Append the server's reply. Bumping ``reply_count`` is left to the caller."""

        kind = MutationKind.CREATE_REPLY
        try:
            reply: Reply = await self.service.create_reply(post_id, draft)
        except RequestServiceError as exc:
            return self._failed(kind, post_id, exc)
        if self.closed:
            return MutationResult(kind, reply.id, ok=True, value=reply)
        self.cache.upsert(reply)
        return MutationResult(kind, reply.id, ok=True, value=reply, applied=True)

    async def delete_post(self, post_id: str) -> MutationResult:
        return await self._delete(MutationKind.DELETE_POST, post_id, self.service.delete_post)

    async def delete_reply(self, reply_id: str) -> MutationResult:
        return await self._delete(MutationKind.DELETE_REPLY, reply_id, self.service.delete_reply)

    async def _delete(
        self,
        kind: MutationKind,
        entity_id: str,
        call: Callable[[str], Awaitable[None]],
    ) -> MutationResult:
        if not self.cache.locks.acquire(entity_id, kind.lock_kind):
            return self._rejected(kind, entity_id)
        try:
            optimistic = self._optimistic(kind) and not self.closed
            position = self.cache.ids().index(entity_id) if entity_id in self.cache else None
            removed = self.cache.remove(entity_id) if optimistic else None
            try:
                await call(entity_id)
            except RequestServiceError as exc:
                if removed is not None and not self.closed:
                    self.cache.insert(position, removed)
                return self._failed(kind, entity_id, exc)

            if self.closed:
                return MutationResult(kind, entity_id, ok=True, value=removed)
            if not optimistic:
                removed = self.cache.remove(entity_id)
            return MutationResult(kind, entity_id, ok=True, value=removed, applied=removed is not None)
        finally:
            self.cache.locks.release(entity_id, kind.lock_kind)


__all__ = ["MutationExecutor", "MutationResult"]
