"""View adapters: one cache, executor and delete gate per screen.

Views never share caches. Two views showing the same post can disagree until
each one fetches again; a mutation made in one view is only applied to that
view's cache.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..clients import RequestService, RequestServiceError
from ..constants import FETCH_POST_FAILED, FETCH_POSTS_FAILED, FETCH_PROFILE_FAILED, FETCH_REPLIES_FAILED
from ..schemas import Post, PostCreate, Reply, ReplyCreate, UserProfile
from .confirmation_gate import ConfirmationGate
from .entity_cache import EntityCache
from .errors import FetchFailure
from .mutation_executor import MutationExecutor, MutationResult
from .mutation_policy import MutationKind
from .session import SessionContext

logger = logging.getLogger(__name__)


def _fetch_failure(default: str, exc: RequestServiceError) -> FetchFailure:
    return FetchFailure(exc.message or default)


class PostFeedView(ABC):
    """Shared behaviour for screens that list posts the viewer can like and delete."""

    def __init__(self, service: RequestService, session: SessionContext) -> None:
        self.service = service
        self.session = session
        self.posts: EntityCache[Post] = EntityCache()
        self.executor = MutationExecutor(self.posts, service)
        self.delete_gate: ConfirmationGate[str] = ConfirmationGate(self.delete_post)
        self.loading = False
        self.error: FetchFailure | None = None
        self.mounted = False

    async def mount(self) -> None:
        if not self.mounted:
            self._open_executors()
        self.mounted = True
        await self.refresh()

    def unmount(self) -> None:
        self.mounted = False
        self.executor.close()
        self.posts.clear()

    async def refresh(self) -> None:
        """Re-fetch this view's data; stale entries stay visible if the fetch fails."""

        self.loading = True
        self.error = None
        try:
            await self._fetch()
        except FetchFailure as exc:
            if self.mounted:
                logger.warning("%s failed to load: %s", type(self).__name__, exc.message)
                self.error = exc
        finally:
            self.loading = False

    def _open_executors(self) -> None:
        # Executors closed by a previous unmount stay closed so their late results are dropped.
        if self.executor.closed:
            self.executor = MutationExecutor(self.posts, self.service)

    @abstractmethod
    async def _fetch(self) -> None:
        """Load this view's data, raising :class:`FetchFailure` on API errors."""

    @property
    def error_message(self) -> str | None:
        return self.error.message if self.error is not None else None

    def is_own_post(self, post: Post) -> bool:
        return self.session.owns(post)

    def can_like(self, post_id: str) -> bool:
        return not self.executor.is_busy(post_id, MutationKind.TOGGLE_LIKE)

    async def toggle_like(self, post_id: str, currently_liked: bool | None = None) -> MutationResult:
        return await self.executor.toggle_like(post_id, currently_liked)

    def request_delete(self, post_id: str) -> bool:
        return self.delete_gate.select(post_id)

    def cancel_delete(self) -> bool:
        return self.delete_gate.cancel()

    async def confirm_delete(self) -> MutationResult | None:
        return await self.delete_gate.confirm()

    async def delete_post(self, post_id: str) -> MutationResult:
        return await self.executor.delete_post(post_id)


class PostListView(PostFeedView):
    """The full Q&A forum list."""

    async def _fetch(self) -> None:
        try:
            posts = await self.service.fetch_posts()
        except RequestServiceError as exc:
            raise _fetch_failure(FETCH_POSTS_FAILED, exc) from exc
        if self.mounted:
            self.posts.load(posts)

    async def create_post(self, draft: PostCreate) -> MutationResult:
        return await self.executor.create_post(draft)


class DashboardView(PostFeedView):
    """The signed-in user's own posts, plus the replies sidebar for alumni."""

    def __init__(self, service: RequestService, session: SessionContext) -> None:
        super().__init__(service, session)
        self.replies: EntityCache[Reply] = EntityCache()
        self.replies_loading = False
        self.replies_error: FetchFailure | None = None

    @property
    def shows_replies(self) -> bool:
        return self.session.is_alumni

    def unmount(self) -> None:
        super().unmount()
        self.replies.clear()

    async def _fetch(self) -> None:
        try:
            posts = await self.service.fetch_user_posts(self.session.user_id)
        except RequestServiceError as exc:
            raise _fetch_failure(FETCH_POSTS_FAILED, exc) from exc
        if not self.mounted:
            return
        self.posts.load(posts)
        if self.shows_replies:
            await self._fetch_replies()

    async def _fetch_replies(self) -> None:
        self.replies_loading = True
        self.replies_error = None
        try:
            replies = await self.service.fetch_user_replies(self.session.user_id)
        except RequestServiceError as exc:
            if self.mounted:
                self.replies_error = _fetch_failure(FETCH_REPLIES_FAILED, exc)
            return
        finally:
            self.replies_loading = False
        if self.mounted:
            self.replies.load(replies)

    async def create_post(self, draft: PostCreate) -> MutationResult:
        return await self.executor.create_post(draft)


class PostThreadView(PostFeedView):
    """A single post with its replies."""

    def __init__(self, service: RequestService, session: SessionContext, post_id: str) -> None:
        super().__init__(service, session)
        self.post_id = post_id
        self.replies: EntityCache[Reply] = EntityCache()
        self.reply_executor = MutationExecutor(self.replies, service)
        self.reply_delete_gate: ConfirmationGate[str] = ConfirmationGate(self.delete_reply)
        self.replies_loading = False
        self.replies_error: FetchFailure | None = None
        self.post_deleted = False

    def _open_executors(self) -> None:
        super()._open_executors()
        if self.reply_executor.closed:
            self.reply_executor = MutationExecutor(self.replies, self.service)

    @property
    def post(self) -> Post | None:
        return self.posts.get(self.post_id)

    @property
    def not_found(self) -> bool:
        return self.mounted and not self.loading and self.error is None and self.post is None

    def unmount(self) -> None:
        super().unmount()
        self.reply_executor.close()
        self.replies.clear()

    async def _fetch(self) -> None:
        try:
            post = await self.service.fetch_post(self.post_id)
        except RequestServiceError as exc:
            raise _fetch_failure(FETCH_POST_FAILED, exc) from exc
        if not self.mounted:
            return
        self.posts.load([post] if post is not None else [])
        if post is None:
            self.replies.load([])
            return

        self.replies_loading = True
        self.replies_error = None
        try:
            replies = await self.service.fetch_replies(self.post_id)
        except RequestServiceError as exc:
            if self.mounted:
                self.replies_error = _fetch_failure(FETCH_REPLIES_FAILED, exc)
            return
        finally:
            self.replies_loading = False
        if self.mounted:
            self.replies.load(replies)

    async def toggle_like(self, post_id: str | None = None, currently_liked: bool | None = None) -> MutationResult:
        return await super().toggle_like(post_id or self.post_id, currently_liked)

    def request_delete(self, post_id: str | None = None) -> bool:
        return super().request_delete(post_id or self.post_id)

    async def delete_post(self, post_id: str) -> MutationResult:
        result = await super().delete_post(post_id)
        if result.ok and self.mounted:
            self.post_deleted = True
        return result

    def is_own_reply(self, reply: Reply) -> bool:
        return self.session.owns(reply)

    async def create_reply(self, draft: ReplyCreate) -> MutationResult:
        result = await self.reply_executor.create_reply(self.post_id, draft)
        if result.applied:
            self._shift_reply_count(1)
        return result

    def request_reply_delete(self, reply_id: str) -> bool:
        return self.reply_delete_gate.select(reply_id)

    def cancel_reply_delete(self) -> bool:
        return self.reply_delete_gate.cancel()

    async def confirm_reply_delete(self) -> MutationResult | None:
        return await self.reply_delete_gate.confirm()

    async def delete_reply(self, reply_id: str) -> MutationResult:
        """Delete a reply; only this view's copy of the post loses a reply."""

        result = await self.reply_executor.delete_reply(reply_id)
        if result.applied:
            self._shift_reply_count(-1)
        return result

    def _shift_reply_count(self, delta: int) -> None:
        post = self.post
        if post is not None:
            self.posts.patch(self.post_id, reply_count=max(0, post.reply_count + delta))


class ProfileFeedView(PostFeedView):
    """Another user's profile page and the posts they wrote."""

    def __init__(self, service: RequestService, session: SessionContext, user_id: str) -> None:
        super().__init__(service, session)
        self.user_id = user_id
        self.user: UserProfile | None = None
        self.posts_loading = False
        self.posts_error: FetchFailure | None = None

    @property
    def is_own_profile(self) -> bool:
        return self.user_id == self.session.user_id

    @property
    def not_found(self) -> bool:
        return self.mounted and not self.loading and self.error is None and self.user is None

    def unmount(self) -> None:
        super().unmount()
        self.user = None

    async def _fetch(self) -> None:
        try:
            user = await self.service.fetch_user_profile(self.user_id)
        except RequestServiceError as exc:
            raise _fetch_failure(FETCH_PROFILE_FAILED, exc) from exc
        if not self.mounted:
            return
        self.user = user
        if user is None:
            self.posts.load([])
            return

        self.posts_loading = True
        self.posts_error = None
        try:
            posts = await self.service.fetch_user_posts(self.user_id)
        except RequestServiceError as exc:
            if self.mounted:
                self.posts_error = _fetch_failure(FETCH_POSTS_FAILED, exc)
            return
        finally:
            self.posts_loading = False
        if self.mounted:
            self.posts.load(posts)


__all__ = ["PostFeedView", "PostListView", "DashboardView", "PostThreadView", "ProfileFeedView"]
