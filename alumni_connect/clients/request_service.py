"""Async API client consumed by the views and the mutation executor."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

import httpx
from pydantic import ValidationError

from ..config import get_settings
from ..schemas import Post, PostCreate, Reply, ReplyCreate, UserProfile

logger = logging.getLogger(__name__)


class RequestServiceError(RuntimeError):
    """Raised when an API call fails; ``message`` is safe to show to users."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RequestService(Protocol):
    async def fetch_posts(self) -> list[Post]: ...

    async def fetch_post(self, post_id: str) -> Post | None: ...

    async def fetch_replies(self, post_id: str) -> list[Reply]: ...

    async def fetch_user_posts(self, user_id: str) -> list[Post]: ...

    async def fetch_user_replies(self, user_id: str) -> list[Reply]: ...

    async def create_post(self, draft: PostCreate) -> Post: ...

    async def create_reply(self, post_id: str, draft: ReplyCreate) -> Reply: ...

    async def like_post(self, post_id: str) -> None: ...

    async def unlike_post(self, post_id: str) -> None: ...

    async def delete_post(self, post_id: str) -> None: ...

    async def delete_reply(self, reply_id: str) -> None: ...

    async def fetch_user_profile(self, user_id: str | None = None) -> UserProfile | None: ...

    async def update_user_profile(self, draft: Mapping[str, Any]) -> UserProfile: ...


def _unwrap(payload: Any, *keys: str) -> Any:
    if isinstance(payload, dict):
        for key in keys:
            if key in payload:
                return payload[key]
    return payload


def _error_message(response: httpx.Response) -> str:
    detail = f"HTTP {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        text = (response.text or "").strip()
        return f"{detail}: {text[:200]}" if text else detail
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return detail


class HttpRequestService:
    """REST implementation backed by :class:`httpx.AsyncClient`.

    A shared client may be injected (tests pass one bound to a stub ASGI
    app); otherwise a short-lived client is opened per call.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = token if token is not None else settings.api_token
        self.timeout = float(timeout or settings.request_timeout)
        self._client = client

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _send(self, method: str, path: str, *, json: Any = None) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            if self._client is not None:
                return await self._client.request(method, url, json=json, headers=self._headers())
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await client.request(method, url, json=json, headers=self._headers())
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise RequestServiceError("Unable to reach the server. Check your connection.") from exc

    async def _request(self, method: str, path: str, *, json: Any = None, allow_missing: bool = False) -> Any:
        response = await self._send(method, path, json=json)
        if allow_missing and response.status_code == 404:
            return None
        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("%s %s returned %s: %s", method, path, response.status_code, message)
            raise RequestServiceError(message, status_code=response.status_code)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RequestServiceError("The server returned an invalid response") from exc

    def _parse(self, model, payload: Any):
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Unexpected %s payload: %s", model.__name__, exc)
            raise RequestServiceError("The server returned an invalid response") from exc

    def _parse_many(self, model, payload: Any) -> list:
        if not isinstance(payload, list):
            raise RequestServiceError("The server returned an invalid response")
        return [self._parse(model, item) for item in payload]

    async def fetch_posts(self) -> list[Post]:
        data = await self._request("GET", "/posts")
        return self._parse_many(Post, _unwrap(data, "posts", "items", "data"))

    async def fetch_post(self, post_id: str) -> Post | None:
        data = await self._request("GET", f"/posts/{post_id}", allow_missing=True)
        if data is None:
            return None
        return self._parse(Post, _unwrap(data, "post", "data"))

    async def fetch_replies(self, post_id: str) -> list[Reply]:
        data = await self._request("GET", f"/posts/{post_id}/replies")
        return self._parse_many(Reply, _unwrap(data, "replies", "items", "data"))

    async def fetch_user_posts(self, user_id: str) -> list[Post]:
        data = await self._request("GET", f"/users/{user_id}/posts")
        return self._parse_many(Post, _unwrap(data, "posts", "items", "data"))

    async def fetch_user_replies(self, user_id: str) -> list[Reply]:
        data = await self._request("GET", f"/users/{user_id}/replies")
        return self._parse_many(Reply, _unwrap(data, "replies", "items", "data"))

    async def create_post(self, draft: PostCreate) -> Post:
        data = await self._request("POST", "/posts", json=draft.model_dump(by_alias=True, exclude_none=True))
        return self._parse(Post, _unwrap(data, "post", "data"))

    async def create_reply(self, post_id: str, draft: ReplyCreate) -> Reply:
        data = await self._request(
            "POST", f"/posts/{post_id}/replies", json=draft.model_dump(by_alias=True, exclude_none=True)
        )
        return self._parse(Reply, _unwrap(data, "reply", "data"))

    async def like_post(self, post_id: str) -> None:
        await self._request("POST", f"/posts/{post_id}/like")

    async def unlike_post(self, post_id: str) -> None:
        await self._request("DELETE", f"/posts/{post_id}/like")

    async def delete_post(self, post_id: str) -> None:
        await self._request("DELETE", f"/posts/{post_id}")

    async def delete_reply(self, reply_id: str) -> None:
        await self._request("DELETE", f"/replies/{reply_id}")

    async def fetch_user_profile(self, user_id: str | None = None) -> UserProfile | None:
        if user_id is None:
            data = await self._request("GET", "/users/profile")
        else:
            data = await self._request("GET", f"/users/{user_id}", allow_missing=True)
            if data is None:
                return None
        return self._parse(UserProfile, _unwrap(data, "user", "data"))

    async def update_user_profile(self, draft: Mapping[str, Any]) -> UserProfile:
        data = await self._request("PUT", "/users/profile", json=dict(draft))
        return self._parse(UserProfile, _unwrap(data, "user", "data"))


__all__ = ["RequestService", "RequestServiceError", "HttpRequestService"]
