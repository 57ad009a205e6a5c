"""Async HTTP client for the Quill admin API."""

import asyncio
from typing import Any, Dict, Optional
from uuid import UUID

import httpx
from loguru import logger

# Calls that never trigger a token refresh
AUTH_PATHS = (
    "/api/auth/login",
    "/api/auth/register",
    "/api/auth/refresh",
    "/api/auth/logout",
)


class QuillClientError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status: int, info: Any = None):
        self.status = status
        self.info = info
        if isinstance(info, dict):
            message = info.get("error") or info.get("message")
        else:
            message = info
        super().__init__(f"HTTP {status}: {message}")


class QuillClient:
    """Client for the Quill API.

    Keeps the token pair in memory and sends the access token as a bearer
    header. A 401 on any non-auth call triggers one refresh followed by one
    replay of the original request.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Base URL of the Quill server
            timeout: Request timeout in seconds
            transport: Custom httpx transport (e.g. ASGITransport in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None
        self._refresh_lock = asyncio.Lock()
        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> "QuillClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    # Core request handling

    async def request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """Send a request and return the decoded response envelope.

        Raises:
            QuillClientError: the API answered with an error status
        """
        sent_with = self.access_token
        response = await self._send(method, path, **kwargs)

        if response.status_code == 401 and path not in AUTH_PATHS:
            logger.debug(f"{method} {path} returned 401, refreshing tokens")
            if await self._refresh_after(sent_with):
                response = await self._send(method, path, **kwargs)

        return self._decode(response)

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return await self._client.request(method, path, headers=headers, **kwargs)

    async def _refresh_after(self, stale_access_token: Optional[str]) -> bool:
        """Refresh once, unless a concurrent call already replaced the token."""
        async with self._refresh_lock:
            if self.access_token and self.access_token != stale_access_token:
                return True
            return await self.refresh()

    def _decode(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            payload = {"success": response.is_success, "error": response.text}

        if response.is_error:
            raise QuillClientError(response.status_code, payload)
        return payload

    def _store_tokens(self, data: Dict[str, Any]) -> None:
        self.access_token = data.get("access_token")
        self.refresh_token = data.get("refresh_token")

    # Authentication

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """Login and keep the token pair. Returns the user."""
        payload = await self.request(
            "POST", "/api/auth/login", json={"email": email, "password": password}
        )
        self._store_tokens(payload["data"])
        return payload["data"]["user"]

    async def register(self, email: str, password: str, role: Optional[str] = None) -> Dict[str, Any]:
        body = {"email": email, "password": password}
        if role:
            body["role"] = role
        payload = await self.request("POST", "/api/auth/register", json=body)
        return payload["data"]

    async def refresh(self) -> bool:
        """Rotate the refresh token. Returns False if the server refused."""
        body = {"refresh_token": self.refresh_token} if self.refresh_token else None
        try:
            payload = await self.request("POST", "/api/auth/refresh", json=body)
        except QuillClientError as e:
            logger.warning(f"Token refresh failed: {e}")
            return False
        self._store_tokens(payload["data"])
        return True

    async def logout(self) -> None:
        body = {"refresh_token": self.refresh_token} if self.refresh_token else None
        try:
            await self.request("POST", "/api/auth/logout", json=body)
        finally:
            self.access_token = None
            self.refresh_token = None
            self._client.cookies.clear()

    async def me(self) -> Dict[str, Any]:
        return (await self.request("GET", "/api/auth/me"))["data"]

    # Content

    async def list_content(self, content_type: str, **params) -> Dict[str, Any]:
        """Envelope with ``data`` and ``pagination``."""
        return await self.request("GET", f"/api/content/{content_type}", params=params)

    async def get_content(self, content_type: str, content_id: UUID) -> Dict[str, Any]:
        return (await self.request("GET", f"/api/content/{content_type}/{content_id}"))["data"]

    async def get_content_by_slug(self, content_type: str, slug: str) -> Dict[str, Any]:
        return (await self.request("GET", f"/api/content/{content_type}/slug/{slug}"))["data"]

    async def create_content(self, content_type: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return (await self.request("POST", f"/api/content/{content_type}", json=data))["data"]

    async def update_content(self, content_type: str, content_id: UUID, data: Dict[str, Any]) -> Dict[str, Any]:
        return (
            await self.request("PUT", f"/api/content/{content_type}/{content_id}", json=data)
        )["data"]

    async def delete_content(self, content_type: str, content_id: UUID) -> None:
        await self.request("DELETE", f"/api/content/{content_type}/{content_id}")

    # Media

    async def upload_media(
        self,
        filename: str,
        body: bytes,
        content_type: str = "application/octet-stream",
    ) -> Dict[str, Any]:
        payload = await self.request(
            "POST",
            "/api/media/upload",
            files={"file": (filename, body, content_type)},
        )
        return payload["data"]

    async def list_media(self, **params) -> Dict[str, Any]:
        return await self.request("GET", "/api/media", params=params)

    async def get_media(self, media_id: UUID) -> Dict[str, Any]:
        return (await self.request("GET", f"/api/media/{media_id}"))["data"]

    async def delete_media(self, media_id: UUID) -> None:
        await self.request("DELETE", f"/api/media/{media_id}")

    # Settings

    async def list_settings(self, category: Optional[str] = None) -> list:
        params = {"category": category} if category else None
        return (await self.request("GET", "/api/settings", params=params))["data"]

    async def save_setting(
        self,
        key: str,
        value: Any,
        category: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        body = {"key": key, "value": value}
        # Omitted keys keep their stored value on the server
        if category is not None:
            body["category"] = category
        if description is not None:
            body["description"] = description
        return (await self.request("POST", "/api/settings", json=body))["data"]

    # Activity logs

    async def list_logs(self, **params) -> Dict[str, Any]:
        return await self.request("GET", "/api/logs", params=params)
