"""Pytest configuration and shared fixtures."""

import os
import tempfile
from pathlib import Path

# Point the app at throwaway storage before anything from quill is imported
_TEST_DIR = Path(tempfile.mkdtemp(prefix="quill-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR / 'test.db'}"
os.environ["MEDIA_ROOT"] = str(_TEST_DIR / "media")
os.environ["STORAGE_BACKEND"] = "local"
os.environ["ALLOW_PUBLIC_REGISTRATION"] = "true"
os.environ["JWT_ACCESS_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from httpx import ASGITransport, AsyncClient

from quill.cache import cache_manager
from quill.database import Base, engine
from quill.server import create_app
from quill.storage import get_storage


ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"


# ============================================================================
# Database and app
# ============================================================================

@pytest.fixture
async def database():
    """Fresh schema for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    cache_manager.clear()
    get_storage.cache_clear()
    yield engine
    await engine.dispose()


@pytest.fixture
def app(database):
    return create_app()


@pytest.fixture
async def client(app):
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class AuthClient:
    """Wraps a client and sends the access token as a bearer header."""

    def __init__(self, client, token, user):
        self.client = client
        self.token = token
        self.user = user
        self.headers = {"Authorization": f"Bearer {token}"}

    async def get(self, url, **kwargs):
        kwargs.setdefault("headers", {}).update(self.headers)
        return await self.client.get(url, **kwargs)

    async def post(self, url, **kwargs):
        kwargs.setdefault("headers", {}).update(self.headers)
        return await self.client.post(url, **kwargs)

    async def put(self, url, **kwargs):
        kwargs.setdefault("headers", {}).update(self.headers)
        return await self.client.put(url, **kwargs)

    async def delete(self, url, **kwargs):
        kwargs.setdefault("headers", {}).update(self.headers)
        return await self.client.delete(url, **kwargs)


async def register_and_login(client, email=ADMIN_EMAIL, password=ADMIN_PASSWORD, role=None):
    body = {"email": email, "password": password}
    if role:
        body["role"] = role
    response = await client.post("/api/auth/register", json=body)
    assert response.status_code == 201, response.text

    response = await client.post(
        "/api/auth/login", json={"email": email, "password": password}
    )
    assert response.status_code == 200, response.text
    return response.json()["data"]


@pytest.fixture
async def auth_client(client):
    """Client authenticated as a super-admin."""
    data = await register_and_login(client, role="super-admin")
    return AuthClient(client, data["access_token"], data["user"])


# ============================================================================
# Files
# ============================================================================

@pytest.fixture
def png_bytes():
    """A 3x2 PNG image."""
    import io
    from PIL import Image

    buffer = io.BytesIO()
    Image.new("RGB", (3, 2), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()
