"""
Authentication endpoint tests: registration, login, cookies, token rotation.
Run with: pytest tests/test_auth_flow.py -v
"""

import asyncio

from quill.config import settings

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, register_and_login


def _cleared_cookies(response):
    return [h for h in response.headers.get_list("set-cookie") if "Max-Age=0" in h]


class TestHealth:
    """Health check endpoint tests."""

    async def test_health_check(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] is True
        assert "version" in data


class TestRegister:
    """Registration endpoint tests."""

    async def test_register_user(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "Editor@Example.com", "password": "testpassword123"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["email"] == "editor@example.com"
        assert body["data"]["role"] == "admin"
        assert "password_hash" not in body["data"]

    async def test_register_super_admin(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "root@example.com", "password": "testpassword123", "role": "super-admin"},
        )
        assert response.status_code == 201
        assert response.json()["data"]["role"] == "super-admin"

    async def test_register_duplicate_email(self, client):
        body = {"email": "dup@example.com", "password": "testpassword123"}
        assert (await client.post("/api/auth/register", json=body)).status_code == 201

        response = await client.post("/api/auth/register", json=body)
        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "error": "User already exists with this email",
        }

    async def test_register_short_password(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "short@example.com", "password": "short"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Password must be at least 8 characters long"

    async def test_register_missing_fields(self, client):
        response = await client.post("/api/auth/register", json={"email": "x@example.com"})
        assert response.status_code == 400
        assert response.json()["error"] == "Email and password are required"

    async def test_register_invalid_email(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "not-an-email", "password": "testpassword123"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        assert body["details"]

    async def test_register_unknown_role(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "r@example.com", "password": "testpassword123", "role": "owner"},
        )
        assert response.status_code == 400


class TestRegistrationPolicy:
    """Registration when public sign-up is switched off."""

    async def test_anonymous_rejected(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ALLOW_PUBLIC_REGISTRATION", False)
        response = await client.post(
            "/api/auth/register",
            json={"email": "new@example.com", "password": "testpassword123"},
        )
        assert response.status_code == 401

    async def test_admin_rejected(self, client, monkeypatch):
        data = await register_and_login(client, "plain@example.com", "testpassword123")
        monkeypatch.setattr(settings, "ALLOW_PUBLIC_REGISTRATION", False)

        response = await client.post(
            "/api/auth/register",
            json={"email": "new@example.com", "password": "testpassword123"},
            headers={"Authorization": f"Bearer {data['access_token']}"},
        )
        assert response.status_code == 403

    async def test_super_admin_allowed(self, auth_client, monkeypatch):
        monkeypatch.setattr(settings, "ALLOW_PUBLIC_REGISTRATION", False)

        response = await auth_client.post(
            "/api/auth/register",
            json={"email": "new@example.com", "password": "testpassword123"},
        )
        assert response.status_code == 201


class TestLogin:
    """Login endpoint tests."""

    async def test_login_user(self, client):
        data = await register_and_login(client)

        assert data["access_token"]
        assert data["refresh_token"]
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == ADMIN_EMAIL
        assert data["user"]["last_login"] is not None

    async def test_login_sets_cookies(self, client):
        await client.post(
            "/api/auth/register", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
        )
        response = await client.post(
            "/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
        )
        assert response.status_code == 200
        assert response.cookies.get("accessToken") == response.json()["data"]["access_token"]
        assert response.cookies.get("refreshToken") == response.json()["data"]["refresh_token"]

        set_cookie = " ".join(response.headers.get_list("set-cookie")).lower()
        assert "httponly" in set_cookie
        assert "samesite=lax" in set_cookie

    async def test_login_wrong_password(self, client):
        await register_and_login(client)
        response = await client.post(
            "/api/auth/login", json={"email": ADMIN_EMAIL, "password": "wrongpassword"}
        )
        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid credentials"}

    async def test_login_unknown_email(self, client):
        response = await client.post(
            "/api/auth/login", json={"email": "ghost@example.com", "password": "whatever123"}
        )
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"

    async def test_login_missing_fields(self, client):
        response = await client.post("/api/auth/login", json={"email": ADMIN_EMAIL})
        assert response.status_code == 400
        assert response.json()["error"] == "Email and password are required"


class TestSession:
    """Access token resolution, /me, refresh and logout."""

    async def test_me_with_cookie(self, client):
        await register_and_login(client)

        response = await client.get("/api/auth/me")
        assert response.status_code == 200
        assert response.json()["data"]["email"] == ADMIN_EMAIL

    async def test_me_with_bearer(self, client):
        data = await register_and_login(client)
        client.cookies.clear()

        response = await client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"}
        )
        assert response.status_code == 200
        assert response.json()["data"]["id"] == data["user"]["id"]

    async def test_header_takes_precedence_over_cookie(self, client):
        await register_and_login(client)

        response = await client.get(
            "/api/auth/me", headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == 401

    async def test_me_unauthenticated(self, client):
        response = await client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Unauthorized"}

    async def test_refresh_token_is_not_an_access_token(self, client):
        data = await register_and_login(client)
        client.cookies.clear()

        response = await client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {data['refresh_token']}"}
        )
        assert response.status_code == 401

    async def test_refresh_with_cookie(self, client):
        data = await register_and_login(client)

        response = await client.post("/api/auth/refresh")
        assert response.status_code == 200
        tokens = response.json()["data"]
        assert tokens["refresh_token"] != data["refresh_token"]
        assert response.cookies.get("refreshToken") == tokens["refresh_token"]

    async def test_refresh_with_body(self, client):
        data = await register_and_login(client)
        client.cookies.clear()

        response = await client.post(
            "/api/auth/refresh", json={"refresh_token": data["refresh_token"]}
        )
        assert response.status_code == 200
        new_access = response.json()["data"]["access_token"]

        client.cookies.clear()
        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {new_access}"})
        assert me.status_code == 200

    async def test_rotated_token_cannot_be_reused(self, client):
        data = await register_and_login(client)
        client.cookies.clear()

        first = await client.post(
            "/api/auth/refresh", json={"refresh_token": data["refresh_token"]}
        )
        assert first.status_code == 200

        client.cookies.clear()
        again = await client.post(
            "/api/auth/refresh", json={"refresh_token": data["refresh_token"]}
        )
        assert again.status_code == 401
        assert again.json()["error"] == "Invalid refresh token"

    async def test_concurrent_refresh_of_one_token(self, client):
        data = await register_and_login(client)
        client.cookies.clear()

        body = {"refresh_token": data["refresh_token"]}
        responses = await asyncio.gather(
            client.post("/api/auth/refresh", json=body),
            client.post("/api/auth/refresh", json=body),
        )

        assert sorted(r.status_code for r in responses) == [200, 401]
        rejected = next(r for r in responses if r.status_code == 401)
        assert rejected.json()["error"] == "Invalid refresh token"

    async def test_refresh_without_token(self, client):
        response = await client.post("/api/auth/refresh")
        assert response.status_code == 401
        assert response.json()["error"] == "Refresh token is required"

    async def test_refresh_with_garbage(self, client):
        response = await client.post("/api/auth/refresh", json={"refresh_token": "garbage"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid refresh token"

    async def test_logout_revokes_and_clears_cookies(self, client):
        data = await register_and_login(client)

        response = await client.post("/api/auth/logout")
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Logged out successfully"}

        cleared = _cleared_cookies(response)
        assert any(h.startswith("accessToken=") for h in cleared)
        assert any(h.startswith("refreshToken=") for h in cleared)

        client.cookies.clear()
        response = await client.post(
            "/api/auth/refresh", json={"refresh_token": data["refresh_token"]}
        )
        assert response.status_code == 401

    async def test_logout_anonymous(self, client):
        response = await client.post("/api/auth/logout")
        assert response.status_code == 200
