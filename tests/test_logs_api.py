"""
Activity audit log tests.
Run with: pytest tests/test_logs_api.py -v
"""

import time

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


async def fetch_logs(auth_client, **params):
    response = await auth_client.get("/api/logs", params=params)
    assert response.status_code == 200, response.text
    return response.json()


def actions(body):
    return [entry["action"] for entry in body["data"]]


class TestAuthActivity:
    """Authentication events."""

    async def test_register_and_login_recorded(self, auth_client):
        body = await fetch_logs(auth_client)

        assert actions(body) == ["LOGIN_SUCCESS", "REGISTER_USER"]
        login, register = body["data"]
        assert login["email"] == ADMIN_EMAIL
        assert login["user_id"] == auth_client.user["id"]
        assert login["resource"] == "auth"
        assert login["status_code"] == 200
        assert register["resource"] == "user"
        assert register["details"]["role"] == "super-admin"

    async def test_failed_login_recorded(self, auth_client):
        await auth_client.client.post(
            "/api/auth/login", json={"email": ADMIN_EMAIL, "password": "not-the-password"}
        )

        entry = (await fetch_logs(auth_client, action="LOGIN_FAILED"))["data"][0]
        assert entry["status_code"] == 401
        assert entry["email"] == ADMIN_EMAIL
        assert entry["details"] == {"email": ADMIN_EMAIL, "reason": "Invalid password"}

    async def test_unknown_user_reason(self, auth_client):
        await auth_client.client.post(
            "/api/auth/login", json={"email": "ghost@example.com", "password": ADMIN_PASSWORD}
        )

        entry = (await fetch_logs(auth_client, action="LOGIN_FAILED"))["data"][0]
        assert entry["details"]["reason"] == "User not found"
        assert entry["user_id"] is None

    async def test_refresh_never_recorded(self, auth_client):
        response = await auth_client.client.post("/api/auth/refresh")
        assert response.status_code == 200

        body = await fetch_logs(auth_client, search="/api/auth/refresh")
        assert body["data"] == []

    async def test_logout_recorded(self, auth_client):
        await auth_client.post("/api/auth/logout")

        body = await fetch_logs(auth_client, action="LOGOUT")
        assert body["data"][0]["email"] == ADMIN_EMAIL

    async def test_access_denied_recorded(self, auth_client):
        response = await auth_client.client.post(
            "/api/content/blogs",
            json={"title": "Sneaky"},
            headers={"Authorization": "Bearer forged"},
        )
        assert response.status_code == 401

        entry = (await fetch_logs(auth_client, action="ACCESS_DENIED"))["data"][0]
        assert entry["resource"] == "content"
        assert entry["path"] == "/api/content/blogs"
        assert entry["user_id"] is None


class TestChangeActivity:
    """Content, media and settings changes."""

    async def test_content_lifecycle(self, auth_client):
        created = (
            await auth_client.post("/api/content/blogs", json={"title": "Audit me"})
        ).json()["data"]
        await auth_client.put(f"/api/content/blogs/{created['id']}", json={"title": "Audited"})
        await auth_client.delete(f"/api/content/blogs/{created['id']}")

        body = await fetch_logs(auth_client, resource="content")
        assert actions(body) == ["DELETE_CONTENT", "UPDATE_CONTENT", "CREATE_CONTENT"]

        delete, update, create = body["data"]
        assert {e["resource_id"] for e in body["data"]} == {created["id"]}
        assert create["method"] == "POST"
        assert create["details"]["title"] == "Audit me"
        assert create["details"]["content_type"] == "blogs"
        assert update["details"]["updated_fields"] == ["title"]
        assert update["details"]["slug"] == "audited"
        assert delete["details"]["title"] == "Audited"
        assert create["duration"] is not None

    async def test_reads_not_recorded(self, auth_client):
        await auth_client.get("/api/content/blogs")
        await auth_client.get("/api/media")

        body = await fetch_logs(auth_client)
        assert all(entry["method"] != "GET" for entry in body["data"])

    async def test_failed_change_recorded_with_status(self, auth_client):
        response = await auth_client.post("/api/content/blogs", json={})
        assert response.status_code == 400

        body = await fetch_logs(auth_client, resource="content")
        assert body["data"][0]["action"] == "CREATE_CONTENT"
        assert body["data"][0]["status_code"] == 400

    async def test_media_recorded(self, auth_client, png_bytes):
        uploaded = (
            await auth_client.post(
                "/api/media/upload", files={"file": ("logo.png", png_bytes, "image/png")}
            )
        ).json()["data"]
        await auth_client.delete(f"/api/media/{uploaded['id']}")

        body = await fetch_logs(auth_client, resource="media")
        assert actions(body) == ["DELETE_MEDIA", "UPLOAD_MEDIA"]
        assert body["data"][1]["details"]["filename"] == "logo.png"
        assert body["data"][0]["details"]["storage_key"].startswith("uploads/")

    async def test_settings_recorded(self, auth_client):
        await auth_client.post("/api/settings", json={"key": "site_name", "value": "Acme"})

        entry = (await fetch_logs(auth_client, action="UPDATE_SETTINGS"))["data"][0]
        assert entry["resource"] == "settings"
        assert entry["resource_id"] == "site_name"

    async def test_entry_written_without_lock_wait(self, auth_client):
        started = time.perf_counter()
        response = await auth_client.post("/api/settings", json={"key": "site_name", "value": "Acme"})
        elapsed = time.perf_counter() - started

        assert response.status_code == 200
        # A writer blocked on the request transaction would wait out the 5 s busy timeout
        assert elapsed < 2
        body = await fetch_logs(auth_client, action="UPDATE_SETTINGS")
        assert body["pagination"]["total"] == 1

    async def test_client_address_and_agent(self, auth_client):
        await auth_client.post(
            "/api/settings",
            json={"key": "site_name", "value": "Acme"},
            headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1", "User-Agent": "audit-test"},
        )

        entry = (await fetch_logs(auth_client, action="UPDATE_SETTINGS"))["data"][0]
        assert entry["ip_address"] == "203.0.113.9"
        assert entry["user_agent"] == "audit-test"


class TestLogQueries:
    """Filtering and pagination of the log listing."""

    async def test_pagination(self, auth_client):
        for i in range(3):
            await auth_client.post("/api/settings", json={"key": f"k{i}", "value": i})

        body = await fetch_logs(auth_client, limit=2, page=2)
        assert body["pagination"] == {"page": 2, "limit": 2, "total": 5, "total_pages": 3}
        assert len(body["data"]) == 2

    async def test_default_limit(self, auth_client):
        body = await fetch_logs(auth_client)
        assert body["pagination"]["limit"] == 50

    async def test_search_matches_path(self, auth_client):
        await auth_client.post("/api/content/team", json={"title": "Ann"})
        await auth_client.post("/api/content/blogs", json={"title": "Post"})

        body = await fetch_logs(auth_client, search="/content/team")
        assert [e["path"] for e in body["data"]] == ["/api/content/team"]

    async def test_filter_by_user(self, auth_client):
        await auth_client.client.post(
            "/api/auth/register", json={"email": "other@example.com", "password": "testpassword123"}
        )

        body = await fetch_logs(auth_client, user_id=auth_client.user["id"])
        assert all(e["user_id"] == auth_client.user["id"] for e in body["data"])
        assert "other@example.com" not in [e["email"] for e in body["data"]]

    async def test_date_range(self, auth_client):
        future = await fetch_logs(auth_client, start_date="2999-01-01T00:00:00Z")
        assert future["data"] == []

        past = await fetch_logs(auth_client, end_date="2000-01-01T00:00:00+00:00")
        assert past["data"] == []

        everything = await fetch_logs(
            auth_client, start_date="2000-01-01T00:00:00", end_date="2999-01-01T00:00:00"
        )
        assert everything["pagination"]["total"] == 2

    async def test_requires_auth(self, client):
        response = await client.get("/api/logs")
        assert response.status_code == 401
