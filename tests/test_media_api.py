"""
Media library endpoint tests (local storage backend).
Run with: pytest tests/test_media_api.py -v
"""

from pathlib import Path
from uuid import uuid4

from quill.config import settings

from conftest import ADMIN_EMAIL


async def upload(auth_client, name, body, content_type):
    return await auth_client.post(
        "/api/media/upload", files={"file": (name, body, content_type)}
    )


class TestUpload:
    """Upload endpoint tests."""

    async def test_upload_image(self, auth_client, png_bytes):
        response = await upload(auth_client, "Team Photo.png", png_bytes, "image/png")

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "File uploaded successfully"
        data = body["data"]
        assert data["width"] == 3
        assert data["height"] == 2
        assert data["size"] == len(png_bytes)
        assert data["mime_type"] == "image/png"
        assert data["filename"].endswith("-team-photo.png")
        assert data["url"].startswith(settings.MEDIA_URL_PREFIX + "/")

    async def test_file_is_stored_and_served(self, auth_client, png_bytes):
        data = (await upload(auth_client, "logo.png", png_bytes, "image/png")).json()["data"]

        media = (await auth_client.get(f"/api/media/{data['id']}")).json()["data"]
        stored = Path(settings.MEDIA_ROOT) / media["storage_key"]
        assert stored.read_bytes() == png_bytes

        served = await auth_client.client.get(data["url"])
        assert served.status_code == 200
        assert served.content == png_bytes

    async def test_upload_document(self, auth_client):
        response = await upload(auth_client, "brochure.pdf", b"%PDF-1.4 test", "application/pdf")

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["mime_type"] == "application/pdf"
        assert data["width"] is None
        assert data["height"] is None

    async def test_unreadable_image_still_uploaded(self, auth_client):
        response = await upload(auth_client, "broken.png", b"not really a png", "image/png")

        assert response.status_code == 201
        assert response.json()["data"]["width"] is None

    async def test_no_file(self, auth_client):
        response = await auth_client.post("/api/media/upload", data={"note": "nothing"})
        assert response.status_code == 400
        assert response.json()["error"] == "No file provided"

    async def test_file_too_large(self, auth_client, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 1024 * 1024)

        response = await upload(
            auth_client, "big.bin", b"x" * (1024 * 1024 + 1), "application/octet-stream"
        )
        assert response.status_code == 400
        assert response.json()["error"] == "File too large. Maximum size is 1MB"

    async def test_requires_auth(self, client, png_bytes):
        response = await client.post(
            "/api/media/upload", files={"file": ("a.png", png_bytes, "image/png")}
        )
        assert response.status_code == 401


class TestMediaLibrary:
    """Listing, lookup and deletion."""

    async def test_list_newest_first(self, auth_client, png_bytes):
        await upload(auth_client, "first.png", png_bytes, "image/png")
        await upload(auth_client, "second.pdf", b"%PDF", "application/pdf")

        response = await auth_client.get("/api/media")
        assert response.status_code == 200
        body = response.json()
        assert [m["original_name"] for m in body["data"]] == ["second.pdf", "first.png"]
        assert body["pagination"]["total"] == 2
        assert body["data"][0]["uploader"]["email"] == ADMIN_EMAIL

    async def test_filter_by_mime_prefix(self, auth_client, png_bytes):
        await upload(auth_client, "first.png", png_bytes, "image/png")
        await upload(auth_client, "second.pdf", b"%PDF", "application/pdf")

        response = await auth_client.get("/api/media", params={"mime_type": "image/"})
        assert [m["original_name"] for m in response.json()["data"]] == ["first.png"]

    async def test_search(self, auth_client, png_bytes):
        await upload(auth_client, "office-front.png", png_bytes, "image/png")
        await upload(auth_client, "warehouse.png", png_bytes, "image/png")

        response = await auth_client.get("/api/media", params={"search": "office"})
        assert [m["original_name"] for m in response.json()["data"]] == ["office-front.png"]

    async def test_get_missing(self, auth_client):
        response = await auth_client.get(f"/api/media/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["error"] == "Media not found"

    async def test_delete(self, auth_client, png_bytes):
        data = (await upload(auth_client, "gone.png", png_bytes, "image/png")).json()["data"]
        media = (await auth_client.get(f"/api/media/{data['id']}")).json()["data"]
        stored = Path(settings.MEDIA_ROOT) / media["storage_key"]
        assert stored.exists()

        response = await auth_client.delete(f"/api/media/{data['id']}")
        assert response.status_code == 200
        assert not stored.exists()

        response = await auth_client.get(f"/api/media/{data['id']}")
        assert response.status_code == 404

    async def test_delete_when_file_already_gone(self, auth_client, png_bytes):
        data = (await upload(auth_client, "gone.png", png_bytes, "image/png")).json()["data"]
        media = (await auth_client.get(f"/api/media/{data['id']}")).json()["data"]
        (Path(settings.MEDIA_ROOT) / media["storage_key"]).unlink()

        response = await auth_client.delete(f"/api/media/{data['id']}")
        assert response.status_code == 200
