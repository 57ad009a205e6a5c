"""Unit tests for storage keys and backends."""

import re
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from quill.core.exceptions import StorageError
from quill.storage import LocalStorage, S3Storage, generate_storage_key

KEY_PATTERN = re.compile(r"^uploads/2024/03/\d{13}-[0-9a-f]{8}-[a-z0-9-]+\.[a-z0-9]+$")


class TestStorageKey:

    def test_format(self):
        key = generate_storage_key("Team Photo.JPG", now=datetime(2024, 3, 5, tzinfo=timezone.utc))

        assert KEY_PATTERN.match(key), key
        assert key.endswith("-team-photo.jpg")

    def test_strips_directories(self):
        key = generate_storage_key("../../etc/passwd.txt", now=datetime(2024, 3, 1))
        assert ".." not in key
        assert key.endswith("-passwd.txt")

    def test_unique(self):
        assert generate_storage_key("a.png") != generate_storage_key("a.png")

    def test_fallback_stem(self):
        assert generate_storage_key("???.png").endswith("-file.png")


class TestLocalStorage:

    async def test_put_and_delete(self, tmp_path):
        storage = LocalStorage(str(tmp_path), "/media/")

        url = await storage.put("uploads/2024/01/x.txt", b"hello", "text/plain")

        assert url == "/media/uploads/2024/01/x.txt"
        assert (tmp_path / "uploads/2024/01/x.txt").read_bytes() == b"hello"

        await storage.delete("uploads/2024/01/x.txt")
        assert not (tmp_path / "uploads/2024/01/x.txt").exists()

    async def test_delete_missing_is_ignored(self, tmp_path):
        storage = LocalStorage(str(tmp_path))
        await storage.delete("uploads/nothing.txt")

    async def test_key_cannot_escape_root(self, tmp_path):
        storage = LocalStorage(str(tmp_path / "media"))
        with pytest.raises(StorageError):
            await storage.put("../outside.txt", b"x", "text/plain")


class TestS3Storage:

    def test_default_url(self):
        storage = S3Storage("bucket", region="eu-west-1", client=Mock())
        assert storage.url_for("uploads/a.png") == "https://bucket.s3.eu-west-1.amazonaws.com/uploads/a.png"

    def test_public_url(self):
        storage = S3Storage("bucket", public_url="https://cdn.example.com/", client=Mock())
        assert storage.url_for("uploads/a.png") == "https://cdn.example.com/uploads/a.png"

    async def test_put(self):
        client = Mock()
        storage = S3Storage("bucket", client=client)

        url = await storage.put("uploads/a.png", b"data", "image/png")

        client.put_object.assert_called_once_with(
            Bucket="bucket", Key="uploads/a.png", Body=b"data", ContentType="image/png"
        )
        assert url.endswith("/uploads/a.png")

    async def test_delete(self):
        client = Mock()
        storage = S3Storage("bucket", client=client)

        await storage.delete("uploads/a.png")

        client.delete_object.assert_called_once_with(Bucket="bucket", Key="uploads/a.png")

    async def test_client_error_becomes_storage_error(self):
        client = Mock()
        client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )
        storage = S3Storage("bucket", client=client)

        with pytest.raises(StorageError) as exc_info:
            await storage.put("uploads/a.png", b"data", "image/png")

        assert exc_info.value.operation == "put"
        assert exc_info.value.status_code == 500
