"""Object storage backends for uploaded media.

Two backends are available:
- ``S3Storage``: AWS S3 (or any S3-compatible endpoint) via boto3.
- ``LocalStorage``: files under ``MEDIA_ROOT``, served by the app at
  ``MEDIA_URL_PREFIX``. Used for development and tests.
"""

import asyncio
import secrets
import time
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger
from slugify import slugify

from .config import settings
from .core.exceptions import StorageError


def generate_storage_key(filename: str, now: Optional[datetime] = None) -> str:
    """
    Build a unique object key for an uploaded file.

    Format: ``uploads/<yyyy>/<mm>/<ms>-<random>-<slugified-stem><ext>``
    """
    now = now or datetime.now(timezone.utc)
    name = PurePosixPath(filename.replace("\\", "/")).name
    suffix = PurePosixPath(name).suffix.lower()
    stem = slugify(PurePosixPath(name).stem) or "file"
    millis = int(time.time() * 1000)
    token = secrets.token_hex(4)
    return f"uploads/{now:%Y}/{now:%m}/{millis}-{token}-{stem}{suffix}"


class ObjectStorage:
    """Interface of a storage backend."""

    name = "base"

    async def put(self, key: str, body: bytes, content_type: str) -> str:
        """Store ``body`` under ``key`` and return its public URL."""
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        """Remove the object stored under ``key``."""
        raise NotImplementedError


class LocalStorage(ObjectStorage):
    """Filesystem-backed storage."""

    name = "local"

    def __init__(self, root: str, url_prefix: str = "/media"):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def _path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise StorageError("resolve", key, "key escapes storage root")
        return path

    async def put(self, key: str, body: bytes, content_type: str) -> str:
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(path.write_bytes, body)
        except OSError as e:
            raise StorageError("put", key, str(e)) from e
        return f"{self.url_prefix}/{key}"

    async def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError:
            logger.warning(f"Local media file already gone: {key}")
        except OSError as e:
            raise StorageError("delete", key, str(e)) from e


class S3Storage(ObjectStorage):
    """S3-backed storage."""

    name = "s3"

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        public_url: Optional[str] = None,
        client=None,
    ):
        self.bucket = bucket
        self.region = region
        self.public_url = public_url.rstrip("/") if public_url else None
        self._client = client or boto3.client(
            "s3", region_name=region, endpoint_url=endpoint_url
        )

    def url_for(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def put(self, key: str, body: bytes, content_type: str) -> str:
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError("put", key, str(e)) from e
        return self.url_for(key)

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(
                self._client.delete_object, Bucket=self.bucket, Key=key
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError("delete", key, str(e)) from e


@lru_cache(maxsize=1)
def get_storage() -> ObjectStorage:
    """Storage backend selected by ``STORAGE_BACKEND``."""
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "s3":
        logger.info(f"Using S3 media storage (bucket={settings.S3_BUCKET})")
        return S3Storage(
            bucket=settings.S3_BUCKET,
            region=settings.S3_REGION,
            endpoint_url=settings.S3_ENDPOINT_URL,
            public_url=settings.S3_PUBLIC_URL,
        )
    if backend == "local":
        logger.info(f"Using local media storage at {settings.MEDIA_ROOT}")
        return LocalStorage(settings.MEDIA_ROOT, settings.MEDIA_URL_PREFIX)
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND}")
