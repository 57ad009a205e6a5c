"""Media upload and library management."""

import io
import mimetypes
from typing import List, Optional, Tuple
from uuid import UUID

from loguru import logger
from PIL import Image, UnidentifiedImageError

from ..repositories.media_repository import MediaRepository
from ..core.exceptions import ResourceNotFoundError, StorageError, ValidationError
from ..config import settings
from ..database import Media, User
from ..storage import ObjectStorage, generate_storage_key


def read_image_size(body: bytes) -> Tuple[Optional[int], Optional[int]]:
    """Width and height of an image, or (None, None) if it cannot be read."""
    try:
        with Image.open(io.BytesIO(body)) as image:
            return image.width, image.height
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.error(f"Error reading image metadata: {e}")
        return None, None


class MediaService:
    """Stores uploads in object storage and keeps the media library."""

    def __init__(self, media_repo: MediaRepository, storage: ObjectStorage):
        self.media_repo = media_repo
        self.storage = storage

    async def upload(
        self,
        filename: Optional[str],
        body: bytes,
        content_type: Optional[str],
        uploader: Optional[User] = None,
        max_bytes: Optional[int] = None,
    ) -> Media:
        """
        Store an uploaded file and create its media record.

        Raises:
            ValidationError: no file, or file above the size limit
            StorageError: the storage backend rejected the file
        """
        if not filename:
            raise ValidationError("No file provided")

        limit = max_bytes if max_bytes is not None else settings.MAX_UPLOAD_BYTES
        if len(body) > limit:
            raise ValidationError(f"File too large. Maximum size is {limit // (1024 * 1024)}MB")

        mime_type = (
            content_type
            or mimetypes.guess_type(filename)[0]
            or "application/octet-stream"
        )

        width = height = None
        if mime_type.startswith("image/"):
            width, height = read_image_size(body)

        key = generate_storage_key(filename)
        url = await self.storage.put(key, body, mime_type)

        media = await self.media_repo.create(
            filename=key.rsplit("/", 1)[-1],
            original_name=filename,
            storage_key=key,
            url=url,
            size=len(body),
            mime_type=mime_type,
            width=width,
            height=height,
            uploaded_by=uploader.id if uploader is not None else None,
        )
        await self.media_repo.commit()
        logger.info(f"Uploaded {filename} as {key} ({len(body)} bytes)")
        return media

    async def list_media(
        self,
        page: int = 1,
        limit: int = 20,
        search: Optional[str] = None,
        mime_type: Optional[str] = None,
    ) -> Tuple[List[Media], int]:
        return await self.media_repo.list_media(
            page=page, limit=limit, search=search, mime_type=mime_type
        )

    async def get_media(self, media_id: UUID) -> Media:
        media = await self.media_repo.get(media_id)
        if not media:
            raise ResourceNotFoundError("Media")
        return media

    async def delete_media(self, media_id: UUID) -> Media:
        """Delete the stored object, then the record.

        A storage failure is logged and does not stop the record deletion.
        """
        media = await self.get_media(media_id)

        try:
            await self.storage.delete(media.storage_key)
        except StorageError as e:
            logger.error(f"Error deleting {media.storage_key} from storage: {e.message}")

        await self.media_repo.delete(media.id)
        await self.media_repo.commit()
        return media
