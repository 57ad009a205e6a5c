"""Media repository."""

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, or_, select

from .base import BaseRepository
from ..database import Media, content_media


class MediaRepository(BaseRepository[Media]):
    """Repository for Media operations."""

    async def list_media(
        self,
        page: int = 1,
        limit: int = 20,
        search: Optional[str] = None,
        mime_type: Optional[str] = None,
    ) -> Tuple[List[Media], int]:
        """Newest-first page of media with optional filename / MIME prefix filters."""
        query = select(Media)

        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(Media.filename.ilike(pattern), Media.original_name.ilike(pattern))
            )

        if mime_type:
            query = query.where(Media.mime_type.ilike(f"{mime_type}%"))

        query = query.order_by(Media.created_at.desc(), Media.id)
        return await self.paginate(query, page, limit)

    async def get_many(self, ids: List[UUID]) -> List[Media]:
        """Existing media among ``ids``, in the order given."""
        if not ids:
            return []
        result = await self.session.execute(select(Media).where(Media.id.in_(ids)))
        found = {m.id: m for m in result.scalars().all()}
        return [found[i] for i in ids if i in found]

    async def delete(self, id: UUID) -> bool:
        """Delete media and detach it from any content."""
        await self.session.execute(
            delete(content_media).where(content_media.c.media_id == id)
        )
        return await super().delete(id)
