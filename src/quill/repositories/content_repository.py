"""Content repository with listing and slug queries."""

from typing import Any, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import Select, or_, select

from .base import BaseRepository
from ..database import Content

# Public sort keys -> columns. camelCase aliases are accepted for old clients.
SORT_COLUMNS = {
    "created_at": Content.created_at,
    "createdAt": Content.created_at,
    "updated_at": Content.updated_at,
    "updatedAt": Content.updated_at,
    "title": Content.title,
    "slug": Content.slug,
    "status": Content.status,
}


class ContentRepository(BaseRepository[Content]):
    """Repository for Content operations."""

    async def create(self, **data) -> Content:
        instance = await super().create(**data)
        await self.session.refresh(instance, attribute_names=["media"])
        return instance

    def build_query(
        self,
        content_type: str,
        search: Optional[str] = None,
        status: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> Select:
        """Listing query for one content type."""
        query = select(Content).where(Content.content_type == content_type)

        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(Content.title.ilike(pattern), Content.description.ilike(pattern))
            )

        if status:
            query = query.where(Content.status == status)

        column = SORT_COLUMNS.get(sort_by, Content.created_at)
        order = column.asc() if sort_order == "asc" else column.desc()
        return query.order_by(order, Content.id)

    async def list_by_type(
        self,
        content_type: str,
        page: int = 1,
        limit: int = 20,
        **criteria,
    ) -> Tuple[List[Content], int]:
        """Page of content of one type and the total match count."""
        return await self.paginate(self.build_query(content_type, **criteria), page, limit)

    async def all_by_type(self, content_type: str, **criteria) -> List[Content]:
        """Every matching entry (no pagination)."""
        result = await self.session.execute(self.build_query(content_type, **criteria))
        return list(result.scalars().all())

    async def get_by_type(self, content_type: str, id: UUID) -> Optional[Content]:
        """Get entry by ID, only if it belongs to ``content_type``."""
        result = await self.session.execute(
            select(Content).where(Content.id == id, Content.content_type == content_type)
        )
        return result.scalar_one_or_none()

    async def get_by_slug(
        self,
        content_type: str,
        slug: str,
        status: Optional[str] = None,
    ) -> Optional[Content]:
        """Get entry by slug, optionally restricted to a status."""
        query = select(Content).where(
            Content.content_type == content_type, Content.slug == slug
        )
        if status:
            query = query.where(Content.status == status)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def first_of_type(self, content_type: str, status: Optional[str] = None) -> Optional[Content]:
        """Most recently updated entry of a type."""
        query = select(Content).where(Content.content_type == content_type)
        if status:
            query = query.where(Content.status == status)
        result = await self.session.execute(
            query.order_by(Content.updated_at.desc()).limit(1)
        )
        return result.scalar_one_or_none()

    async def slug_exists(self, slug: str, exclude_id: Optional[UUID] = None) -> bool:
        """Check whether a slug is taken (slugs are unique across all types)."""
        query = select(Content.id).where(Content.slug == slug)
        if exclude_id is not None:
            query = query.where(Content.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def count_by_type(self, content_type: str, status: Optional[str] = None) -> int:
        query = select(Content).where(Content.content_type == content_type)
        if status:
            query = query.where(Content.status == status)
        return await self.count(query)

    async def field_values(
        self,
        content_type: str,
        key: str,
        status: Optional[str] = None,
    ) -> List[Any]:
        """Values of field ``key`` across entries of a type."""
        query = select(Content.fields).where(Content.content_type == content_type)
        if status:
            query = query.where(Content.status == status)
        result = await self.session.execute(query)

        values = []
        for fields in result.scalars().all():
            for item in fields or []:
                if item.get("key") == key:
                    values.append(item.get("value"))
                    break
        return values
