"""Content business logic."""

import time
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from slugify import slugify

from ..repositories.content_repository import ContentRepository
from ..repositories.media_repository import MediaRepository
from ..content_types import validate_fields
from ..core.exceptions import ResourceNotFoundError, ValidationError
from ..database import Content
from ..schemas.content import ContentCreate, ContentUpdate

PUBLISHED = "published"
DRAFT = "draft"
STATUSES = (DRAFT, PUBLISHED)

FEATURED_KEYS = ("featured_homepage", "featured_on_homepage")


def field_value(content: Content, key: str, default: Any = None) -> Any:
    """Value of field ``key`` in an entry's field list."""
    for item in content.fields or []:
        if item.get("key") == key:
            return item.get("value")
    return default


class ContentService:
    """Service for content CRUD and public listing."""

    def __init__(self, content_repo: ContentRepository, media_repo: MediaRepository):
        self.content_repo = content_repo
        self.media_repo = media_repo

    async def list_content(
        self,
        content_type: str,
        page: int = 1,
        limit: int = 20,
        search: Optional[str] = None,
        status: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> Tuple[List[Content], int]:
        return await self.content_repo.list_by_type(
            content_type,
            page=page,
            limit=limit,
            search=search,
            status=status,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    async def get_content(self, content_type: str, content_id: UUID) -> Content:
        content = await self.content_repo.get_by_type(content_type, content_id)
        if not content:
            raise ResourceNotFoundError("Content")
        return content

    async def get_by_slug(
        self,
        content_type: str,
        slug: str,
        published_only: bool = False,
    ) -> Content:
        content = await self.content_repo.get_by_slug(
            content_type, slug, status=PUBLISHED if published_only else None
        )
        if not content:
            raise ResourceNotFoundError("Content")
        return content

    async def create_content(
        self,
        content_type: str,
        data: ContentCreate,
        author_email: str,
    ) -> Content:
        """
        Create a content entry.

        The slug is derived from the title. ``metadata.author`` is always
        the creating user.
        """
        title = (data.title or "").strip()
        if not title:
            raise ValidationError("Title is required")

        status = data.status or DRAFT
        self._check_status(status)

        fields = [f.model_dump() for f in data.fields or []]
        self._check_fields(content_type, fields, status)

        metadata = dict(data.metadata or {})
        metadata["author"] = author_email

        media = await self.media_repo.get_many(data.media or [])

        content = await self.content_repo.create(
            content_type=content_type,
            title=title,
            slug=await self.unique_slug(title),
            description=data.description,
            fields=fields,
            status=status,
            meta=metadata,
            media=media,
        )
        await self.content_repo.commit()
        return content

    async def update_content(
        self,
        content_type: str,
        content_id: UUID,
        data: ContentUpdate,
    ) -> Tuple[Content, List[str]]:
        """
        Apply a partial update.

        Returns:
            (updated content, names of the keys that were provided)
        """
        content = await self.get_content(content_type, content_id)
        changes = data.model_dump(exclude_unset=True)
        updated_fields = list(changes.keys())

        if "title" in changes:
            title = (changes["title"] or "").strip()
            if not title:
                raise ValidationError("Title is required")
            if title != content.title:
                content.slug = await self.unique_slug(title, exclude_id=content.id)
            content.title = title

        if "status" in changes:
            self._check_status(changes["status"])
            content.status = changes["status"]

        if "fields" in changes:
            content.fields = changes["fields"] or []

        self._check_fields(content_type, content.fields, content.status)

        if "description" in changes:
            content.description = changes["description"]

        if "metadata" in changes:
            # Author is fixed at creation
            metadata = dict(changes["metadata"] or {})
            author = (content.meta or {}).get("author")
            if author is not None:
                metadata["author"] = author
            content.meta = metadata

        if "media" in changes:
            content.media = await self.media_repo.get_many(changes["media"] or [])

        await self.content_repo.session.flush()
        await self.content_repo.session.refresh(content)
        await self.content_repo.session.refresh(content, attribute_names=["media"])
        await self.content_repo.commit()
        return content, updated_fields

    async def delete_content(self, content_type: str, content_id: UUID) -> Content:
        """Delete an entry and return the deleted record."""
        content = await self.get_content(content_type, content_id)
        await self.content_repo.delete(content.id)
        await self.content_repo.commit()
        return content

    async def unique_slug(self, title: str, exclude_id: Optional[UUID] = None) -> str:
        """Slug for ``title``, suffixed with a millisecond timestamp when taken."""
        base = slugify(title) or "content"
        slug = base
        while await self.content_repo.slug_exists(slug, exclude_id=exclude_id):
            slug = f"{base}-{int(time.time() * 1000)}"
        return slug

    # Public read side

    async def list_published(
        self,
        content_type: str,
        page: int = 1,
        limit: int = 20,
        search: Optional[str] = None,
        category: Optional[str] = None,
        featured: bool = False,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> Tuple[List[Content], int]:
        """Published entries, with the category and featured field filters."""
        if not category and not featured:
            return await self.content_repo.list_by_type(
                content_type,
                page=page,
                limit=limit,
                search=search,
                status=PUBLISHED,
                sort_by=sort_by,
                sort_order=sort_order,
            )

        # Field filters run over the JSON field list
        entries = await self.content_repo.all_by_type(
            content_type,
            search=search,
            status=PUBLISHED,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        if category:
            entries = [c for c in entries if field_value(c, "category") == category]
        if featured:
            entries = [
                c for c in entries
                if any(field_value(c, key) is True for key in FEATURED_KEYS)
            ]

        start = (page - 1) * limit
        return entries[start:start + limit], len(entries)

    async def get_homepage(self) -> Content:
        content = await self.content_repo.first_of_type("homepage", status=PUBLISHED)
        if not content:
            raise ResourceNotFoundError("Homepage content")
        return content

    def _check_status(self, status: Optional[str]) -> None:
        if status not in STATUSES:
            raise ValidationError(f"Status must be one of: {', '.join(STATUSES)}")

    def _check_fields(self, content_type: str, fields: List[Dict[str, Any]], status: str) -> None:
        errors = validate_fields(content_type, fields, check_required=status == PUBLISHED)
        if errors:
            raise ValidationError("; ".join(errors))
