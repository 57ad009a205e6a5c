"""Content API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from ..dependencies import get_content_service, get_current_user, get_optional_user
from ..services import ContentService
from ..services.activity_logger import ActivityAction, ActivityResource, record_activity
from ..schemas.common import ApiResponse, ListResponse, Pagination
from ..schemas.content import ContentCreate, ContentResponse, ContentUpdate
from ..database import Content, User


router = APIRouter(prefix="/content", tags=["Content"])


def _change_details(content: Content, **extra) -> dict:
    return {
        "content_type": content.content_type,
        "title": content.title,
        "slug": content.slug,
        "status": content.status,
        **extra,
    }


@router.get("/{content_type}", response_model=ListResponse[ContentResponse])
async def list_content(
    content_type: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Match title or description"),
    status: Optional[str] = Query(None, description="draft or published"),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    current_user: User = Depends(get_current_user),
    content_service: ContentService = Depends(get_content_service),
):
    """List entries of a content type (drafts included)."""
    items, total = await content_service.list_content(
        content_type,
        page=page,
        limit=limit,
        search=search,
        status=status,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return ListResponse(
        data=[ContentResponse.model_validate(c) for c in items],
        pagination=Pagination.build(page, limit, total),
    )


@router.post(
    "/{content_type}",
    response_model=ApiResponse[ContentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_content(
    request: Request,
    content_type: str,
    body: ContentCreate,
    current_user: User = Depends(get_current_user),
    content_service: ContentService = Depends(get_content_service),
):
    """
    Create a content entry.

    The slug is generated from the title and the author is the current user.
    """
    content = await content_service.create_content(content_type, body, current_user.email)

    record_activity(
        request,
        ActivityAction.CREATE_CONTENT,
        ActivityResource.CONTENT,
        resource_id=content.id,
        details=_change_details(content),
    )
    return ApiResponse(
        data=ContentResponse.model_validate(content),
        message="Content created successfully",
    )


@router.get("/{content_type}/slug/{slug}", response_model=ApiResponse[ContentResponse])
async def get_content_by_slug(
    content_type: str,
    slug: str,
    current_user: Optional[User] = Depends(get_optional_user),
    content_service: ContentService = Depends(get_content_service),
):
    """
    Get an entry by slug.

    Anonymous callers only see published entries.
    """
    content = await content_service.get_by_slug(
        content_type, slug, published_only=current_user is None
    )
    return ApiResponse(data=ContentResponse.model_validate(content))


@router.get("/{content_type}/{content_id}", response_model=ApiResponse[ContentResponse])
async def get_content(
    content_type: str,
    content_id: UUID,
    current_user: User = Depends(get_current_user),
    content_service: ContentService = Depends(get_content_service),
):
    """Get an entry with its media."""
    content = await content_service.get_content(content_type, content_id)
    return ApiResponse(data=ContentResponse.model_validate(content))


@router.put("/{content_type}/{content_id}", response_model=ApiResponse[ContentResponse])
async def update_content(
    request: Request,
    content_type: str,
    content_id: UUID,
    body: ContentUpdate,
    current_user: User = Depends(get_current_user),
    content_service: ContentService = Depends(get_content_service),
):
    """Apply a partial update. A changed title regenerates the slug."""
    content, updated_fields = await content_service.update_content(
        content_type, content_id, body
    )

    record_activity(
        request,
        ActivityAction.UPDATE_CONTENT,
        ActivityResource.CONTENT,
        resource_id=content.id,
        details=_change_details(content, updated_fields=updated_fields),
    )
    return ApiResponse(
        data=ContentResponse.model_validate(content),
        message="Content updated successfully",
    )


@router.delete("/{content_type}/{content_id}", response_model=ApiResponse)
async def delete_content(
    request: Request,
    content_type: str,
    content_id: UUID,
    current_user: User = Depends(get_current_user),
    content_service: ContentService = Depends(get_content_service),
):
    """Delete an entry."""
    content = await content_service.delete_content(content_type, content_id)

    record_activity(
        request,
        ActivityAction.DELETE_CONTENT,
        ActivityResource.CONTENT,
        resource_id=content_id,
        details=_change_details(content),
    )
    return ApiResponse(message="Content deleted successfully")
