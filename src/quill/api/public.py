"""Public read-only API for the marketing site. No authentication."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from ..dependencies import get_content_service, get_settings_service, get_statistics_service
from ..schemas.common import ApiResponse, ListResponse, Pagination
from ..schemas.content import ContentResponse
from ..schemas.settings import SiteStatistics, SiteStatus
from ..services import ContentService, SettingsService, StatisticsService


router = APIRouter(prefix="/public", tags=["Public"])


# Declared before /content/{content_type} so "homepage" is not taken as a type
@router.get("/content/homepage", response_model=ApiResponse[ContentResponse])
async def get_homepage(
    content_service: ContentService = Depends(get_content_service),
):
    """The published homepage entry."""
    content = await content_service.get_homepage()
    return ApiResponse(data=ContentResponse.model_validate(content))


@router.get("/content/{content_type}", response_model=ListResponse[ContentResponse])
async def list_published_content(
    content_type: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None, description="Match the category field"),
    featured: bool = Query(False, description="Only entries featured on the homepage"),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    content_service: ContentService = Depends(get_content_service),
):
    """Published entries of a content type, with their media."""
    items, total = await content_service.list_published(
        content_type,
        page=page,
        limit=limit,
        search=search,
        category=category,
        featured=featured,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return ListResponse(
        data=[ContentResponse.model_validate(c) for c in items],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/content/{content_type}/{slug}", response_model=ApiResponse[ContentResponse])
async def get_published_content(
    content_type: str,
    slug: str,
    content_service: ContentService = Depends(get_content_service),
):
    content = await content_service.get_by_slug(content_type, slug, published_only=True)
    return ApiResponse(data=ContentResponse.model_validate(content))


@router.get("/settings", response_model=ApiResponse[Dict[str, Any]])
async def get_public_settings(
    settings_service: SettingsService = Depends(get_settings_service),
):
    """Settings that are safe to expose to the public site."""
    return ApiResponse(data=await settings_service.get_public_settings())


@router.get("/status", response_model=ApiResponse[SiteStatus])
async def get_site_status(
    settings_service: SettingsService = Depends(get_settings_service),
):
    """Maintenance flag for the public site."""
    return ApiResponse(
        data=SiteStatus(maintenance_mode=await settings_service.is_maintenance_mode())
    )


@router.get("/stats", response_model=ApiResponse[SiteStatistics])
async def get_statistics(
    statistics_service: StatisticsService = Depends(get_statistics_service),
):
    """Team, client, project and city counts."""
    stats = await statistics_service.get_statistics()
    return ApiResponse(data=SiteStatistics(**stats))
