"""Media library API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile, status

from ..config import settings
from ..core.exceptions import ValidationError
from ..database import User
from ..dependencies import get_current_user, get_media_service
from ..schemas.common import ApiResponse, ListResponse, Pagination
from ..schemas.media import MediaResponse, MediaUploadResponse
from ..services import MediaService
from ..services.activity_logger import ActivityAction, ActivityResource, record_activity


router = APIRouter(prefix="/media", tags=["Media"])


@router.post(
    "/upload",
    response_model=ApiResponse[MediaUploadResponse],
    status_code=status.HTTP_201_CREATED,
)
async def upload_media(
    request: Request,
    file: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    media_service: MediaService = Depends(get_media_service),
):
    """
    Upload a file to object storage.

    Images get their width and height recorded.
    """
    if file is None or not file.filename:
        raise ValidationError("No file provided")

    # Read one byte past the limit to detect oversize uploads
    body = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(body) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError(
            f"File too large. Maximum size is {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB"
        )

    media = await media_service.upload(
        filename=file.filename,
        body=body,
        content_type=file.content_type,
        uploader=current_user,
    )

    record_activity(
        request,
        ActivityAction.UPLOAD_MEDIA,
        ActivityResource.MEDIA,
        resource_id=media.id,
        details={
            "filename": media.original_name,
            "size": media.size,
            "mime_type": media.mime_type,
        },
    )
    return ApiResponse(
        data=MediaUploadResponse.model_validate(media),
        message="File uploaded successfully",
    )


@router.get("", response_model=ListResponse[MediaResponse])
async def list_media(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Match filename or original name"),
    mime_type: Optional[str] = Query(None, description="MIME type prefix, e.g. image/"),
    current_user: User = Depends(get_current_user),
    media_service: MediaService = Depends(get_media_service),
):
    """List the media library, newest first."""
    items, total = await media_service.list_media(
        page=page, limit=limit, search=search, mime_type=mime_type
    )
    return ListResponse(
        data=[MediaResponse.model_validate(m) for m in items],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/{media_id}", response_model=ApiResponse[MediaResponse])
async def get_media(
    media_id: UUID,
    current_user: User = Depends(get_current_user),
    media_service: MediaService = Depends(get_media_service),
):
    media = await media_service.get_media(media_id)
    return ApiResponse(data=MediaResponse.model_validate(media))


@router.delete("/{media_id}", response_model=ApiResponse)
async def delete_media(
    request: Request,
    media_id: UUID,
    current_user: User = Depends(get_current_user),
    media_service: MediaService = Depends(get_media_service),
):
    """Delete a file from storage and the library."""
    media = await media_service.delete_media(media_id)

    record_activity(
        request,
        ActivityAction.DELETE_MEDIA,
        ActivityResource.MEDIA,
        resource_id=media_id,
        details={
            "filename": media.original_name,
            "storage_key": media.storage_key,
            "size": media.size,
            "mime_type": media.mime_type,
        },
    )
    return ApiResponse(message="Media deleted successfully")
