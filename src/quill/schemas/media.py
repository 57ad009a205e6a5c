"""Media schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from .user import UserSummary


class MediaUploadResponse(BaseModel):
    """Returned by a successful upload."""
    id: UUID
    filename: str
    url: str
    size: int
    mime_type: str
    width: Optional[int] = None
    height: Optional[int] = None

    class Config:
        from_attributes = True


class MediaResponse(MediaUploadResponse):
    """Media library record."""
    original_name: str
    storage_key: str
    uploaded_by: Optional[UUID] = None
    uploader: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
