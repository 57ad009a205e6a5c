"""Content schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field

from .media import MediaResponse


class ContentField(BaseModel):
    """One ``{key, value, type}`` entry of a content item."""
    key: str
    value: Any = None
    type: str = "text"


class ContentCreate(BaseModel):
    """Content creation schema. Title is checked by the service."""
    title: Optional[str] = None
    description: Optional[str] = None
    fields: Optional[List[ContentField]] = None
    status: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    media: Optional[List[UUID]] = None


class ContentUpdate(BaseModel):
    """Partial content update. Only keys present in the body are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    fields: Optional[List[ContentField]] = None
    status: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    media: Optional[List[UUID]] = None


class ContentResponse(BaseModel):
    """Content response schema."""
    id: UUID
    content_type: str
    title: str
    slug: str
    description: Optional[str] = None
    fields: List[ContentField] = []
    status: str
    # ORM attribute is ``meta``; ``metadata`` is taken on declarative models
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("meta", "metadata"),
    )
    media: List[MediaResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
