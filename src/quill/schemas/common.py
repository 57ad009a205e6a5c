"""Response envelope shared by every API endpoint."""

import math
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, model_serializer

T = TypeVar("T")


class Pagination(BaseModel):
    """Page metadata of a list response."""
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if limit else 0,
        )


class ApiResponse(BaseModel, Generic[T]):
    """``{success, data?, message?, error?, pagination?}``"""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    error: Optional[str] = None
    pagination: Optional[Pagination] = None

    @model_serializer(mode="wrap")
    def _drop_empty(self, handler):
        # Only keys that carry a value are sent
        payload = handler(self)
        return {
            key: value for key, value in payload.items()
            if value is not None or key == "success"
        }


class ListResponse(ApiResponse[List[T]], Generic[T]):
    """Envelope of a paginated list."""
    pass
