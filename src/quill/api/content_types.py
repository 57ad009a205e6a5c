"""Read-only content type registry endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Query

from ..content_types import CONTENT_TYPES, ContentTypeDefinition, get_content_type, get_nav_content_types
from ..core.exceptions import ResourceNotFoundError
from ..database import User
from ..dependencies import get_current_user
from ..schemas.common import ApiResponse


router = APIRouter(prefix="/content-types", tags=["Content Types"])


@router.get("", response_model=ApiResponse[List[ContentTypeDefinition]])
async def list_content_types(
    nav_only: bool = Query(False, description="Only types shown in the admin navigation"),
    current_user: User = Depends(get_current_user),
):
    """All registered content types."""
    types = get_nav_content_types() if nav_only else list(CONTENT_TYPES.values())
    return ApiResponse(data=types)


@router.get("/{name}", response_model=ApiResponse[ContentTypeDefinition])
async def get_content_type_definition(
    name: str,
    current_user: User = Depends(get_current_user),
):
    definition = get_content_type(name)
    if definition is None:
        raise ResourceNotFoundError("Content type")
    return ApiResponse(data=definition)
