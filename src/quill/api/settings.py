"""Site settings API endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from ..database import User
from ..dependencies import get_current_user, get_settings_service
from ..schemas.common import ApiResponse
from ..schemas.settings import SettingResponse, SettingUpsert
from ..services import SettingsService
from ..services.activity_logger import ActivityAction, ActivityResource, record_activity


router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=ApiResponse[List[SettingResponse]])
async def list_settings(
    category: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    settings_service: SettingsService = Depends(get_settings_service),
):
    """All settings, optionally restricted to one category."""
    settings = await settings_service.list_settings(category)
    return ApiResponse(data=[SettingResponse.model_validate(s) for s in settings])


@router.post("", response_model=ApiResponse[SettingResponse])
async def upsert_setting(
    request: Request,
    body: SettingUpsert,
    current_user: User = Depends(get_current_user),
    settings_service: SettingsService = Depends(get_settings_service),
):
    """
    Create or replace a setting.

    ``value`` must be present in the body; an explicit ``null`` is stored.
    """
    setting = await settings_service.upsert(
        key=body.key,
        value=body.value,
        value_provided="value" in body.model_fields_set,
        **body.model_dump(include={"category", "description"}, exclude_unset=True),
    )

    record_activity(
        request,
        ActivityAction.UPDATE_SETTINGS,
        ActivityResource.SETTINGS,
        resource_id=setting.key,
        details={"key": setting.key, "category": setting.category},
    )
    return ApiResponse(
        data=SettingResponse.model_validate(setting),
        message="Setting saved successfully",
    )
