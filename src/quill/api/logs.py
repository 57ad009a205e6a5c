"""Activity log API endpoints."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from ..database import User
from ..dependencies import get_activity_log_service, get_current_user
from ..schemas.common import ListResponse, Pagination
from ..schemas.logs import ActivityLogResponse
from ..services import ActivityLogService


router = APIRouter(prefix="/logs", tags=["Activity Logs"])


@router.get("", response_model=ListResponse[ActivityLogResponse])
async def list_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    search: Optional[str] = Query(None, description="Match email, path or resource"),
    action: Optional[str] = Query(None),
    resource: Optional[str] = Query(None),
    user_id: Optional[UUID] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    current_user: User = Depends(get_current_user),
    log_service: ActivityLogService = Depends(get_activity_log_service),
):
    """Audit log, newest first."""
    items, total = await log_service.list_logs(
        page=page,
        limit=limit,
        search=search,
        action=action,
        resource=resource,
        user_id=user_id,
        start_date=start_date,
        end_date=end_date,
    )
    return ListResponse(
        data=[ActivityLogResponse.model_validate(log) for log in items],
        pagination=Pagination.build(page, limit, total),
    )
