"""Activity log repository."""

from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import or_, select

from .base import BaseRepository
from ..database import ActivityLog


class ActivityLogRepository(BaseRepository[ActivityLog]):
    """Repository for audit log queries."""

    async def search(
        self,
        page: int = 1,
        limit: int = 50,
        search: Optional[str] = None,
        action: Optional[str] = None,
        resource: Optional[str] = None,
        user_id: Optional[UUID] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Tuple[List[ActivityLog], int]:
        """Newest-first page of log entries matching the filters."""
        query = select(ActivityLog)

        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    ActivityLog.email.ilike(pattern),
                    ActivityLog.path.ilike(pattern),
                    ActivityLog.resource.ilike(pattern),
                )
            )
        if action:
            query = query.where(ActivityLog.action == action)
        if resource:
            query = query.where(ActivityLog.resource == resource)
        if user_id:
            query = query.where(ActivityLog.user_id == user_id)
        if start_date:
            query = query.where(ActivityLog.timestamp >= start_date)
        if end_date:
            query = query.where(ActivityLog.timestamp <= end_date)

        query = query.order_by(ActivityLog.timestamp.desc(), ActivityLog.id)
        return await self.paginate(query, page, limit)
