"""Activity audit log: event types, request helpers and the writer."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from fastapi import Request
from loguru import logger

from ..database import ActivityLog, async_session_maker
from ..repositories.activity_log_repository import ActivityLogRepository


class ActivityAction(str, Enum):
    CREATE_CONTENT = "CREATE_CONTENT"
    UPDATE_CONTENT = "UPDATE_CONTENT"
    DELETE_CONTENT = "DELETE_CONTENT"
    READ_CONTENT = "READ_CONTENT"
    UPLOAD_MEDIA = "UPLOAD_MEDIA"
    DELETE_MEDIA = "DELETE_MEDIA"
    UPDATE_SETTINGS = "UPDATE_SETTINGS"
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGOUT = "LOGOUT"
    REGISTER_USER = "REGISTER_USER"
    ERROR = "ERROR"
    ACCESS_DENIED = "ACCESS_DENIED"


class ActivityResource(str, Enum):
    CONTENT = "content"
    MEDIA = "media"
    SETTINGS = "settings"
    AUTH = "auth"
    USER = "user"
    SYSTEM = "system"


@dataclass
class ActivityEvent:
    """Event a route handler attaches to ``request.state.activity``."""
    action: ActivityAction
    resource: ActivityResource
    resource_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    user_id: Optional[UUID] = None
    email: Optional[str] = None


def record_activity(
    request: Request,
    action: ActivityAction,
    resource: ActivityResource,
    resource_id: Optional[Any] = None,
    details: Optional[Dict[str, Any]] = None,
    user=None,
    email: Optional[str] = None,
) -> ActivityEvent:
    """Attach an explicit activity event to the request.

    The activity middleware writes it once the response is known. ``user``
    defaults to the authenticated user stored on the request.
    """
    user = user if user is not None else getattr(request.state, "user", None)
    event = ActivityEvent(
        action=action,
        resource=resource,
        resource_id=str(resource_id) if resource_id is not None else None,
        details=details or {},
        user_id=user.id if user is not None else None,
        email=email or (user.email if user is not None else None),
    )
    request.state.activity = event
    return event


def get_client_ip(request: Request) -> str:
    """Client address: first X-Forwarded-For hop, X-Real-IP, then the peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def get_user_agent(request: Request) -> str:
    return request.headers.get("user-agent") or "unknown"


class ActivityLogger:
    """Writes audit entries in their own session. Never raises."""

    def __init__(self, session_factory=async_session_maker):
        self.session_factory = session_factory

    async def record(
        self,
        action: str,
        resource: str,
        method: str,
        path: str,
        status_code: int,
        user_id: Optional[UUID] = None,
        email: Optional[str] = None,
        resource_id: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        duration: Optional[float] = None,
    ) -> Optional[ActivityLog]:
        try:
            async with self.session_factory() as session:
                entry = await ActivityLogRepository(ActivityLog, session).create(
                    user_id=user_id,
                    email=email,
                    action=str(getattr(action, "value", action)),
                    resource=str(getattr(resource, "value", resource)),
                    resource_id=resource_id,
                    method=method,
                    path=path,
                    status_code=status_code,
                    ip_address=ip_address,
                    user_agent=user_agent,
                    details=details,
                    duration=duration,
                    timestamp=datetime.utcnow(),
                )
                await session.commit()
                return entry
        except Exception as e:
            logger.error(f"Failed to write activity log ({action} {method} {path}): {e}")
            return None


class ActivityLogService:
    """Read side of the audit log."""

    def __init__(self, log_repo: ActivityLogRepository):
        self.log_repo = log_repo

    async def list_logs(self, page: int = 1, limit: int = 50, **filters) -> Tuple[List[ActivityLog], int]:
        # Timestamps are stored as naive UTC
        for key in ("start_date", "end_date"):
            value = filters.get(key)
            if value is not None and value.tzinfo is not None:
                filters[key] = value.astimezone(timezone.utc).replace(tzinfo=None)
        return await self.log_repo.search(page=page, limit=limit, **filters)


# Global writer used by the middleware
activity_logger = ActivityLogger()
