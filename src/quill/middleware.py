"""Middleware that writes the activity audit log."""

import time
from typing import Optional, Tuple

from fastapi import Request
from loguru import logger
from starlette.background import BackgroundTask
from starlette.middleware.base import BaseHTTPMiddleware

from .services.activity_logger import (
    ActivityAction,
    ActivityEvent,
    ActivityLogger,
    ActivityResource,
    activity_logger,
    get_client_ip,
    get_user_agent,
)

STATE_CHANGING_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

# Segment after /api/ -> resource
PATH_RESOURCES = {
    "content": ActivityResource.CONTENT,
    "media": ActivityResource.MEDIA,
    "settings": ActivityResource.SETTINGS,
    "auth": ActivityResource.AUTH,
}


def derive_activity(method: str, path: str, status_code: int) -> Optional[Tuple[ActivityAction, ActivityResource]]:
    """Action and resource of a request that no handler annotated."""
    if status_code >= 500:
        return ActivityAction.ERROR, ActivityResource.SYSTEM

    segments = [s for s in path.split("/") if s]
    resource = PATH_RESOURCES.get(segments[1]) if len(segments) > 1 else None

    if status_code in (401, 403):
        return ActivityAction.ACCESS_DENIED, resource or ActivityResource.SYSTEM

    if resource == ActivityResource.CONTENT:
        action = {
            "POST": ActivityAction.CREATE_CONTENT,
            "PUT": ActivityAction.UPDATE_CONTENT,
            "PATCH": ActivityAction.UPDATE_CONTENT,
            "DELETE": ActivityAction.DELETE_CONTENT,
        }.get(method)
    elif resource == ActivityResource.MEDIA:
        action = {
            "POST": ActivityAction.UPLOAD_MEDIA,
            "DELETE": ActivityAction.DELETE_MEDIA,
        }.get(method)
    elif resource == ActivityResource.SETTINGS:
        action = ActivityAction.UPDATE_SETTINGS
    else:
        action = None

    if action is None:
        return None
    return action, resource


class ActivityLogMiddleware(BaseHTTPMiddleware):
    """
    Record state-changing API requests in the activity log.

    A route handler may attach an ``ActivityEvent`` to ``request.state.activity``;
    otherwise the action is derived from method, path and status. Token refresh
    is never recorded. The entry is written after the response is sent.
    """

    SKIP_PATHS = {"/api/auth/refresh"}

    def __init__(self, app, writer: Optional[ActivityLogger] = None):
        super().__init__(app)
        self.writer = writer or activity_logger

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if not path.startswith("/api/") or path in self.SKIP_PATHS:
            return await call_next(request)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled error on {request.method} {path}: {e}")
            await self._write(request, 500, start, error=str(e))
            raise

        event = getattr(request.state, "activity", None)
        if event is None and request.method not in STATE_CHANGING_METHODS:
            return response

        response.background = BackgroundTask(
            self._write, request, response.status_code, start
        )
        return response

    async def _write(self, request: Request, status_code: int, start: float, error: Optional[str] = None):
        duration = (time.perf_counter() - start) * 1000
        event: Optional[ActivityEvent] = getattr(request.state, "activity", None)
        user = getattr(request.state, "user", None)

        if error is not None:
            event = None
            derived = (ActivityAction.ERROR, ActivityResource.SYSTEM)
        elif event is None:
            derived = derive_activity(request.method, request.url.path, status_code)
            if derived is None:
                return
        else:
            derived = None

        if event is not None:
            action, resource = event.action, event.resource
            resource_id, details = event.resource_id, event.details
            user_id, email = event.user_id, event.email
        else:
            action, resource = derived
            resource_id, details = None, {}
            user_id = user.id if user is not None else None
            email = user.email if user is not None else None
            if action == ActivityAction.ERROR:
                details = {
                    "error": error
                    or getattr(request.state, "error_message", None)
                    or f"HTTP {status_code}"
                }

        await self.writer.record(
            action=action.value,
            resource=resource.value,
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            user_id=user_id,
            email=email,
            resource_id=resource_id,
            ip_address=get_client_ip(request),
            user_agent=get_user_agent(request),
            details=details or None,
            duration=round(duration, 2),
        )
