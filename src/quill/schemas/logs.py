"""Activity log schemas."""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel


class ActivityLogResponse(BaseModel):
    """Audit log entry."""
    id: UUID
    user_id: Optional[UUID] = None
    email: Optional[str] = None
    action: str
    resource: str
    resource_id: Optional[str] = None
    method: str
    path: str
    status_code: int
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    duration: Optional[float] = None
    timestamp: datetime

    class Config:
        from_attributes = True
