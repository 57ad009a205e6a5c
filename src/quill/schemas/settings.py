"""Settings and public site schemas."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel


class SettingUpsert(BaseModel):
    """Create or replace a setting. ``value`` must be present, ``null`` allowed."""
    key: Optional[str] = None
    value: Any = None
    category: Optional[str] = None
    description: Optional[str] = None


class SettingResponse(BaseModel):
    """Setting record."""
    id: UUID
    key: str
    value: Any = None
    category: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SiteStatus(BaseModel):
    maintenance_mode: bool


class SiteStatistics(BaseModel):
    team_count: int
    clients_count: int
    projects_count: int
    cities_count: int
