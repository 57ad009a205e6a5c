"""User schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class UserSummary(BaseModel):
    """User reference embedded in other records."""
    id: UUID
    email: str

    class Config:
        from_attributes = True


class UserResponse(UserSummary):
    """User response schema."""
    role: str
    last_login: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
