"""User repository with authentication queries."""

from typing import Optional

from sqlalchemy import select

from .base import BaseRepository
from ..database import User


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)."""
        result = await self.session.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Check if email is already registered."""
        result = await self.session.execute(
            select(User.id).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none() is not None
