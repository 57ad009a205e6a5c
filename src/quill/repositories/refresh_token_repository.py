"""Refresh token repository."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete

from .base import BaseRepository
from ..database import RefreshToken


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Server-side store of live refresh tokens."""

    async def revoke(self, user_id: UUID, token: str) -> bool:
        """
        Remove one of ``user_id``'s live refresh tokens.

        Returns True only if this call deleted it, so of two requests
        presenting the same token exactly one sees True.
        """
        result = await self.session.execute(
            delete(RefreshToken).where(
                RefreshToken.user_id == user_id,
                RefreshToken.token == token,
                RefreshToken.expires_at > datetime.utcnow(),
            )
        )
        return result.rowcount > 0

    async def purge_expired(self, user_id: Optional[UUID] = None) -> int:
        """Delete expired tokens, optionally only for one user."""
        query = delete(RefreshToken).where(RefreshToken.expires_at <= datetime.utcnow())
        if user_id is not None:
            query = query.where(RefreshToken.user_id == user_id)
        result = await self.session.execute(query)
        return result.rowcount
