"""Site settings repository."""

from typing import Any, Dict, List, Optional

from sqlalchemy import select

from .base import BaseRepository
from ..database import Setting


class SettingRepository(BaseRepository[Setting]):
    """Repository for key-value settings."""

    async def get_by_key(self, key: str) -> Optional[Setting]:
        result = await self.session.execute(
            select(Setting).where(Setting.key == key)
        )
        return result.scalar_one_or_none()

    async def list_settings(self, category: Optional[str] = None) -> List[Setting]:
        """All settings, optionally restricted to one category."""
        query = select(Setting).order_by(Setting.key)
        if category:
            query = query.where(Setting.category == category)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def as_map(self, category: Optional[str] = None) -> Dict[str, Any]:
        """Settings as a ``{key: value}`` mapping."""
        return {s.key: s.value for s in await self.list_settings(category)}

    async def upsert(self, key: str, value: Any, **attributes) -> Setting:
        """
        Create the setting or replace its value.

        ``attributes`` (category, description) are only written when given,
        so an update that leaves them out keeps the stored ones.
        """
        setting = await self.get_by_key(key)
        if setting is None:
            return await self.create(key=key, value=value, **attributes)

        setting.value = value
        for name, attribute in attributes.items():
            setattr(setting, name, attribute)
        await self.session.flush()
        await self.session.refresh(setting)
        return setting
