"""Site settings with a short-lived in-process cache."""

from typing import Any, Dict, List, Optional

from loguru import logger

from ..cache import PREFIX_SETTINGS, CacheManager, cache_manager
from ..config import settings as app_settings
from ..core.exceptions import ValidationError
from ..database import Setting
from ..repositories.setting_repository import SettingRepository

SETTINGS_MAP_KEY = f"{PREFIX_SETTINGS}all"

# Keys that the public site may read. Anything else (maintenance mode,
# SMTP credentials, ...) stays private.
PUBLIC_SETTINGS_KEYS = (
    "site_name",
    "site_tagline",
    "site_logo",
    "site_favicon",
    "contact_email",
    "contact_phone",
    "contact_address",
    "social_facebook",
    "social_twitter",
    "social_instagram",
    "social_linkedin",
    "social_youtube",
    "social_github",
    "seo_default_title",
    "seo_default_description",
    "seo_default_keywords",
    "seo_default_og_image",
    "seo_google_analytics_id",
)

MAINTENANCE_MODE_KEY = "maintenance_mode"


class SettingsService:
    """Read and write key-value site settings."""

    def __init__(self, setting_repo: SettingRepository, cache: CacheManager = cache_manager):
        self.setting_repo = setting_repo
        self.cache = cache

    async def list_settings(self, category: Optional[str] = None) -> List[Setting]:
        return await self.setting_repo.list_settings(category)

    async def upsert(
        self,
        key: Optional[str],
        value: Any,
        value_provided: bool = True,
        **attributes,
    ) -> Setting:
        """
        Create or replace a setting and drop the cached map.

        ``attributes`` may carry ``category`` and ``description``; ones left
        out keep their stored value.
        """
        key = (key or "").strip()
        if not key or not value_provided:
            raise ValidationError("Key and value are required")

        setting = await self.setting_repo.upsert(key, value, **attributes)
        await self.setting_repo.commit()
        await self.cache.invalidate_prefix(PREFIX_SETTINGS)
        logger.info(f"Setting '{key}' updated")
        return setting

    async def get_settings(self) -> Dict[str, Any]:
        """All settings as a map, cached for ``SETTINGS_CACHE_TTL`` seconds."""
        return await self.cache.get_or_set(
            SETTINGS_MAP_KEY,
            self.setting_repo.as_map,
            ttl=app_settings.SETTINGS_CACHE_TTL,
        )

    async def get_setting(self, key: str, default: Any = None) -> Any:
        value = (await self.get_settings()).get(key)
        return default if value is None else value

    async def get_settings_by_category(self, category: str) -> Dict[str, Any]:
        return await self.setting_repo.as_map(category)

    async def get_public_settings(self) -> Dict[str, Any]:
        """Allow-listed settings only."""
        settings_map = await self.get_settings()
        return {
            key: settings_map[key]
            for key in PUBLIC_SETTINGS_KEYS
            if key in settings_map
        }

    async def is_maintenance_mode(self) -> bool:
        value = await self.get_setting(MAINTENANCE_MODE_KEY, False)
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)
