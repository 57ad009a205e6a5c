"""Repository layer for data access."""

from .base import BaseRepository
from .user_repository import UserRepository
from .refresh_token_repository import RefreshTokenRepository
from .content_repository import ContentRepository
from .media_repository import MediaRepository
from .setting_repository import SettingRepository
from .activity_log_repository import ActivityLogRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "RefreshTokenRepository",
    "ContentRepository",
    "MediaRepository",
    "SettingRepository",
    "ActivityLogRepository",
]
