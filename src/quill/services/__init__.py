"""Service layer for business logic."""

from .auth_service import AuthService
from .content_service import ContentService
from .media_service import MediaService
from .settings_service import SettingsService
from .statistics_service import StatisticsService
from .activity_logger import ActivityLogger, ActivityLogService

__all__ = [
    "AuthService",
    "ContentService",
    "MediaService",
    "SettingsService",
    "StatisticsService",
    "ActivityLogger",
    "ActivityLogService",
]
