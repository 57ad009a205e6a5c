"""Pydantic schemas for request/response validation."""

from .common import ApiResponse, ListResponse, Pagination
from .user import UserResponse, UserSummary
from .auth import LoginRequest, LoginResponse, RefreshRequest, RegisterRequest, TokenResponse
from .media import MediaResponse, MediaUploadResponse
from .content import ContentCreate, ContentField, ContentResponse, ContentUpdate
from .settings import SettingResponse, SettingUpsert, SiteStatistics, SiteStatus
from .logs import ActivityLogResponse

__all__ = [
    "ApiResponse",
    "ListResponse",
    "Pagination",
    "UserResponse",
    "UserSummary",
    "LoginRequest",
    "LoginResponse",
    "RefreshRequest",
    "RegisterRequest",
    "TokenResponse",
    "MediaResponse",
    "MediaUploadResponse",
    "ContentCreate",
    "ContentField",
    "ContentResponse",
    "ContentUpdate",
    "SettingResponse",
    "SettingUpsert",
    "SiteStatistics",
    "SiteStatus",
    "ActivityLogResponse",
]
