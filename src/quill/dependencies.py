"""Dependency injection for FastAPI endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from .database import (
    get_session,
    User,
    RefreshToken,
    Content,
    Media,
    Setting,
    ActivityLog,
)
from .repositories import (
    UserRepository,
    RefreshTokenRepository,
    ContentRepository,
    MediaRepository,
    SettingRepository,
    ActivityLogRepository,
)
from .services import (
    AuthService,
    ContentService,
    MediaService,
    SettingsService,
    StatisticsService,
    ActivityLogService,
)
from .core.security import ACCESS, TokenPayload, decode_token, extract_bearer_token
from .core.exceptions import NotAuthenticatedError
from .storage import get_storage

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


# Repository dependencies
async def get_user_repository(
    session: AsyncSession = Depends(get_session)
) -> UserRepository:
    """Get UserRepository instance."""
    return UserRepository(User, session)


async def get_refresh_token_repository(
    session: AsyncSession = Depends(get_session)
) -> RefreshTokenRepository:
    return RefreshTokenRepository(RefreshToken, session)


async def get_content_repository(
    session: AsyncSession = Depends(get_session)
) -> ContentRepository:
    return ContentRepository(Content, session)


async def get_media_repository(
    session: AsyncSession = Depends(get_session)
) -> MediaRepository:
    return MediaRepository(Media, session)


async def get_setting_repository(
    session: AsyncSession = Depends(get_session)
) -> SettingRepository:
    return SettingRepository(Setting, session)


async def get_activity_log_repository(
    session: AsyncSession = Depends(get_session)
) -> ActivityLogRepository:
    return ActivityLogRepository(ActivityLog, session)


# Service dependencies
async def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    refresh_token_repo: RefreshTokenRepository = Depends(get_refresh_token_repository),
) -> AuthService:
    """Get AuthService instance."""
    return AuthService(user_repo, refresh_token_repo)


async def get_content_service(
    content_repo: ContentRepository = Depends(get_content_repository),
    media_repo: MediaRepository = Depends(get_media_repository),
) -> ContentService:
    return ContentService(content_repo, media_repo)


async def get_media_service(
    media_repo: MediaRepository = Depends(get_media_repository),
) -> MediaService:
    return MediaService(media_repo, get_storage())


async def get_settings_service(
    setting_repo: SettingRepository = Depends(get_setting_repository),
) -> SettingsService:
    return SettingsService(setting_repo)


async def get_statistics_service(
    content_repo: ContentRepository = Depends(get_content_repository),
) -> StatisticsService:
    return StatisticsService(content_repo)


async def get_activity_log_service(
    log_repo: ActivityLogRepository = Depends(get_activity_log_repository),
) -> ActivityLogService:
    return ActivityLogService(log_repo)


# Authentication dependencies
def resolve_access_token(request: Request) -> Optional[str]:
    """
    Access token of the request.

    An Authorization header, when present, is the only source considered.
    Otherwise the ``accessToken`` cookie is used.
    """
    auth_header = request.headers.get("authorization")
    if auth_header is not None:
        return extract_bearer_token(auth_header)
    return request.cookies.get(ACCESS_COOKIE)


async def get_token_payload(request: Request) -> Optional[TokenPayload]:
    token = resolve_access_token(request)
    if not token:
        return None
    return decode_token(token, expected_type=ACCESS)


async def get_current_user_payload(
    payload: Optional[TokenPayload] = Depends(get_token_payload),
) -> TokenPayload:
    """
    Payload of a valid access token.

    Raises:
        NotAuthenticatedError: no token, or token invalid or expired
    """
    if payload is None:
        raise NotAuthenticatedError()
    return payload


async def get_current_user(
    request: Request,
    payload: TokenPayload = Depends(get_current_user_payload),
    user_repo: UserRepository = Depends(get_user_repository),
) -> User:
    """
    Get current authenticated user.

    The user is also stored on ``request.state`` for the activity log.

    Raises:
        NotAuthenticatedError: token is valid but the user no longer exists
    """
    user = await user_repo.get(UUID(payload.sub))
    if not user:
        raise NotAuthenticatedError()

    request.state.user = user
    return user


async def get_optional_user(
    request: Request,
    payload: Optional[TokenPayload] = Depends(get_token_payload),
    user_repo: UserRepository = Depends(get_user_repository),
) -> Optional[User]:
    """Authenticated user if the request carries a valid token, else None."""
    if payload is None:
        return None
    user = await user_repo.get(UUID(payload.sub))
    if user is not None:
        request.state.user = user
    return user
