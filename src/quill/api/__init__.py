"""HTTP API routers."""

from .auth import router as auth_router
from .content import router as content_router
from .content_types import router as content_types_router
from .media import router as media_router
from .settings import router as settings_router
from .logs import router as logs_router
from .public import router as public_router

__all__ = [
    "auth_router",
    "content_router",
    "content_types_router",
    "media_router",
    "settings_router",
    "logs_router",
    "public_router",
]
