"""
Quill - CMS API server

Serves the authenticated admin API and the public read-only API:
- Admin authentication (JWT access/refresh tokens, cookies or bearer)
- Typed content CRUD, media library, site settings
- Activity audit log
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from pydantic import BaseModel
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api import (
    auth_router,
    content_router,
    content_types_router,
    logs_router,
    media_router,
    public_router,
    settings_router,
)
from .config import settings
from .core.exceptions import QuillException
from .core.logging import configure_logging
from .database import engine, init_db
from .middleware import ActivityLogMiddleware


class HealthResponse(BaseModel):
    status: str
    version: str
    database: bool
    storage: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    configure_logging(settings.LOG_LEVEL)
    await init_db()
    logger.info("Quill started")
    yield
    logger.info("Quill shutting down")


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, **extra},
    )


async def quill_exception_handler(request: Request, exc: QuillException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    request.state.error_message = exc.message
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(exc.status_code, message)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Validation failed",
        details=jsonable_encoder(exc.errors()),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Quill",
        description="Headless CMS API",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Audit log for state-changing requests
    app.add_middleware(ActivityLogMiddleware)

    app.add_exception_handler(QuillException, quill_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(auth_router, prefix="/api")
    app.include_router(content_types_router, prefix="/api")
    app.include_router(content_router, prefix="/api")
    app.include_router(media_router, prefix="/api")
    app.include_router(settings_router, prefix="/api")
    app.include_router(logs_router, prefix="/api")
    app.include_router(public_router, prefix="/api")

    if settings.STORAGE_BACKEND.lower() == "local":
        app.mount(
            settings.MEDIA_URL_PREFIX,
            StaticFiles(directory=settings.MEDIA_ROOT, check_dir=False),
            name="media",
        )

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check():
        """Health check endpoint."""
        database_ok = True
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            database_ok = False

        return HealthResponse(
            status="healthy" if database_ok else "degraded",
            version=__version__,
            database=database_ok,
            storage=settings.STORAGE_BACKEND,
        )

    return app


app = create_app()
