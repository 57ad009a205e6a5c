"""Configuration for the Quill CMS service."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Quill configuration settings."""

    # Database (SQLite for development, PostgreSQL via asyncpg in production)
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/quill.db"

    # JWT - access and refresh tokens are signed with different secrets
    JWT_ACCESS_SECRET: str = "access-secret-key-change-in-production"
    JWT_REFRESH_SECRET: str = "refresh-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Auth cookies
    COOKIE_SECURE: bool = False

    # Anyone may register while True; otherwise only super-admins can
    ALLOW_PUBLIC_REGISTRATION: bool = True

    CORS_ORIGINS: list[str] = ["*"]

    # Object storage: "local" or "s3"
    STORAGE_BACKEND: str = "local"
    MEDIA_ROOT: str = "./data/media"
    MEDIA_URL_PREFIX: str = "/media"
    S3_BUCKET: str = "quill-media"
    S3_REGION: str = "us-east-1"
    S3_ENDPOINT_URL: Optional[str] = None
    S3_PUBLIC_URL: Optional[str] = None

    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # Cache lifetimes (seconds)
    SETTINGS_CACHE_TTL: int = 60
    STATS_CACHE_TTL: int = 300

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


# Global settings instance
settings = Settings()
