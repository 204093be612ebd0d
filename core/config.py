"""
Configuration settings for MediTrack Backend.

Uses Pydantic Settings for environment variable management.
"""

import os
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Environment
    ENV: str = Field(default="development")
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # Logging Control
    ENABLE_FILE_LOGGING: bool = Field(default=True)
    ENABLE_REQUEST_LOGGING: bool = Field(default=True)
    LOGS_DIR: str = Field(default="logs")

    # Application
    APP_NAME: str = Field(default="MediTrack Backend")
    VERSION: str = Field(default="1.0.0")

    # Server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    origins: List[str] = [
        "http://localhost:5173",  # vite dev server
        "http://localhost:8080",
    ]

    # Database
    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./meditrack.db")
    DATABASE_ECHO: bool = Field(default=False)
    DATABASE_POOL_SIZE: int = Field(default=10)
    DATABASE_MAX_OVERFLOW: int = Field(default=20)

    # Sessions
    SESSION_DURATION: int = 60 * 24 * 30  # minutes, 30 days
    SESSION_COOKIE_NAME: str = Field(default="session_id")
    SESSION_COOKIE_SECURE: bool = Field(default=True)
    PASSWORD_MIN_LENGTH: int = 8

    # Reports
    TIMEZONE: str = Field(default="UTC")
    RESPECT_MEDICATION_DATES: bool = Field(default=False)

    # Sentry (Optional)
    SENTRY_DSN: Optional[str] = Field(default=None)
    SENTRY_ENVIRONMENT: str = Field(default="development")

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


# Create settings instance
settings = Settings()


def get_env_file() -> str:
    """Get the appropriate environment file based on ENV setting."""
    env_file = f".env.{settings.ENV}"
    if os.path.exists(env_file):
        return env_file
    return ".env"


# Update settings with environment-specific file
settings = Settings(_env_file=get_env_file())
