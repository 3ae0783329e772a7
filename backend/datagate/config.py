"""
Configuration Management Module

Configures application parameters via environment variables or .env file.
Supports SQLite (default) and PostgreSQL databases.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    """

    # Application Config
    APP_NAME: str = "Datagate"
    DEBUG: bool = False

    # Database Config
    # Supports "sqlite" or "postgresql"
    DATABASE_TYPE: Literal["sqlite", "postgresql"] = "sqlite"
    # SQLite default database path, PostgreSQL requires full connection string
    DATABASE_URL: str = "sqlite+aiosqlite:///./datagate.db"

    # Upload Disk Config
    # Disk name, also used as the prefix of returned file paths
    UPLOAD_DISK_NAME: str = "upload"
    # Root directory of the upload disk
    UPLOAD_DISK_ROOT: str = "./storage/upload"

    # App Credential Config
    # Generated app_id prefix and total length
    APP_ID_PREFIX: str = "zm"
    APP_ID_LENGTH: int = 14
    # Generated app_secret prefix and total length
    APP_SECRET_PREFIX: str = "ZJ"
    APP_SECRET_LENGTH: int = 24

    # Pagination Config
    # Default page size when the caller does not pass one
    PAGE_SIZE: int = 20

    # CORS Config
    # Comma-separated list of allowed origins for CORS
    # Example: "http://localhost:3000,https://example.com"
    ALLOWED_ORIGINS: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get application configuration (Singleton)

    Uses lru_cache to ensure configuration is loaded only once.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
