"""Application configuration module.

This module contains settings for the URL shortener service,
loaded from environment variables with appropriate defaults.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with defaults.

    Settings are loaded from environment variables, with fallback to
    values in .env file if present, and finally to the default values
    specified here.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment setting
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # App Information
    APP_NAME: str = "URL Shortener"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "URL shortening service with click analytics"

    # API Configuration
    BASE_URL: str = "http://localhost:3000"  # Used for composing short links
    API_PREFIX: str = ""
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # CORS settings
    CORS_ORIGINS: Union[List[str], str] = ["*"]

    # Shortcode configuration
    SHORTCODE_BYTES: int = 4  # 4 random bytes -> 8 hex characters
    SHORTCODE_MAX_ATTEMPTS: int = 10
    CUSTOM_SHORTCODE_MAX_LENGTH: int = 32
    RESERVED_SHORTCODES: Union[List[str], str] = ["shorturls", "health", "docs", "redoc", "openapi.json"]

    # Validity window for new short links, in minutes
    DEFAULT_VALIDITY_MINUTES: int = 30

    # Referrer recorded when a click carries none
    DEFAULT_REFERRER: str = "direct"

    # PostgreSQL settings
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "url_shortener"

    # Full SQLAlchemy URL, overrides the POSTGRES_* components when set
    DATABASE_URL: Optional[str] = None

    # PostgreSQL pool settings
    POSTGRES_POOL_SIZE: int = 20
    POSTGRES_POOL_MAX_OVERFLOW: int = 10
    POSTGRES_POOL_TIMEOUT: int = 30
    POSTGRES_POOL_RECYCLE: int = 300
    DB_ECHO: bool = False
    DB_CREATE_TABLES: bool = True  # Run metadata.create_all on startup

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "app.log"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[request_id]} | {name}:{line} | {message}"
    LOG_JSON: bool = True
    LOG_PER_LEVEL_FILES: bool = True  # info.log, error.log, ... next to app.log
    REQUEST_LOGGING_ENABLED: bool = True

    # Validators
    @field_validator("CORS_ORIGINS", "RESERVED_SHORTCODES")
    def validate_list_or_string(cls, v: Union[List[str], str]) -> List[str]:
        """Convert comma-separated string to list if needed."""
        if isinstance(v, str):
            if not v.strip():
                return []
            if v == "*":
                return ["*"]
            return [item.strip() for item in v.split(",")]
        return v

    @field_validator("DEFAULT_VALIDITY_MINUTES", "SHORTCODE_MAX_ATTEMPTS", "SHORTCODE_BYTES")
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("DATABASE_URL", mode="before")
    def validate_database_url(cls, v):
        """Treat an empty DATABASE_URL as unset."""
        if v == "":
            return None
        return v

    # Computed fields
    @computed_field
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Construct the SQLAlchemy database URI from settings or use override."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"


# Create a singleton instance of the settings
settings = Settings()
