"""
Application configuration using Pydantic Settings.
Manages all environment variables and settings.
"""
import os
from enum import Enum
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./timeline.db"
DEFAULT_JWT_SECRET = "jwt-secret-change-in-production"


class Environment(str, Enum):
    """Application environment modes."""
    DEV = "DEV"
    PRODUCTION = "PRODUCTION"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=None, case_sensitive=False)

    # Environment
    environment: Environment = Field(
        default=Environment.DEV,
        description="Application environment: DEV or PRODUCTION"
    )

    # Application
    app_name: str = Field(default="School Timeline")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)

    @model_validator(mode='after')
    def set_debug_from_environment(self):
        """Set debug mode based on environment if not explicitly set via environment variable."""
        if 'DEBUG' not in os.environ:
            self.debug = self.environment == Environment.DEV
        return self

    @property
    def is_dev(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEV

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    # Database (빈 문자열이면 기본값 사용)
    database_url: str = Field(default=DEFAULT_DATABASE_URL)

    @field_validator("database_url", mode="before")
    @classmethod
    def coerce_empty_database_url(cls, v: str) -> str:
        if not v or not str(v).strip():
            return DEFAULT_DATABASE_URL
        return v

    # JWT
    jwt_secret_key: str = Field(default=DEFAULT_JWT_SECRET)
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60 * 24)

    # Uploads
    upload_dir: str = Field(default="./uploads", description="Directory for uploaded image files")
    max_upload_size: int = Field(
        default=5 * 1024 * 1024,
        description="Maximum accepted upload size in bytes",
    )

    # Logging. 비우면 stdout/stderr만 사용
    log_dir: str = Field(default="", description="Directory for NDJSON log files")

    # CORS (쉼표로 구분)
    cors_origins: str = Field(default="*")

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Using lru_cache to avoid re-reading the environment on every request.
    """
    return Settings()
