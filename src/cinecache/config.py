"""Application configuration using Pydantic Settings.

This module provides centralized configuration management with environment
variable validation, type coercion, and default values.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log format options."""

    JSON = "json"
    CONSOLE = "console"


class Settings(BaseSettings):
    """Application settings with environment variable validation.

    All settings can be overridden via environment variables.
    The TMDB credential should be provided via environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Application
    # ========================================
    app_env: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    app_name: str = Field(
        default="CineCache",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_format: LogFormat = Field(
        default=LogFormat.CONSOLE,
        description="Log output format (json for production, console for dev)",
    )

    # ========================================
    # Server
    # ========================================
    host: str = Field(
        default="0.0.0.0",
        description="Server host",
    )
    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Server port",
    )

    # ========================================
    # TMDB
    # ========================================
    tmdb_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="TMDB API key or v4 read access token",
    )
    tmdb_base_url: str = Field(
        default="https://api.themoviedb.org/3",
        description="TMDB API base URL",
    )
    tmdb_image_base_url: str = Field(
        default="https://image.tmdb.org/t/p",
        description="TMDB image CDN base URL",
    )
    tmdb_timeout: float = Field(
        default=10.0,
        gt=0,
        description="TMDB request timeout in seconds",
    )
    tmdb_language: str = Field(
        default="ko-KR",
        description="Default language for catalog requests",
    )
    tmdb_review_language: str = Field(
        default="en-US",
        description="Default language for review requests (reviews are mostly English)",
    )

    # ========================================
    # Cache
    # ========================================
    cache_ttl_seconds: float = Field(
        default=3600.0,
        gt=0,
        description="Time-to-live for cached API responses in seconds",
    )
    coordinator_max_retries: int = Field(
        default=0,
        ge=0,
        le=5,
        description="Retries on network failures per in-flight request",
    )
    coordinator_retry_base_delay: float = Field(
        default=0.5,
        ge=0,
        description="Base delay in seconds for exponential retry backoff",
    )

    # ========================================
    # Derived Properties
    # ========================================
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == Environment.PRODUCTION

    @property
    def use_json_logs(self) -> bool:
        """Check if JSON logging should be used."""
        return self.log_format == LogFormat.JSON or self.is_production

    @field_validator("tmdb_base_url", "tmdb_image_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs so paths can be appended verbatim."""
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    This function is cached to avoid re-reading environment variables
    on every access. Use dependency injection in FastAPI routes.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
