from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """API server configuration settings."""

    model_config = SettingsConfigDict(env_prefix="API_", env_file=".env", extra="ignore")

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=5000, description="API server port")
    workers: int = Field(default=1, description="Number of worker processes")
    reload: bool = Field(default=False, description="Enable auto-reload on code changes")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    cors_allowed_origins: list[str] = Field(
        default=["http://localhost:5173"],
        description="Origins allowed to call the API from a browser",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Accept log levels in any case."""
        return value.upper() if isinstance(value, str) else value


class LogSettings(BaseSettings):
    """Log directory configuration settings.

    The directory holds one newline-delimited JSON file per level:
    ``error.log``, ``warn.log``, ``info.log`` and ``debug.log``.
    """

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    dir: Path = Field(
        default=Path("./logs"),
        description="Directory containing the per-level log files",
    )
    write_app_logs: bool = Field(
        default=True,
        description="Append the dashboard's own application logs to the per-level log files.",
    )
    create_dir: bool = Field(
        default=True,
        description="Create the log directory on startup if it does not exist.",
    )


class RateLimitSettings(BaseSettings):
    """Per-client rate limiting configuration settings."""

    model_config = SettingsConfigDict(env_prefix="RATELIMIT_", env_file=".env", extra="ignore")

    enabled: bool = Field(default=True, description="Enable rate limiting middleware")
    logs_per_minute: int = Field(
        default=10,
        description="Requests per minute per client allowed on the file-backed logs API",
    )
    api_per_minute: int = Field(
        default=100,
        description="Requests per minute per client allowed on every other endpoint",
    )


class Settings(BaseSettings):
    """Main application settings.

    This class aggregates all configuration sections and provides
    a single point of access for application configuration.

    Configuration precedence (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values

    Example .env file:
        APP_NAME=JUnit Dashboard API
        APP_DEBUG=true
        LOG_DIR=/var/log/junit-dashboard
        RATELIMIT_LOGS_PER_MINUTE=30
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    name: str = Field(default="JUnit Dashboard API", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")
    description: str = Field(
        default="JUnit test results dashboard backend",
        description="Application description",
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )

    # Sub-configurations
    api: APISettings = Field(default_factory=APISettings)
    logs: LogSettings = Field(default_factory=LogSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function is cached to ensure we only parse configuration once.
    Use this function throughout the application to access settings.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
