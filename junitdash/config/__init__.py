"""Configuration module for the JUnit Dashboard API."""

from junitdash.config.settings import (
    APISettings,
    LogSettings,
    RateLimitSettings,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "APISettings",
    "LogSettings",
    "RateLimitSettings",
]
