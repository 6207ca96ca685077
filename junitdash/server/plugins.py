"""Plugin and middleware configurations.

This module provides builders for:
- Logging configuration
- Per-client rate limiting for the logs API and the rest of the API
- CORS for the dashboard frontend
"""
from __future__ import annotations

from litestar import Request
from litestar.config.cors import CORSConfig
from litestar.logging import LoggingConfig
from litestar.middleware.rate_limit import RateLimitConfig

from junitdash.config.settings import Settings

LOGS_API_PREFIX = "/api/v1/logs"


def is_logs_request(request: Request) -> bool:
    """Return True for requests hitting the file-backed logs API."""
    return request.url.path.startswith(LOGS_API_PREFIX)


def is_api_request(request: Request) -> bool:
    """Return True for requests that fall under the general API limit."""
    return not is_logs_request(request)


def build_logging_config(settings: Settings) -> LoggingConfig:
    """Logging configuration for the application."""
    return LoggingConfig(
        root={"level": settings.api.log_level, "handlers": ["queue_listener"]},
        formatters={
            "standard": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"}
        },
        log_exceptions="always",
    )


def build_rate_limit_configs(settings: Settings) -> list[RateLimitConfig]:
    """Rate limit configurations, keyed by client address.

    The logs API reads whole files on every call and gets a tighter budget
    than the rest of the API. Each limiter keeps its own store.
    """
    if not settings.rate_limit.enabled:
        return []
    return [
        RateLimitConfig(
            rate_limit=("minute", settings.rate_limit.logs_per_minute),
            check_throttle_handler=is_logs_request,
            store="logs_rate_limit",
        ),
        RateLimitConfig(
            rate_limit=("minute", settings.rate_limit.api_per_minute),
            check_throttle_handler=is_api_request,
            exclude=["/schema"],
            store="api_rate_limit",
        ),
    ]


def build_cors_config(settings: Settings) -> CORSConfig:
    """CORS configuration allowing the dashboard frontend origins."""
    return CORSConfig(
        allow_origins=settings.api.cors_allowed_origins,
        allow_credentials=True,
    )
