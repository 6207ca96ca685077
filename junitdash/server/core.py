"""Application factory for creating Litestar app instance."""

from __future__ import annotations

from litestar import Litestar
from litestar.openapi import OpenAPIConfig
from litestar.config.compression import CompressionConfig
from litestar.middleware.logging import LoggingMiddlewareConfig

from junitdash.config.settings import get_settings
from junitdash.server import plugins
from junitdash.server.lifecycle import on_startup, on_shutdown
from junitdash.server.routes import get_route_handlers
from junitdash.api.exceptions import get_exception_handlers


def create_app() -> Litestar:
    """Create and configure the Litestar application.

    This factory function loads configuration and initializes the app
    with proper settings for CORS, OpenAPI, rate limiting, error handling, etc.

    Returns:
        Litestar: Configured application instance
    """
    # Load settings once at app creation
    settings = get_settings()

    # Configure OpenAPI
    openapi_config = OpenAPIConfig(
        title=settings.name,
        version=settings.version,
        description=settings.description,
        create_examples=True,
    )

    compression_config = CompressionConfig(
        backend="brotli",
        minimum_size=1000,  # Only compress responses >= 1KB
        brotli_quality=4,
    )

    logging_middleware_config = LoggingMiddlewareConfig()

    middleware = [logging_middleware_config.middleware]
    middleware.extend(config.middleware for config in plugins.build_rate_limit_configs(settings))

    app = Litestar(
        debug=settings.debug,
        route_handlers=get_route_handlers(),
        on_startup=[on_startup],
        on_shutdown=[on_shutdown],
        exception_handlers=get_exception_handlers(),
        logging_config=plugins.build_logging_config(settings),
        openapi_config=openapi_config,
        compression_config=compression_config,
        cors_config=plugins.build_cors_config(settings),
        middleware=middleware,
    )

    return app
