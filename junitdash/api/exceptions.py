"""Centralised exception handlers.

Every failure is reported as ``{"success": false, "error": <message>}``.
"""
from __future__ import annotations

import logging
from typing import Any

from litestar import Request, Response
from litestar.exceptions import HTTPException, NotFoundException, TooManyRequestsException
from litestar.status_codes import HTTP_404_NOT_FOUND, HTTP_429_TOO_MANY_REQUESTS, HTTP_500_INTERNAL_SERVER_ERROR
from litestar.types import ExceptionHandlersMap

from junitdash.server.plugins import is_logs_request

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 60


def _error_response(
    error: str,
    status_code: int,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> Response[dict[str, Any]]:
    return Response(
        content={"success": False, "error": error, **extra},
        status_code=status_code,
        headers=headers,
    )


def not_found_handler(request: Request, exc: NotFoundException) -> Response[dict[str, Any]]:
    """Unknown routes."""
    return _error_response("Endpoint not found", HTTP_404_NOT_FOUND)


def too_many_requests_handler(request: Request, exc: TooManyRequestsException) -> Response[dict[str, Any]]:
    """Clients over their rate limit. Rate limit headers are passed through."""
    if is_logs_request(request):
        message = "Too many requests to logs API. Please try again later."
    else:
        message = "Too many requests. Please try again later."
    return _error_response(
        message,
        HTTP_429_TOO_MANY_REQUESTS,
        headers=exc.headers,
        retryAfter=RETRY_AFTER_SECONDS,
    )


def http_exception_handler(request: Request, exc: HTTPException) -> Response[dict[str, Any]]:
    """Any other HTTP error raised by the framework or a handler."""
    return _error_response(exc.detail, exc.status_code, headers=exc.headers)


def internal_error_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Unexpected failures. The error is logged and the request fails with a 500."""
    logger.error(
        "Unhandled error on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    message = "Internal server error"
    if request.app.debug:
        message = f"{message}: {exc}"
    return _error_response(message, HTTP_500_INTERNAL_SERVER_ERROR)


def get_exception_handlers() -> ExceptionHandlersMap:
    """Get the exception handlers for the application."""
    return {
        NotFoundException: not_found_handler,
        TooManyRequestsException: too_many_requests_handler,
        HTTPException: http_exception_handler,
        Exception: internal_error_handler,
    }
