"""Shared dependency providers for API layer."""
from __future__ import annotations

from litestar import Request
from litestar.exceptions import ServiceUnavailableException

from junitdash.services.logquery import LogQueryService


def provide_log_query_service(request: Request) -> LogQueryService:
    """Provide the LogQueryService from app state.

    Raises ServiceUnavailableException if startup has not attached it.
    """
    service: LogQueryService | None = getattr(request.app.state, "log_query_service", None)
    if service is None:
        raise ServiceUnavailableException(detail="Log query service is not available")
    return service
