"""Log API endpoints backed by the per-level log files."""
from __future__ import annotations

from typing import Annotated, Any

from litestar import Controller, get
from litestar.di import Provide
from litestar.params import Parameter
from litestar.openapi.spec import Example

from junitdash.services.logquery import (
    LogQueryService,
    build_error_query,
    build_log_query,
    build_tail_query,
)
from junitdash.api.dependencies import provide_log_query_service

# Raw strings so that malformed values fall back to defaults instead of a 400.
LevelParam = Annotated[
    str | None,
    Parameter(
        description="Log level to read: error, warn, info, debug or all (default).",
        examples=[Example(value="error")],
        required=False,
    ),
]
MinutesParam = Annotated[
    str | None,
    Parameter(description="Only return entries from the last N minutes.", required=False),
]
SinceParam = Annotated[
    str | None,
    Parameter(
        description="ISO 8601 cutoff. Takes precedence over minutes.",
        examples=[Example(value="2024-01-01T00:00:00Z")],
        required=False,
    ),
]


class LogsController(Controller):
    """Log endpoints

    Read-only views over error.log, warn.log, info.log and debug.log.
    """
    path = "/api/v1/logs"
    tags = ["Logs"]

    dependencies = {
        "log_query_service": Provide(provide_log_query_service, sync_to_thread=False),
    }

    @get("/", description="Fetch recent log entries, newest first.")
    async def list_logs(
        self,
        log_query_service: LogQueryService,
        level: LevelParam = None,
        limit: Annotated[
            str | None,
            Parameter(description="Maximum entries to return (default 100, max 1000).", required=False),
        ] = None,
        minutes: MinutesParam = None,
        since: SinceParam = None,
    ) -> dict[str, Any]:
        """List log entries filtered by level and time window."""
        query = build_log_query(level=level, limit=limit, minutes=minutes, since=since)
        result = await log_query_service.list_logs(query)
        return {"success": True, "data": result}

    @get("/errors", description="Fetch recent error log entries, newest first.")
    async def list_errors(
        self,
        log_query_service: LogQueryService,
        limit: Annotated[
            str | None,
            Parameter(description="Maximum entries to return (default 50, max 1000).", required=False),
        ] = None,
        minutes: MinutesParam = None,
        since: SinceParam = None,
    ) -> dict[str, Any]:
        """List error.log entries within the time window (default last 10 minutes)."""
        query = build_error_query(limit=limit, minutes=minutes, since=since)
        result = await log_query_service.list_errors(query)
        return {"success": True, "data": result}

    @get("/tail", description="Tail the most recent log entries regardless of age.")
    async def tail_logs(
        self,
        log_query_service: LogQueryService,
        level: LevelParam = None,
        lines: Annotated[
            str | None,
            Parameter(description="Number of entries to return (default 50, max 500).", required=False),
        ] = None,
    ) -> dict[str, Any]:
        """Return the last lines of the selected log files."""
        query = build_tail_query(level=level, lines=lines)
        result = await log_query_service.tail(query)
        return {"success": True, "data": result}
