"""Health check endpoint."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from litestar import get

from junitdash.services.logquery.params import format_timestamp


@get("/health")
async def health() -> dict[str, Any]:
    """Liveness check for the API."""
    return {
        "success": True,
        "message": "JUnit Test Results API is running",
        "timestamp": format_timestamp(datetime.now(timezone.utc)),
    }
