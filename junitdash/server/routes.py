"""Central route registration."""
from litestar.types import ControllerRouterHandler

from junitdash.api.v1.logs_controller import LogsController
from junitdash.api.v1.health import health


def get_route_handlers() -> list[ControllerRouterHandler]:
    """Get all route handlers for the application."""
    return [
        LogsController,
        health,
    ]
