"""Application lifecycle hooks for startup and shutdown."""

from __future__ import annotations

import logging
from logging.handlers import QueueHandler, QueueListener
from typing import TYPE_CHECKING

from junitdash.config.settings import get_settings
from junitdash.services.logquery import LogQueryService
from junitdash.services.logwriter import start_queued_writer

if TYPE_CHECKING:
    from litestar import Litestar

logger = logging.getLogger(__name__)

APP_LOGGER_NAME = "junitdash"


async def on_startup(app: "Litestar") -> None:
    """Prepare the log directory and attach the log services to app state.

    - When enabled, the dashboard's own logs are appended to the per-level
      files so they show up in the logs API alongside everything else. File
      writes happen on a queue listener thread, off the event loop.
    """
    settings = get_settings()
    log_dir = settings.logs.dir

    if settings.logs.create_dir:
        log_dir.mkdir(parents=True, exist_ok=True)

    app.state.log_query_service = LogQueryService(log_dir=log_dir)

    if settings.logs.write_app_logs:
        queue_handler, listener = start_queued_writer(log_dir)
        logging.getLogger(APP_LOGGER_NAME).addHandler(queue_handler)
        app.state.level_file_queue_handler = queue_handler
        app.state.level_file_listener = listener

    logger.info(
        "Server running on %s:%s in %s mode",
        settings.api.host,
        settings.api.port,
        settings.environment,
    )


async def on_shutdown(app: "Litestar") -> None:
    """Detach the level file writer and flush what it has queued."""
    queue_handler: QueueHandler | None = getattr(app.state, "level_file_queue_handler", None)
    if queue_handler:
        logging.getLogger(APP_LOGGER_NAME).removeHandler(queue_handler)
        queue_handler.close()

    listener: QueueListener | None = getattr(app.state, "level_file_listener", None)
    if listener:
        listener.stop()
        logger.info("Stopped level file writer")
