"""Logging handler that appends records to the per-level JSON log files."""
from __future__ import annotations

import copy
import logging
import queue
from datetime import datetime, timezone
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from typing import Any

from litestar.serialization import encode_json

from junitdash.services.logquery.params import format_timestamp
from junitdash.services.logquery.schemas import LOG_LEVELS, LogLevel

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


def file_level_for(levelno: int) -> LogLevel:
    """Map a stdlib logging level number to the file it belongs in."""
    if levelno >= logging.ERROR:
        return "error"
    if levelno >= logging.WARNING:
        return "warn"
    if levelno >= logging.INFO:
        return "info"
    return "debug"


class LevelFileHandler(logging.Handler):
    """Write each record as one JSON object per line to ``<level>.log``.

    Entries carry ``timestamp``, ``level``, ``message`` and ``logger``;
    values passed via ``extra=`` are added as top-level fields and
    exception text is stored under ``stack``.
    """

    def __init__(self, log_dir: Path, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def build_entry(self, record: logging.LogRecord) -> dict[str, Any]:
        """Turn ``record`` into the dict written to disk."""
        entry: dict[str, Any] = {
            "timestamp": format_timestamp(datetime.fromtimestamp(record.created, tz=timezone.utc)),
            "level": file_level_for(record.levelno),
            "message": record.getMessage(),
            "logger": record.name,
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                entry[key] = value
        if record.exc_info:
            entry["stack"] = (self.formatter or logging.Formatter()).formatException(record.exc_info)
        return entry

    def append(self, level: LogLevel, entry: dict[str, Any]) -> None:
        """Append ``entry`` as a single line to the file for ``level``."""
        line = encode_json(entry, serializer=str) + b"\n"
        with open(self.log_dir / f"{level}.log", "ab") as file:
            file.write(line)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.append(file_level_for(record.levelno), self.build_entry(record))
        except Exception:
            self.handleError(record)

    def write_entry(self, level: LogLevel, message: str, **meta: Any) -> None:
        """Write an entry directly, bypassing the logging machinery."""
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {level!r}. Expected one of {LOG_LEVELS}.")
        entry = {
            "timestamp": format_timestamp(datetime.now(timezone.utc)),
            "level": level,
            "message": message,
            **meta,
        }
        self.acquire()
        try:
            self.append(level, entry)
        finally:
            self.release()


class RecordQueueHandler(QueueHandler):
    """Queue records for a ``LevelFileHandler`` running on a listener thread.

    Records are enqueued unformatted so the file handler still sees
    ``exc_info`` and ``extra`` fields.
    """

    def prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        record = copy.copy(record)
        record.message = record.getMessage()
        return record


def start_queued_writer(log_dir: Path) -> tuple[RecordQueueHandler, QueueListener]:
    """Start a listener thread that drains queued records into ``log_dir``.

    Attach the returned handler to a logger. Stopping the listener flushes
    the queue and closes the file handler.
    """
    records: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    listener = _ClosingQueueListener(records, LevelFileHandler(log_dir=log_dir), respect_handler_level=True)
    listener.start()
    return RecordQueueHandler(records), listener


class _ClosingQueueListener(QueueListener):
    def stop(self) -> None:
        super().stop()
        for handler in self.handlers:
            handler.close()
