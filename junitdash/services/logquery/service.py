"""Read-only queries over the per-level JSON log files.

Every call re-reads the files from disk, so results always reflect the
latest content appended by the writer. Missing files and malformed lines
are skipped; any other I/O failure propagates to the caller.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

import aiofiles
import aiofiles.os
from litestar.exceptions import SerializationException
from litestar.serialization import decode_json

from .params import format_timestamp, parse_timestamp
from .schemas import (
    LOG_LEVELS,
    ErrorListResult,
    LevelFilter,
    LogEntry,
    LogFilters,
    LogLevel,
    LogListResult,
    LogQuery,
    TailQuery,
    TailResult,
)

logger = logging.getLogger(__name__)

_UNDATED = datetime.min.replace(tzinfo=timezone.utc)


def parse_log_line(line: str) -> LogEntry | None:
    """Parse one log line. Returns None unless the line is a JSON object."""
    try:
        entry = decode_json(line)
    except SerializationException:
        return None
    if not isinstance(entry, dict):
        return None
    return entry


class LogQueryService:
    """Answers list, errors and tail queries over a log directory.

    Example:
        service = LogQueryService(log_dir=Path("./logs"))
        result = await service.list_logs(build_log_query(level="error"))
    """

    def __init__(self, log_dir: Path) -> None:
        self.log_dir = Path(log_dir)
        logger.debug("Log directory: %s", self.log_dir)

    def log_file(self, level: LogLevel) -> Path:
        """Return the path of the file holding ``level`` entries."""
        return self.log_dir / f"{level}.log"

    @staticmethod
    def selected_levels(level: LevelFilter) -> tuple[LogLevel, ...]:
        """Return the levels whose files a query reads."""
        if level == "all":
            return LOG_LEVELS
        return (level,)

    async def read_lines(self, level: LogLevel) -> list[str]:
        """Return the non-blank lines of a level file, or an empty list if it is missing."""
        path = self.log_file(level)
        if not await aiofiles.os.path.exists(path):
            logger.debug("Log file %s does not exist, skipping.", path)
            return []
        try:
            async with aiofiles.open(path, "r", encoding="utf-8", errors="replace") as file:
                content = await file.read()
        except FileNotFoundError:
            # Rotated away between the existence check and the open.
            logger.debug("Log file %s disappeared before it could be read.", path)
            return []
        return [line for line in content.split("\n") if line.strip()]

    async def _collect_since(self, levels: Iterable[LogLevel], since: datetime) -> list[LogEntry]:
        """Gather entries at or after ``since`` from ``levels``, newest first."""
        dated: list[tuple[datetime, LogEntry]] = []
        skipped = 0
        for level in levels:
            for line in await self.read_lines(level):
                entry = parse_log_line(line)
                if entry is None:
                    skipped += 1
                    continue
                timestamp = parse_timestamp(entry.get("timestamp"))
                if timestamp is None or timestamp < since:
                    continue
                dated.append((timestamp, entry))
        if skipped:
            logger.debug("Skipped %d malformed log lines.", skipped)
        dated.sort(key=lambda item: item[0], reverse=True)
        return [entry for _, entry in dated]

    async def list_logs(self, query: LogQuery) -> LogListResult:
        """Entries of the selected levels newer than ``query.since``, capped at ``query.limit``."""
        entries = await self._collect_since(self.selected_levels(query.level), query.since)
        logs = entries[: query.limit]
        return LogListResult(
            logs=logs,
            count=len(logs),
            filters=LogFilters(
                level=query.level,
                since=format_timestamp(query.since),
                limit=query.limit,
            ),
        )

    async def list_errors(self, query: LogQuery) -> ErrorListResult:
        """Entries of error.log newer than ``query.since``, capped at ``query.limit``."""
        entries = await self._collect_since(("error",), query.since)
        errors = entries[: query.limit]
        return ErrorListResult(
            errors=errors,
            count=len(errors),
            since=format_timestamp(query.since),
        )

    async def tail(self, query: TailQuery) -> TailResult:
        """The most recent entries across the selected level files.

        Only the last ``query.lines`` raw lines of each file are considered,
        so malformed lines among them reduce that file's share. The merged
        result is capped at ``query.lines`` overall. No time window applies;
        entries without a usable timestamp sort after all dated ones.
        """
        collected: list[tuple[datetime, bool, LogEntry]] = []
        for level in self.selected_levels(query.level):
            recent = (await self.read_lines(level))[-query.lines:]
            for line in recent:
                entry = parse_log_line(line)
                if entry is None:
                    continue
                timestamp = parse_timestamp(entry.get("timestamp"))
                collected.append((timestamp or _UNDATED, timestamp is not None, entry))
        collected.sort(key=lambda item: (item[1], item[0]), reverse=True)
        logs = [entry for _, _, entry in collected[: query.lines]]
        return TailResult(logs=logs, count=len(logs))
