"""Schemas for log queries and their results - pure data, no framework dependencies."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

LogLevel = Literal["error", "warn", "info", "debug"]
LevelFilter = Literal["all", "error", "warn", "info", "debug"]

# Order in which files are read when the level filter is "all".
LOG_LEVELS: tuple[LogLevel, ...] = ("error", "warn", "info", "debug")

LogEntry = dict[str, Any]


@dataclass(frozen=True)
class LogQuery:
    """A time-window query over one or more level files."""

    level: LevelFilter
    limit: int
    since: datetime


@dataclass(frozen=True)
class TailQuery:
    """A recency query returning the last lines of one or more level files."""

    level: LevelFilter
    lines: int


@dataclass
class LogFilters:
    """Effective filters echoed back with a log listing."""

    level: str
    since: str
    limit: int


@dataclass
class LogListResult:
    """Entries from the selected level files, newest first."""

    logs: list[LogEntry] = field(default_factory=list)
    count: int = 0
    filters: LogFilters | None = None


@dataclass
class ErrorListResult:
    """Entries from error.log, newest first."""

    errors: list[LogEntry] = field(default_factory=list)
    count: int = 0
    since: str = ""


@dataclass
class TailResult:
    """The most recent entries across the selected level files."""

    logs: list[LogEntry] = field(default_factory=list)
    count: int = 0
