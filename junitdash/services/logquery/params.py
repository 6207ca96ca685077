"""Lenient normalisation of log query parameters.

Query values arrive as raw strings. Anything that cannot be understood falls
back to the endpoint default instead of failing the request.
"""
from __future__ import annotations

import re
import sys
from datetime import datetime, timedelta, timezone
from typing import Any

from .schemas import LOG_LEVELS, LevelFilter, LogQuery, TailQuery

MAX_LIMIT = 1000
MAX_TAIL_LINES = 500

DEFAULT_LOGS_LIMIT = 100
DEFAULT_LOGS_MINUTES = 60
DEFAULT_ERRORS_LIMIT = 50
DEFAULT_ERRORS_MINUTES = 10
DEFAULT_TAIL_LINES = 50

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_int(value: str | None, default: int, maximum: int | None = None) -> int:
    """Parse the leading integer of ``value``.

    Trailing garbage is ignored (``"25abc"`` is 25). Missing, non-numeric,
    zero and negative values give ``default``. The result is clamped to
    ``maximum`` when one is given. Digit runs too long to convert count
    as over the cap.
    """
    if value is None:
        return default
    match = _LEADING_INT.match(value)
    if match is None:
        return default
    digits = match.group(1)
    try:
        number = int(digits)
    except ValueError:
        # Too many digits to convert; treat as larger than any cap.
        if digits.startswith("-"):
            return default
        return maximum if maximum is not None else sys.maxsize
    if number <= 0:
        return default
    if maximum is not None:
        return min(number, maximum)
    return number


def parse_level(value: str | None) -> LevelFilter:
    """Return a known level name, or ``"all"`` for anything else."""
    if value is None:
        return "all"
    level = value.strip().lower()
    if level in LOG_LEVELS:
        return level  # type: ignore[return-value]
    return "all"


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a log or query timestamp into an aware UTC datetime.

    Accepts ISO-8601 strings (a trailing ``Z`` is allowed, naive values are
    read as UTC) and numeric epoch milliseconds. Returns None when the value
    cannot be interpreted as a date.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    try:
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        # Offset pushes the instant outside the representable range.
        return None


def format_timestamp(value: datetime) -> str:
    """Render ``value`` as ISO-8601 UTC with millisecond precision, e.g. ``2024-01-01T00:00:00.000Z``."""
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def resolve_since(
    since: str | None,
    minutes: str | None,
    default_minutes: int,
    now: datetime | None = None,
) -> datetime:
    """Work out the since cutoff for a time-window query.

    An explicit, parseable ``since`` wins. Otherwise the cutoff is ``minutes``
    before ``now``.
    """
    explicit = parse_timestamp(since) if since else None
    if explicit is not None:
        return explicit
    now = now or datetime.now(timezone.utc)
    window = parse_int(minutes, default_minutes)
    try:
        return now - timedelta(minutes=window)
    except OverflowError:
        return _EARLIEST


def build_log_query(
    level: str | None = None,
    limit: str | None = None,
    minutes: str | None = None,
    since: str | None = None,
    now: datetime | None = None,
) -> LogQuery:
    """Build the query for ``GET /api/v1/logs``."""
    return LogQuery(
        level=parse_level(level),
        limit=parse_int(limit, DEFAULT_LOGS_LIMIT, MAX_LIMIT),
        since=resolve_since(since, minutes, DEFAULT_LOGS_MINUTES, now=now),
    )


def build_error_query(
    limit: str | None = None,
    minutes: str | None = None,
    since: str | None = None,
    now: datetime | None = None,
) -> LogQuery:
    """Build the query for ``GET /api/v1/logs/errors``."""
    return LogQuery(
        level="error",
        limit=parse_int(limit, DEFAULT_ERRORS_LIMIT, MAX_LIMIT),
        since=resolve_since(since, minutes, DEFAULT_ERRORS_MINUTES, now=now),
    )


def build_tail_query(level: str | None = None, lines: str | None = None) -> TailQuery:
    """Build the query for ``GET /api/v1/logs/tail``."""
    return TailQuery(
        level=parse_level(level),
        lines=parse_int(lines, DEFAULT_TAIL_LINES, MAX_TAIL_LINES),
    )
