"""Log query module - read-only access to the per-level log files."""
from .params import build_error_query, build_log_query, build_tail_query
from .schemas import ErrorListResult, LogFilters, LogListResult, LogQuery, TailQuery, TailResult
from .service import LogQueryService

__all__ = [
    "LogQueryService",
    "LogQuery",
    "TailQuery",
    "LogFilters",
    "LogListResult",
    "ErrorListResult",
    "TailResult",
    "build_log_query",
    "build_error_query",
    "build_tail_query",
]
