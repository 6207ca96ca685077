"""Log writer module - produces the per-level JSON log files."""
from .handler import LevelFileHandler, RecordQueueHandler, file_level_for, start_queued_writer

__all__ = ["LevelFileHandler", "RecordQueueHandler", "file_level_for", "start_queued_writer"]
