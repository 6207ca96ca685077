"""Services layer - log file access."""
from .logquery import LogQueryService
from .logwriter import LevelFileHandler

__all__ = ["LogQueryService", "LevelFileHandler"]
