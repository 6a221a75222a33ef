"""Managers that operate on battle state: rosters and logging."""

from .log_manager import LogCategory, LogEntry, LogLevel, LogManager
from .roster_manager import RosterManager

__all__ = ["LogCategory", "LogEntry", "LogLevel", "LogManager", "RosterManager"]
