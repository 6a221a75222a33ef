"""
Log management system for battle messages and debugging.

This module provides centralized logging with categorization, filtering,
and bounded storage. Components never print; they publish ``LogMessage``
events and the log manager collects them.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from ...core.events import DebugMessage, EventType, LogMessage as LogEvent

if TYPE_CHECKING:
    from ...core.events import EventManager


class LogCategory(Enum):
    """Categories for log messages."""
    SYSTEM = auto()     # System messages (initialization, loading, etc.)
    BATTLE = auto()     # Combat-related messages
    ROSTER = auto()     # Slot substitution messages
    AI = auto()         # Opponent decision messages
    TIMELINE = auto()   # Scheduler messages
    INPUT = auto()      # Player input messages
    DEBUG = auto()      # Debug messages
    WARNING = auto()    # Warning messages
    ERROR = auto()      # Error messages


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.BATTLE: "BTL",
    LogCategory.ROSTER: "RST",
    LogCategory.AI: "AI",
    LogCategory.TIMELINE: "TML",
    LogCategory.INPUT: "INP",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass
class LogEntry:
    """A single log message with metadata."""
    text: str
    category: LogCategory
    level: LogLevel = LogLevel.INFO
    source: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        """Format the message for display."""
        parts = []

        if include_timestamp:
            parts.append(f"[{self.timestamp.strftime('%H:%M:%S')}]")

        if include_category:
            parts.append(f"[{CATEGORY_TAGS.get(self.category, '???')}]")

        parts.append(self.text)
        return " ".join(parts)


class LogManager:
    """Manages battle logging with categorization and filtering."""

    def __init__(
        self,
        event_manager: "EventManager",
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO
    ):
        """Initialize the log manager.

        Args:
            event_manager: Event manager to collect log events from
            max_messages: Maximum number of messages to store in the buffer
            default_level: Default log level for filtering
        """
        self.messages: deque[LogEntry] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.enabled_categories = set(LogCategory)
        self.event_manager = event_manager

        # Categories whose minimum level differs from INFO
        self.category_levels = {
            LogCategory.DEBUG: LogLevel.DEBUG,
            LogCategory.INPUT: LogLevel.DEBUG,
            LogCategory.AI: LogLevel.DEBUG,
            LogCategory.TIMELINE: LogLevel.DEBUG,
            LogCategory.WARNING: LogLevel.WARNING,
            LogCategory.ERROR: LogLevel.ERROR,
        }

        self._setup_event_subscriptions()

    def _setup_event_subscriptions(self) -> None:
        """Set up event subscriptions for centralized logging."""
        self.event_manager.subscribe(
            EventType.LOG_MESSAGE,
            self._handle_log_message_event,
            subscriber_name="LogManager.log_message"
        )
        self.event_manager.subscribe(
            EventType.DEBUG_MESSAGE,
            self._handle_debug_message_event,
            subscriber_name="LogManager.debug_message"
        )

    def _handle_log_message_event(self, event) -> None:
        """Store a LogMessage event, mapping its strings to enums."""
        if not isinstance(event, LogEvent):
            return

        try:
            category = LogCategory[event.category.upper()]
        except (KeyError, AttributeError):
            category = LogCategory.SYSTEM

        try:
            level = LogLevel[event.level.upper()]
        except (KeyError, AttributeError):
            level = LogLevel.INFO

        # Warnings and errors from any category surface under their own tag
        if level is LogLevel.WARNING and category is not LogCategory.ERROR:
            category = LogCategory.WARNING
        elif level is LogLevel.ERROR:
            category = LogCategory.ERROR

        self.log(event.message, category, level, event.source)

    def _handle_debug_message_event(self, event) -> None:
        """Store a DebugMessage event as a debug entry."""
        if isinstance(event, DebugMessage):
            self.log(f"[{event.source}] {event.message}", LogCategory.DEBUG, LogLevel.DEBUG, event.source)

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM,
            level: Optional[LogLevel] = None, source: Optional[str] = None) -> None:
        """Add a message to the log.

        Args:
            text: The message text
            category: The category of the message
            level: Explicit level; defaults to the category's level
            source: Component that produced the message
        """
        if level is None:
            level = self.category_levels.get(category, LogLevel.INFO)
        self.messages.append(LogEntry(text=text, category=category, level=level, source=source))

    # Convenience methods for common categories
    def system(self, text: str) -> None:
        self.log(text, LogCategory.SYSTEM)

    def battle(self, text: str) -> None:
        self.log(text, LogCategory.BATTLE)

    def warning(self, text: str) -> None:
        self.log(text, LogCategory.WARNING)

    def error(self, text: str) -> None:
        self.log(text, LogCategory.ERROR)

    def debug(self, text: str) -> None:
        self.log(text, LogCategory.DEBUG)

    def get_messages(self, count: Optional[int] = None,
                     categories: Optional[set[LogCategory]] = None) -> list[LogEntry]:
        """Get recent messages, optionally filtered by category.

        Args:
            count: Maximum number of messages to return (None for all)
            categories: Set of categories to include (None for all enabled)

        Returns:
            List of recent messages
        """
        if categories:
            filtered = [msg for msg in self.messages
                        if msg.category in categories and msg.category in self.enabled_categories]
        else:
            filtered = [
                msg for msg in self.messages
                if msg.category in self.enabled_categories
                and msg.level.value >= self.log_level.value
            ]

        if count is not None and count < len(filtered):
            return filtered[-count:]
        return filtered

    def get_formatted_messages(self, count: Optional[int] = None) -> list[str]:
        return [msg.format() for msg in self.get_messages(count)]

    def clear(self) -> None:
        """Clear all messages from the log."""
        self.messages.clear()

    def enable_category(self, category: LogCategory) -> None:
        self.enabled_categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        self.enabled_categories.discard(category)

    def set_log_level(self, level: LogLevel) -> None:
        self.log_level = level

    def is_debug_enabled(self) -> bool:
        """Check if debug messages are currently enabled."""
        return (LogCategory.DEBUG in self.enabled_categories and
                self.log_level == LogLevel.DEBUG)

    def toggle_debug(self) -> None:
        """Toggle debug message visibility."""
        if self.is_debug_enabled():
            self.disable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.INFO)
        else:
            self.enable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.DEBUG)

    def save_log_to_file(self, log_dir: str = "logs") -> Optional[str]:
        """Save all messages to a timestamped log file.

        Returns:
            Path of the written file, or None if the write failed
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = os.path.join(log_dir, f"battle_{timestamp}.log")

        try:
            os.makedirs(log_dir, exist_ok=True)

            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("cardclash - Battle Log\n")
                f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("=" * 60 + "\n\n")

                if not self.messages:
                    f.write("No messages to save.\n")
                # Every buffered message is written, regardless of current filters
                for msg in self.messages:
                    timestamp_str = msg.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
                    f.write(f"[{timestamp_str}] [{msg.category.name}] {msg.text}\n")
        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return None

        self.system(f"Battle log saved to {filepath}")
        return filepath
