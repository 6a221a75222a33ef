"""
Event management system for decoupled engine/presentation communication.

This module provides a central event bus that lets the battle engine notify
renderers, loggers and input collaborators through events instead of direct
references, following the publisher-subscriber pattern.

The battle runs on a single logical thread, so the bus does no locking.
"""

from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .events import GameEvent, EventType


class EventPriority(Enum):
    """Event processing priorities (lower value is processed first)."""
    CRITICAL = 1
    HIGH = 2
    NORMAL = 3
    LOW = 4


@dataclass
class QueuedEvent:
    """An event in the processing queue with metadata."""
    event: "GameEvent"
    priority: EventPriority = EventPriority.NORMAL
    timestamp: datetime = field(default_factory=datetime.now)
    source: Optional[str] = None  # For debugging

    def __lt__(self, other: "QueuedEvent") -> bool:
        """Compare events for priority queue ordering."""
        if self.priority.value != other.priority.value:
            return self.priority.value < other.priority.value
        # If same priority, older events come first
        return self.timestamp < other.timestamp


EventSubscriber = Callable[["GameEvent"], None]


class EventManager:
    """Central event bus for battle notifications."""

    def __init__(self):
        # Event subscribers by event type
        self._subscribers: dict["EventType", list[EventSubscriber]] = defaultdict(list)
        self._subscriber_names: dict[EventSubscriber, str] = {}

        # Event processing queue
        self._event_queue: deque[QueuedEvent] = deque()

        # Statistics
        self._events_published = 0
        self._events_processed = 0
        self._subscriber_errors = 0
        self._last_subscriber_error: Optional[str] = None

    def subscribe(
        self,
        event_type: "EventType",
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Subscribe to events of a specific type.

        Args:
            event_type: The type of events to subscribe to
            subscriber: Callback function to handle events
            subscriber_name: Optional name used when reporting subscriber errors
        """
        self._subscribers[event_type].append(subscriber)
        self._subscriber_names[subscriber] = subscriber_name or getattr(subscriber, '__name__', 'anonymous')

    def publish(
        self,
        event: "GameEvent",
        priority: EventPriority = EventPriority.NORMAL,
        source: Optional[str] = None
    ) -> None:
        """Queue an event for processing on the next ``process_events`` call.

        Args:
            event: The event to publish
            priority: Processing priority for the event
            source: Optional source identifier for debugging
        """
        self._event_queue.append(QueuedEvent(event=event, priority=priority, source=source or "unknown"))
        self._events_published += 1

    def publish_immediate(self, event: "GameEvent", source: Optional[str] = None) -> None:
        """Publish and immediately process an event.

        Returns only after every subscriber has returned, so a presentation
        subscriber that blocks until its animation finishes acknowledges the
        step by returning.
        """
        self._events_published += 1
        self._process_event(QueuedEvent(event=event, priority=EventPriority.CRITICAL, source=source or "immediate"))

    def process_events(self) -> int:
        """Process every queued event.

        Events published by subscribers while this runs wait for the next call.

        Returns:
            Number of events processed
        """
        # sorted() is stable, so equal priority/timestamp keep publish order
        sorted_events = sorted(self._event_queue)
        self._event_queue.clear()

        for queued_event in sorted_events:
            self._process_event(queued_event)

        return len(sorted_events)

    def _process_event(self, queued_event: QueuedEvent) -> None:
        """Process a single event by notifying all subscribers."""
        event = queued_event.event
        self._events_processed += 1

        subscribers = self._subscribers.get(event.event_type, [])
        for subscriber in subscribers[:]:  # Use slice to avoid modification during iteration
            self._notify(subscriber, event)

    def _notify(self, subscriber: EventSubscriber, event: "GameEvent") -> None:
        # A failing presentation subscriber must not break the battle loop
        try:
            subscriber(event)
        except Exception as e:
            self._subscriber_errors += 1
            self._last_subscriber_error = (
                f"{self._subscriber_names.get(subscriber, 'anonymous')} failed on "
                f"{event.__class__.__name__}: {e}"
            )

    def get_statistics(self) -> dict[str, Any]:
        """Get event processing statistics."""
        return {
            'events_published': self._events_published,
            'events_processed': self._events_processed,
            'events_queued': len(self._event_queue),
            'subscriber_errors': self._subscriber_errors,
            'last_subscriber_error': self._last_subscriber_error,
            'subscribers_count': sum(len(subs) for subs in self._subscribers.values()),
        }

    def has_queued_events(self) -> bool:
        """Check if there are events waiting to be processed."""
        return len(self._event_queue) > 0
