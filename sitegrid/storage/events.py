"""Change notifications for the collection store and the snapshot writer.

The store publishes one event per committed mutation; the snapshot writer
publishes persistence failures and recoveries, possibly from its worker
thread. The UI layer subscribes to show warnings or refresh views.
"""

import logging
import threading
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any

logger = logging.getLogger(__name__)

Handler = Callable[["Event"], None]


class EventType(Enum):
    """Kinds of change a subscriber can listen for."""

    # Websites
    WEBSITE_CREATED = auto()
    WEBSITE_UPDATED = auto()
    WEBSITE_DELETED = auto()
    WEBSITE_VISITED = auto()
    POSITIONS_UPDATED = auto()

    # Tags
    TAG_CREATED = auto()
    TAG_UPDATED = auto()
    TAG_DELETED = auto()

    # Whole collection
    SETTINGS_UPDATED = auto()
    SNAPSHOT_IMPORTED = auto()
    SEED_LOADED = auto()
    STORAGE_CLEARED = auto()

    # Persistence
    PERSISTENCE_FAILED = auto()
    PERSISTENCE_RESTORED = auto()


@dataclass(frozen=True)
class Event:
    """A published change with its payload."""

    type: EventType
    timestamp: datetime
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def website_id(self) -> str | None:
        return self.data.get("website_id")

    @property
    def tag_id(self) -> str | None:
        return self.data.get("tag_id")

    @property
    def message(self) -> str | None:
        """User-facing text, set on persistence events."""
        return self.data.get("message")


class EventBus:
    """Synchronous publish/subscribe hub with a bounded history.

    Handlers run on the publishing thread. A handler that raises is logged
    and skipped; the remaining handlers still run and the publisher never
    sees the error.
    """

    def __init__(self, history_limit: int = 1000):
        self._subscribers: dict[EventType, list[Handler]] = defaultdict(list)
        self._history: list[Event] = []
        self._history_limit = history_limit
        self._lock = threading.Lock()

    def subscribe(self, event_type: EventType, handler: Handler) -> None:
        with self._lock:
            self._subscribers[event_type].append(handler)

    def unsubscribe(self, event_type: EventType, handler: Handler) -> None:
        with self._lock:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

    def publish(self, event: Event) -> None:
        with self._lock:
            self._history.append(event)
            del self._history[: -self._history_limit]
            handlers = list(self._subscribers.get(event.type, ()))

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(f"Event handler failed for {event.type.name}")

    def get_history(
        self, event_type: EventType | None = None, limit: int = 100
    ) -> list[Event]:
        """Most recent events, optionally of one type, oldest first."""
        with self._lock:
            history = list(self._history)
        if event_type is not None:
            history = [e for e in history if e.type is event_type]
        return history[-limit:]

    def clear_history(self) -> None:
        with self._lock:
            self._history.clear()


class EventPublisher:
    """Mixin giving a class an ``event_bus`` and a publish shortcut."""

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus

    def _publish_event(self, event_type: EventType, **data: Any) -> None:
        self.event_bus.publish(
            Event(type=event_type, timestamp=datetime.now(), data=data)
        )
