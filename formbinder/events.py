"""Event system for form submissions.

This module provides the event data structure and event emitter used to
notify a surrounding UI layer of lifecycle changes. The submission
coordinator emits a typed FormEvent when a submission starts, when it
succeeds or fails, and when server errors are recorded into the form.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from dateutil.parser import isoparse

from .types import EventType, SubmissionState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormEvent:
    """A single event in a form's submission lifecycle.

    Attributes:
        event_id: Unique event identifier (e.g., "evt_3f2a...")
        type: Event type from EventType enum
        ts: UTC timestamp when the event occurred
        state: Form state after this event
        payload: Optional event-specific data (method, url, errors...)

    Examples:
        >>> from datetime import datetime, timezone
        >>> event = FormEvent(
        ...     event_id="evt_001",
        ...     type=EventType.SUBMISSION_STARTED,
        ...     ts=datetime.now(timezone.utc),
        ...     state=SubmissionState.PROCESSING,
        ...     payload={"method": "post", "url": "/save"},
        ... )
        >>> event.to_dict()["type"]
        'submission.started'
    """
    event_id: str
    type: EventType
    ts: datetime
    state: SubmissionState
    payload: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        """Normalize string enums."""
        if isinstance(self.state, str):
            object.__setattr__(self, "state", SubmissionState(self.state))
        if isinstance(self.type, str):
            object.__setattr__(self, "type", EventType(self.type))

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization.

        Timestamp is formatted as ISO 8601 string.
        """
        result: Dict[str, Any] = {
            "eventId": self.event_id,
            "type": self.type.value,
            "ts": self.ts.isoformat(),
            "state": self.state.value,
        }
        if self.payload is not None:
            result["payload"] = self.payload
        return result

    def to_jsonl(self) -> str:
        """Convert event to single-line JSON."""
        return json.dumps(self.to_dict(), separators=(',', ':'))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormEvent":
        """Create FormEvent from dictionary (camelCase keys)."""
        return cls(
            event_id=data["eventId"],
            type=EventType(data["type"]),
            ts=isoparse(data["ts"]),
            state=SubmissionState(data["state"]),
            payload=data.get("payload"),
        )


EventListener = Callable[[FormEvent], None]


class EventEmitter:
    """Dispatches FormEvents to registered listeners.

    Listeners are called synchronously in registration order: type-specific
    listeners first, then wildcard listeners. A failing listener is logged
    and does not prevent the others from running.

    Examples:
        >>> emitter = EventEmitter()
        >>> seen = []
        >>> emitter.on(EventType.SUBMISSION_FAILED, seen.append)
        >>> emitter.listener_count()
        1
    """

    def __init__(self):
        self._listeners: Dict[EventType, List[EventListener]] = {}
        self._any_listeners: List[EventListener] = []

    def on(self, event_type: EventType, listener: EventListener) -> None:
        """Subscribe to a specific event type."""
        self._listeners.setdefault(event_type, []).append(listener)

    def on_any(self, listener: EventListener) -> None:
        """Subscribe to every event type."""
        self._any_listeners.append(listener)

    def off(self, event_type: EventType, listener: EventListener) -> None:
        """Unsubscribe from a specific event type. Unknown listeners are ignored."""
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def off_any(self, listener: EventListener) -> None:
        """Unsubscribe a wildcard listener. Unknown listeners are ignored."""
        if listener in self._any_listeners:
            self._any_listeners.remove(listener)

    def emit(self, event: FormEvent) -> None:
        """Dispatch an event to all registered listeners."""
        listeners = list(self._listeners.get(event.type, [])) + list(self._any_listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed on %s", listener, event.type.value)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners.clear()
        self._any_listeners.clear()

    def listener_count(self, event_type: Optional[EventType] = None) -> int:
        """Count registered listeners, for one type or in total (wildcards included)."""
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return len(self._any_listeners) + sum(len(l) for l in self._listeners.values())


__all__ = [
    "FormEvent",
    "EventListener",
    "EventEmitter",
]
