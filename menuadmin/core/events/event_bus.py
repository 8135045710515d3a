"""Simple in-process event bus.

Delivery is synchronous and limited to subscribers registered on the same bus
instance; nothing is forwarded to other processes or browsers.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from menuadmin.core.events.event_models import EventRecord

EventHandler = Callable[[EventRecord], None]


class EventBus:
    def __init__(self) -> None:
        self._subscribers: Dict[str, List[EventHandler]] = {}

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._subscribers.setdefault(event_type, [])
        handlers.append(handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def subscriber_count(self, event_type: str) -> int:
        return len(self._subscribers.get(event_type, []))

    def publish(self, event: EventRecord) -> None:
        # Copy so handlers may unsubscribe while being dispatched.
        for handler in list(self._subscribers.get(event.event_type, [])):
            handler(event)

    def emit(self, event_type: str, payload: Optional[Dict[str, Any]] = None) -> EventRecord:
        record = EventRecord(event_type=event_type, payload=dict(payload or {}))
        self.publish(record)
        return record
