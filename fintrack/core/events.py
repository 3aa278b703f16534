from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, NamedTuple

__all__ = [
    "Event",
    "EventBus",
    "TRANSACTION_CREATED",
    "TRANSACTION_UPDATED",
    "TRANSACTION_DELETED",
]


class Event(NamedTuple):
    name: str
    ts: str
    payload: Dict[str, Any]


Handler = Callable[[Event], Any]


class EventBus:
    """Synchronous in-process publish/subscribe used for domain events."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)

    def publish(self, name: str, payload: Dict[str, Any]) -> List[Any]:
        handlers = self._subscribers.get(name)
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now(timezone.utc).isoformat(), payload=payload)
        return [handler(event) for handler in list(handlers)]


TRANSACTION_CREATED = "TRANSACTION_CREATED"
TRANSACTION_UPDATED = "TRANSACTION_UPDATED"
TRANSACTION_DELETED = "TRANSACTION_DELETED"
