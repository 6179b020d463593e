"""Change notifier: in-process, synchronous event broadcaster for data changes."""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class ChangeEvent(str, Enum):
    """Kinds of change the core announces to its readers."""

    ACTIVITIES_CHANGED = "activities_changed"
    PLANS_CHANGED = "plans_changed"
    CURRENT_PLAN_CHANGED = "current_plan_changed"
    SESSIONS_CHANGED = "sessions_changed"
    SESSION_STATE_CHANGED = "session_state_changed"


Subscriber = Callable[[ChangeEvent, dict[str, Any]], None]


class ChangeNotifier:
    """Keeps a list of subscriber callbacks and calls each one on notify().

    Delivery is synchronous and in subscription order, so a subscriber has
    finished recomputing by the time the mutating call returns. A subscriber
    that raises is logged and skipped; the others still run.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def notify(self, event: ChangeEvent, data: dict[str, Any] | None = None) -> None:
        payload = data or {}
        for callback in list(self._subscribers):
            try:
                callback(event, payload)
            except Exception:
                logger.exception("Subscriber %r failed handling %s", callback, event.value)

    def shutdown(self) -> None:
        """Drop all subscribers."""
        self._subscribers.clear()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
