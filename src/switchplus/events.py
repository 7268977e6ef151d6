import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class EventType:
    """Centralized event names emitted by the arcade core."""

    # payload: {"level": int}
    LEVEL_UP = "level.up"

    # payload: {"amount": int, "reason": str}
    XP_ADDED = "xp.added"

    # payload: {"feature_id": str}
    FEATURE_UNLOCKED = "feature.unlocked"

    # payload: {"theme": Theme}
    THEME_CHANGED = "theme.changed"


class EventBus:
    """A lightweight publish/subscribe event bus.

    - Subscribers register handlers for event names (strings).
    - Emit broadcasts payloads to all handlers of that event, in subscription order.

    Delivery is synchronous and fire-and-forget; with no subscriber the event is dropped.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Callable[[Any], None]]] = {}

    def subscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        """Subscribe a handler to an event name."""
        if not callable(handler):
            raise TypeError("handler must be callable")
        self._handlers.setdefault(event, []).append(handler)
        logger.debug("Subscribed handler %s to event '%s'", getattr(handler, "__name__", str(handler)), event)

    def unsubscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        """Unsubscribe a handler from an event name. Silently ignores if not present."""
        if event in self._handlers and handler in self._handlers[event]:
            self._handlers[event].remove(handler)
            logger.debug("Unsubscribed handler %s from event '%s'", getattr(handler, "__name__", str(handler)), event)

    def emit(self, event: str, payload: Any = None) -> None:
        """Emit an event with an optional payload to all subscribed handlers.

        Handler exceptions are caught and logged, allowing other handlers to still run.
        """
        handlers = list(self._handlers.get(event, []))
        logger.debug("Emitting event '%s' to %d handlers with payload: %r", event, len(handlers), payload)
        for handler in handlers:
            try:
                handler(payload)
            except Exception as exc:  # noqa: BLE001 - handlers are external UI code
                logger.exception("Error in event handler for '%s': %s", event, exc)
