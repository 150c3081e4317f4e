"""
In-process asynchronous event bus.

This module provides the pub/sub mechanism that lets the quote domain
announce lifecycle changes without depending on the notification domain.
The quote service publishes, the notification bridge subscribes, and neither
imports the other.

Design decisions:
- Explicitly constructed and injected (no module-level singleton), so each
  test and each composition root owns a fresh registry
- Subscriptions are keyed by event kind (``Event.event_type``)
- ``emit`` runs every handler of the kind concurrently on the event loop and
  waits for all of them: it is a fan-out/join, not fire-and-forget
- A failing handler is logged here and never reaches the publisher or the
  sibling handlers
- Handlers may be plain functions or coroutine functions
- Registering an equal handler twice for the same kind is a no-op
- The handler set is snapshotted when ``emit`` starts; (un)registrations
  during an emit take effect from the next one
- The event log keeps only the most recent ``max_log_size`` events and can
  be switched off entirely for long-running processes
"""

import asyncio
import inspect
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, ClassVar, Union
from uuid import uuid4

from core.models import utcnow

logger = logging.getLogger("event_bus")

DEFAULT_MAX_LOG_SIZE = 1000


@dataclass(kw_only=True)
class Event:
    """
    Base class for all events in the system.

    Each concrete event declares its kind in the ``event_type`` class
    attribute and its payload as dataclass fields.

    Attributes:
        event_id: Unique identifier for this event instance
        timestamp: When the event occurred
        source: Which service/component published the event
    """
    event_type: ClassVar[str] = "event"

    source: str = "unknown"
    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=utcnow)

    def __str__(self) -> str:
        return f"Event({self.event_type}, id={self.event_id[:8]}, source={self.source})"


EventHandler = Callable[[Any], Union[None, Awaitable[None]]]
EventKind = Union[str, type[Event]]


def _kind_name(event_kind: EventKind) -> str:
    if isinstance(event_kind, type) and issubclass(event_kind, Event):
        return event_kind.event_type
    return event_kind


class EventBus:
    """
    Asynchronous in-memory event bus.

    Example usage:
        bus = EventBus()

        async def on_status_changed(event: QuoteStatusChanged) -> None:
            ...

        unsubscribe = bus.on(QuoteStatusChanged, on_status_changed)
        await bus.emit(QuoteStatusChanged(quote_id="orc1", previous_status="aberto", new_status="aceito"))
        unsubscribe()
    """

    def __init__(self, log_events: bool = True, max_log_size: int = DEFAULT_MAX_LOG_SIZE):
        # Map of event kind -> handlers, in registration order
        self._handlers: dict[str, list[EventHandler]] = {}

        # Most recent published events, for debugging and tests
        self._event_log: deque[Event] = deque(maxlen=max_log_size)
        self._log_events: bool = log_events

    def on(self, event_kind: EventKind, handler: EventHandler) -> Callable[[], None]:
        """
        Register a handler for one event kind.

        Args:
            event_kind: Kind string (e.g. "quote.status.changed") or the event class
            handler: Called with the event; may return an awaitable

        Returns:
            A function that removes this registration
        """
        kind = _kind_name(event_kind)
        handlers = self._handlers.setdefault(kind, [])
        if handler in handlers:
            logger.debug(f"Handler already registered for '{kind}', ignoring")
        else:
            handlers.append(handler)
            logger.debug(f"Subscribed handler to '{kind}' events")

        def unsubscribe() -> None:
            self.unsubscribe(kind, handler)

        return unsubscribe

    def unsubscribe(self, event_kind: EventKind, handler: EventHandler) -> bool:
        """
        Remove one handler from an event kind.

        Returns:
            True if the handler was found and removed, False otherwise
        """
        kind = _kind_name(event_kind)
        try:
            self._handlers.get(kind, []).remove(handler)
        except ValueError:
            return False
        logger.debug(f"Unsubscribed handler from '{kind}' events")
        return True

    def off(self, event_kind: EventKind) -> None:
        """Remove every handler of one event kind."""
        self._handlers.pop(_kind_name(event_kind), None)

    def clear(self) -> None:
        """Remove every handler of every kind."""
        self._handlers.clear()

    async def emit(self, event: Event) -> None:
        """
        Deliver an event to every handler registered for its kind.

        Handlers run concurrently; this returns once all of them have
        finished, successfully or not. Handler exceptions are logged and
        swallowed.
        """
        if self._log_events:
            self._event_log.append(event)

        handlers = list(self._handlers.get(event.event_type, []))
        if not handlers:
            logger.debug(f"No handlers for event type '{event.event_type}'")
            return

        logger.info(f"Publishing: {event} to {len(handlers)} handler(s)")
        await asyncio.gather(*(self._invoke(handler, event) for handler in handlers))

    async def _invoke(self, handler: EventHandler, event: Event) -> None:
        try:
            result = handler(event)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(
                f"[EventBus] Error in handler for event \"{event.event_type}\": {e!r}",
                exc_info=True,
            )

    def get_subscriber_count(self, event_kind: EventKind) -> int:
        """Get the number of handlers registered for an event kind."""
        return len(self._handlers.get(_kind_name(event_kind), []))

    def get_event_log(self) -> list[Event]:
        """Get the most recent published events, oldest first."""
        return list(self._event_log)

    def set_logging(self, enabled: bool) -> None:
        """Enable or disable event logging."""
        self._log_events = enabled
