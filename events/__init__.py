"""
Event infrastructure for the quote notification backend.

- EventBus: async pub/sub registry, constructed once per composition root
- Event kinds published by the quote domain
"""

from events.event_bus import Event, EventBus
from events.events import (
    EventTypes,
    QuoteCreated,
    QuoteDeleted,
    QuoteStatusChanged,
    quote_created,
    quote_deleted,
    quote_status_changed,
)

__all__ = [
    "Event",
    "EventBus",
    "EventTypes",
    "QuoteCreated",
    "QuoteDeleted",
    "QuoteStatusChanged",
    "quote_created",
    "quote_deleted",
    "quote_status_changed",
]
