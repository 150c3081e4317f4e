"""
Event definitions for the quote lifecycle.

This module defines the domain events the quote service publishes.
Events represent facts about things that have happened in the system.

Design decisions:
- One dataclass per event kind; the kind string lives on the class
  (``event_type``) and the bus dispatches on it
- Events are named in past tense (QuoteStatusChanged, not ChangeQuoteStatus)
- Events carry what subscribers need to react without a second lookup of
  the change itself (both statuses are included)
- ``payload()`` gives the camelCase wire shape used across process
  boundaries

These events are owned by the publishing (quote) domain; the notification
domain depends on them, never the other way around.
"""

from dataclasses import dataclass
from typing import Any, ClassVar

from events.event_bus import Event


class EventTypes:
    """
    Constants for event kind names.

    Using constants prevents typos and makes it easy to see all event kinds.
    """
    QUOTE_STATUS_CHANGED = "quote.status.changed"
    QUOTE_CREATED = "quote.created"
    QUOTE_DELETED = "quote.deleted"


@dataclass(kw_only=True)
class QuoteStatusChanged(Event):
    """
    Published when a quote moves from one status to another.

    This is the event that drives notification generation (into the
    accepted status) and retraction (out of it).
    """
    event_type: ClassVar[str] = EventTypes.QUOTE_STATUS_CHANGED

    quote_id: str
    previous_status: str
    new_status: str

    def payload(self) -> dict[str, Any]:
        return {
            "quoteId": self.quote_id,
            "previousStatus": self.previous_status,
            "newStatus": self.new_status,
        }


@dataclass(kw_only=True)
class QuoteCreated(Event):
    """Published when a new quote is registered."""
    event_type: ClassVar[str] = EventTypes.QUOTE_CREATED

    quote_id: str
    cliente_id: str

    def payload(self) -> dict[str, Any]:
        return {"quoteId": self.quote_id, "clienteId": self.cliente_id}


@dataclass(kw_only=True)
class QuoteDeleted(Event):
    """Published when a quote is removed."""
    event_type: ClassVar[str] = EventTypes.QUOTE_DELETED

    quote_id: str

    def payload(self) -> dict[str, Any]:
        return {"quoteId": self.quote_id}


# =============================================================================
# Factories
# =============================================================================

def quote_status_changed(
    quote_id: str,
    previous_status: str,
    new_status: str,
    source: str = "quote-service",
) -> QuoteStatusChanged:
    """Create a QuoteStatusChanged event."""
    return QuoteStatusChanged(
        source=source,
        quote_id=quote_id,
        previous_status=previous_status,
        new_status=new_status,
    )


def quote_created(quote_id: str, cliente_id: str, source: str = "quote-service") -> QuoteCreated:
    """Create a QuoteCreated event."""
    return QuoteCreated(source=source, quote_id=quote_id, cliente_id=cliente_id)


def quote_deleted(quote_id: str, source: str = "quote-service") -> QuoteDeleted:
    """Create a QuoteDeleted event."""
    return QuoteDeleted(source=source, quote_id=quote_id)
