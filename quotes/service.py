"""
Quote lifecycle service.

This service manages quote status changes and publishes events when they
happen. It represents the quote domain of the backend.

Key points:
- This service ONLY publishes events
- It does NOT call the notification generator
- It doesn't even know notifications exist; the notification domain
  subscribes to its events instead, which keeps the dependency one-way
"""

import logging

from core.models import Quote, QuoteStatus, utcnow
from core.store import QuoteRepository
from events.event_bus import EventBus
from events.events import quote_created, quote_deleted, quote_status_changed

logger = logging.getLogger("quote_service")


class QuoteService:
    """
    Quote lifecycle operations that publish events.

    Example:
        service = QuoteService(event_bus=bus, quotes=data_store.quotes)

        # Accept a quote - this publishes a QuoteStatusChanged event
        await service.change_status("orc-001", "aceito")

        # The notification bridge (if started) will receive the event
        # and generate notifications - but this service doesn't know that!
    """

    def __init__(
        self,
        event_bus: EventBus,
        quotes: QuoteRepository,
        accepted_status: str = QuoteStatus.ACEITO.value,
    ):
        """
        Initialize the quote service.

        Args:
            event_bus: Event bus for publishing events
            quotes: Quote repository
            accepted_status: Status that stamps the acceptance date
        """
        self.event_bus = event_bus
        self.quotes = quotes
        self.accepted_status = accepted_status

    async def create_quote(self, quote: Quote) -> Quote:
        """Register a quote and publish QuoteCreated."""
        saved = await self.quotes.save(quote)
        logger.info(f"Quote {saved.id} created (#{saved.numero})")
        await self.event_bus.emit(quote_created(saved.id, saved.cliente_id))
        return saved

    async def change_status(self, quote_id: str, new_status: str) -> Quote:
        """
        Move a quote to ``new_status`` and publish QuoteStatusChanged.

        Moving into the accepted status stamps ``data_aceite`` with the
        current time; any other move leaves it untouched.

        Raises:
            NotFoundError: if the quote does not exist
        """
        quote = await self.quotes.find_by_id(quote_id)
        previous_status = quote.status

        update: dict = {"status": new_status, "updated_at": utcnow()}
        if new_status == self.accepted_status:
            update["data_aceite"] = utcnow()
        updated = await self.quotes.save(quote.model_copy(update=update))

        logger.info(f"Quote {quote_id} status: {previous_status} -> {new_status}")

        # Publish the event - the notification domain reacts to it
        await self.event_bus.emit(
            quote_status_changed(
                quote_id=quote_id,
                previous_status=previous_status,
                new_status=new_status,
            )
        )
        return updated

    async def delete_quote(self, quote_id: str) -> None:
        """
        Delete a quote and publish QuoteDeleted.

        Raises:
            NotFoundError: if the quote does not exist
        """
        await self.quotes.delete(quote_id)
        logger.info(f"Quote {quote_id} deleted")
        await self.event_bus.emit(quote_deleted(quote_id))
