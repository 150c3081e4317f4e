"""
Bridge between quote lifecycle events and the notification generator.

This is the only place where the notification domain reacts to the quote
domain. The quote service publishes QuoteStatusChanged and has no idea this
bridge exists.

Design decisions:
- Moving INTO the accepted status generates the quote's notifications
- Moving OUT of the accepted status retracts all of them, read or not
- Every other transition is ignored
- Failures are logged here and never reach the publisher: a status change
  has already been committed by the time its event is delivered, and
  missed generations are reconciled by ``process_all_accepted``
"""

import logging

from core.models import QuoteStatus
from events.event_bus import EventBus
from events.events import QuoteStatusChanged
from notifications.generator import NotificationGenerator

logger = logging.getLogger("notification_bridge")


class EventBridge:
    """
    Subscribes the notification generator to quote status changes.

    Example:
        bridge = EventBridge(event_bus=bus, generator=generator)
        bridge.start()

        # From now on accepting a quote generates its notifications
        await quote_service.change_status("orc-001", "aceito")
    """

    def __init__(
        self,
        event_bus: EventBus,
        generator: NotificationGenerator,
        accepted_status: str = QuoteStatus.ACEITO.value,
    ):
        """
        Initialize the bridge.

        Args:
            event_bus: Event bus to subscribe to
            generator: Generator invoked on accept/un-accept transitions
            accepted_status: Status whose entry and exit are acted upon
        """
        self.event_bus = event_bus
        self.generator = generator
        self.accepted_status = accepted_status

        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        """Subscribe to QuoteStatusChanged events."""
        if self._started:
            logger.warning("EventBridge already started")
            return

        self.event_bus.on(QuoteStatusChanged, self._handle_status_changed)

        self._started = True
        logger.info("EventBridge started - subscribed to quote status changes")

    def stop(self) -> None:
        """Unsubscribe from QuoteStatusChanged events."""
        if not self._started:
            return

        self.event_bus.unsubscribe(QuoteStatusChanged, self._handle_status_changed)

        self._started = False
        logger.info("EventBridge stopped")

    async def _handle_status_changed(self, event: QuoteStatusChanged) -> None:
        entering = (
            event.new_status == self.accepted_status
            and event.previous_status != self.accepted_status
        )
        leaving = (
            event.previous_status == self.accepted_status
            and event.new_status != self.accepted_status
        )

        try:
            if entering:
                logger.info(f"[NotificationBridge] Quote {event.quote_id} accepted, generating notifications")
                created = await self.generator.generate_for_quote(event.quote_id)
                logger.info(f"[NotificationBridge] {len(created)} notification(s) generated for quote {event.quote_id}")
            elif leaving:
                logger.info(
                    f"[NotificationBridge] Quote {event.quote_id} left '{self.accepted_status}' "
                    f"({event.new_status}), retracting notifications"
                )
                await self.generator.retract_for_quote(event.quote_id)
        except Exception as e:
            logger.error(
                f"[NotificationBridge] Error handling status change of quote {event.quote_id}: {e!r}",
                exc_info=True,
            )
