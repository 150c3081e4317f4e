"""
Composition root for the quote notification backend.

Wires one event bus, one set of collections and the services on top of
them. The API, the CLI, the demos and the tests each build their own
Backend; nothing in here is a module-level singleton.
"""

from typing import Optional

from core.config import Settings, get_settings
from core.data_store import DataStore
from events.event_bus import EventBus
from notifications.event_bridge import EventBridge
from notifications.generator import NotificationGenerator
from notifications.service import NotificationService
from quotes.service import QuoteService


class Backend:
    """
    Fully wired backend.

    Args:
        settings: Application settings (defaults to the cached settings)
        data_store: Collections to use (defaults to the JSON fixtures in
            ``settings.data_dir`` when ``seed_on_startup`` is set, else empty)
    """

    def __init__(self, settings: Optional[Settings] = None, data_store: Optional[DataStore] = None):
        self.settings = settings or get_settings()
        if data_store is None:
            data_dir = self.settings.data_dir if self.settings.seed_on_startup else None
            data_store = DataStore(data_dir=data_dir)
        self.data_store = data_store
        # The backend lives as long as the server process; keep no event history
        self.event_bus = EventBus(log_events=False)

        accepted = self.settings.accepted_status

        self.quote_service = QuoteService(
            event_bus=self.event_bus,
            quotes=self.data_store.quotes,
            accepted_status=accepted,
        )
        self.generator = NotificationGenerator(
            quotes=self.data_store.quotes,
            keywords=self.data_store.keywords,
            notifications=self.data_store.notifications,
            accepted_status=accepted,
        )
        self.bridge = EventBridge(
            event_bus=self.event_bus,
            generator=self.generator,
            accepted_status=accepted,
        )
        self.notification_service = NotificationService(
            store=self.data_store.notifications,
            settings=self.settings,
        )

    def start(self) -> None:
        self.bridge.start()

    def stop(self) -> None:
        self.bridge.stop()
