"""
Read and maintenance facade over the notification store.

The HTTP layer talks to this service only. It normalizes user input
(page sizes, look-ahead windows) before it reaches the store and turns
"missing record" results into NotFoundError.
"""

import logging
from typing import Optional, Union

from core.config import Settings
from core.errors import NotFoundError
from core.models import Notification, NotificationSummary, PaginatedResponse
from core.store import NotificationStore, unread_query

logger = logging.getLogger("notification_service")


class NotificationService:
    """
    Listings, summary and per-record operations on notifications.

    Example:
        service = NotificationService(store=data_store.notifications, settings=get_settings())
        page = await service.list_active(days=60, page_size=20)
        next_page = await service.list_active(days=60, page_size=20, cursor=page.cursor)
    """

    def __init__(self, store: NotificationStore, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or Settings()

    # -------------------------------------------------------------------------
    # Input normalization
    # -------------------------------------------------------------------------

    def clamp_page_size(self, page_size: Optional[Union[int, str]]) -> int:
        """
        Missing, unparseable or < 1 falls back to the default; anything above
        the max is capped. Query-string values arrive as text and are parsed here.
        """
        if isinstance(page_size, str):
            try:
                page_size = int(page_size.strip())
            except ValueError:
                logger.debug(f"Ignoring non-numeric page size {page_size!r}")
                page_size = None
        if page_size is None or page_size < 1:
            return self.settings.default_page_size
        return min(page_size, self.settings.max_page_size)

    def _window(self, days: Optional[int], default: int) -> int:
        if days is None or days < 0:
            return default
        return days

    # -------------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------------

    async def list_all(
        self, page_size: Optional[Union[int, str]] = None, cursor: Optional[str] = None
    ) -> PaginatedResponse[Notification]:
        return await self.store.find_all_paginated(self.clamp_page_size(page_size), cursor)

    async def list_unread(
        self, page_size: Optional[Union[int, str]] = None, cursor: Optional[str] = None
    ) -> PaginatedResponse[Notification]:
        return await self.store.find_unread_paginated(self.clamp_page_size(page_size), cursor)

    async def list_overdue(
        self, page_size: Optional[Union[int, str]] = None, cursor: Optional[str] = None
    ) -> PaginatedResponse[Notification]:
        return await self.store.find_overdue_paginated(self.clamp_page_size(page_size), cursor)

    async def list_active(
        self,
        days: Optional[int] = None,
        page_size: Optional[Union[int, str]] = None,
        cursor: Optional[str] = None,
    ) -> PaginatedResponse[Notification]:
        days = self._window(days, self.settings.active_window_days)
        return await self.store.find_active_paginated(days, self.clamp_page_size(page_size), cursor)

    async def list_upcoming(
        self,
        days: Optional[int] = None,
        page_size: Optional[Union[int, str]] = None,
        cursor: Optional[str] = None,
    ) -> PaginatedResponse[Notification]:
        days = self._window(days, self.settings.upcoming_window_days)
        return await self.store.find_upcoming_paginated(days, self.clamp_page_size(page_size), cursor)

    async def obtain_summary(self) -> NotificationSummary:
        return await self.store.obtain_summary(
            upcoming_days=self.settings.summary_upcoming_window_days,
            active_days=self.settings.summary_active_window_days,
        )

    async def count_unread(self) -> int:
        return await self.store.count(unread_query(self.store.clock()))

    # -------------------------------------------------------------------------
    # Single records
    # -------------------------------------------------------------------------

    async def get_by_id(self, notification_id: str) -> Notification:
        """
        Raises:
            NotFoundError: if the notification does not exist
        """
        notification = await self.store.find_by_id(notification_id)
        if notification is None:
            raise NotFoundError(f"Notificação não encontrada: {notification_id}")
        return notification

    async def mark_as_read(self, notification_id: str) -> Notification:
        """
        Raises:
            NotFoundError: if the notification does not exist
        """
        notification = await self.store.mark_as_read(notification_id)
        if notification is None:
            raise NotFoundError(f"Notificação não encontrada: {notification_id}")
        logger.info(f"Notification {notification_id} marked as read")
        return notification

    async def mark_all_as_read(self) -> int:
        marked = await self.store.mark_all_as_read()
        logger.info(f"{marked} notification(s) marked as read")
        return marked

    async def delete(self, notification_id: str) -> None:
        """
        Raises:
            NotFoundError: if the notification does not exist
        """
        if not await self.store.delete(notification_id):
            raise NotFoundError(f"Notificação não encontrada: {notification_id}")
        logger.info(f"Notification {notification_id} deleted")
