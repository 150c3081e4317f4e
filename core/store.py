"""
Persistence contracts used by the notification core.

The core talks to a document database through three abstract repositories:

- QuoteRepository: quotes, owned by the quote domain
- KeywordDictionary: the active keyword -> expiry window mapping
- NotificationStore: notification records and their listings

NotificationStore implements the cursor-paginated listing once
(``paginate``) on top of two storage primitives, ``fetch`` and ``count``.
The five listings (all, unread, overdue, active, upcoming) are that same
primitive specialized with a different ``NotificationQuery``.

Ordering is always ``data_vencimento`` ascending with the record id as
tie-breaker, which makes "resume after record X" well defined.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from core.errors import ValidationError
from core.models import (
    Keyword,
    Notification,
    NotificationDraft,
    NotificationSummary,
    PaginatedResponse,
    Quote,
    utcnow,
)
from core.pagination import decode_cursor, encode_cursor

logger = logging.getLogger("notification_store")

Clock = Callable[[], datetime]

DEFAULT_PAGE_SIZE = 10
DEFAULT_ACTIVE_DAYS = 60
DEFAULT_UPCOMING_DAYS = 30


# =============================================================================
# Quote and keyword contracts (implemented by other domains)
# =============================================================================

class QuoteRepository(ABC):
    """Read access to quotes, plus the writes the lifecycle publisher needs."""

    @abstractmethod
    async def find_by_id(self, quote_id: str) -> Quote:
        """Get a quote by id. Raises NotFoundError if it does not exist."""

    @abstractmethod
    async def find_by_status(self, status: str) -> list[Quote]:
        """Get every quote currently in ``status``."""

    @abstractmethod
    async def save(self, quote: Quote) -> Quote:
        """Insert or replace a quote."""

    @abstractmethod
    async def delete(self, quote_id: str) -> None:
        """Delete a quote. Raises NotFoundError if it does not exist."""


class KeywordDictionary(ABC):
    """Read-only view of the configured keywords."""

    @abstractmethod
    async def find_active(self) -> list[Keyword]:
        """Active keywords, in a deterministic order."""


# =============================================================================
# Notification queries
# =============================================================================

@dataclass(frozen=True)
class NotificationQuery:
    """
    Filter for a notification scan.

    Every field left as None does not constrain the scan.
    ``due_before`` is exclusive, ``due_from`` and ``due_until`` are inclusive.
    """
    lida: Optional[bool] = None
    due_before: Optional[datetime] = None
    due_from: Optional[datetime] = None
    due_until: Optional[datetime] = None
    orcamento_id: Optional[str] = None

    def matches(self, notification: Notification) -> bool:
        due = notification.data_vencimento
        if self.lida is not None and notification.lida != self.lida:
            return False
        if self.due_before is not None and not due < self.due_before:
            return False
        if self.due_from is not None and due < self.due_from:
            return False
        if self.due_until is not None and due > self.due_until:
            return False
        if self.orcamento_id is not None and notification.orcamento_id != self.orcamento_id:
            return False
        return True


def sort_key(notification: Notification) -> tuple[datetime, str]:
    """Scan order shared by every listing."""
    return (notification.data_vencimento, notification.id)


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


# Window derivation: each view turns "now" (and a window size) into a query.

def all_query(now: datetime) -> NotificationQuery:
    return NotificationQuery()


def unread_query(now: datetime) -> NotificationQuery:
    return NotificationQuery(lida=False)


def overdue_query(now: datetime) -> NotificationQuery:
    """Due strictly before today 00:00, read or not."""
    return NotificationQuery(due_before=start_of_day(now))


def active_query(now: datetime, days: int = DEFAULT_ACTIVE_DAYS) -> NotificationQuery:
    """Unread and due (or overdue) within the next ``days`` days."""
    return NotificationQuery(lida=False, due_until=now + timedelta(days=days))


def upcoming_query(now: datetime, days: int = DEFAULT_UPCOMING_DAYS) -> NotificationQuery:
    """Due between now and ``days`` days ahead, read or not."""
    return NotificationQuery(due_from=now, due_until=now + timedelta(days=days))


# =============================================================================
# Notification store
# =============================================================================

class NotificationStore(ABC):
    """
    Persistence contract for notification records.

    Subclasses provide the storage primitives; listings, pagination and the
    summary are implemented here once.

    Args:
        clock: Returns "now" as a naive UTC datetime. Injected so tests can
            pin the windows used by the overdue/active/upcoming views.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock: Clock = clock or utcnow

    # -------------------------------------------------------------------------
    # Storage primitives
    # -------------------------------------------------------------------------

    @abstractmethod
    async def fetch(
        self,
        query: NotificationQuery,
        start_after: Optional[Notification] = None,
        limit: Optional[int] = None,
    ) -> list[Notification]:
        """
        Ordered scan of the records matching ``query``.

        Args:
            query: Filter to apply
            start_after: Resume strictly after this record's position in the
                scan order (the record itself need not match ``query``)
            limit: Maximum number of records to return
        """

    @abstractmethod
    async def count(self, query: NotificationQuery) -> int:
        """Number of records matching ``query`` (may be approximate)."""

    @abstractmethod
    async def find_by_id(self, notification_id: str) -> Optional[Notification]:
        """Get a notification by id, or None."""

    @abstractmethod
    async def exists(self, orcamento_id: str, item_descricao: str, palavra_chave: str) -> bool:
        """True if a notification already exists for this (quote, item, keyword)."""

    @abstractmethod
    async def create_many(self, drafts: Iterable[NotificationDraft]) -> list[Notification]:
        """
        Persist all drafts in one atomic batch.

        Assigns ids and a shared creation timestamp. Raises BatchWriteError
        if the batch is rejected, in which case nothing is stored.
        """

    @abstractmethod
    async def mark_as_read(self, notification_id: str) -> Optional[Notification]:
        """Set ``lida`` on one record. Returns the updated record, or None if missing."""

    @abstractmethod
    async def mark_all_as_read(self) -> int:
        """Set ``lida`` on every unread record. Returns how many changed."""

    @abstractmethod
    async def delete(self, notification_id: str) -> bool:
        """Delete one record. Returns False if it did not exist."""

    @abstractmethod
    async def delete_by_quote_id(self, orcamento_id: str) -> int:
        """Delete every record of a quote, read or not. Returns how many were deleted."""

    # -------------------------------------------------------------------------
    # Cursor pagination
    # -------------------------------------------------------------------------

    async def paginate(
        self,
        query: NotificationQuery,
        page_size: int = DEFAULT_PAGE_SIZE,
        cursor: Optional[str] = None,
    ) -> PaginatedResponse[Notification]:
        """
        Fetch one page of ``query``.

        Reads ``page_size + 1`` records to learn whether another page exists
        without a second round trip. A cursor whose record no longer exists
        (or that does not decode) restarts the scan from the beginning.
        """
        if page_size < 1:
            raise ValidationError(f"page_size must be >= 1, got {page_size}")

        start_after = None
        if cursor:
            record_id = decode_cursor(cursor)
            if record_id is not None:
                start_after = await self.find_by_id(record_id)
            if start_after is None:
                logger.warning(f"Cursor {cursor!r} does not resolve to a record, restarting scan")

        fetched = await self.fetch(query, start_after=start_after, limit=page_size + 1)
        has_more = len(fetched) > page_size
        items = fetched[:page_size]
        next_cursor = encode_cursor(items[-1].id) if has_more else None

        total = await self.count(query)

        return PaginatedResponse[Notification](
            items=items,
            total=total,
            has_more=has_more,
            cursor=next_cursor,
        )

    async def find_all_paginated(
        self, page_size: int = DEFAULT_PAGE_SIZE, cursor: Optional[str] = None
    ) -> PaginatedResponse[Notification]:
        return await self.paginate(all_query(self.clock()), page_size, cursor)

    async def find_unread_paginated(
        self, page_size: int = DEFAULT_PAGE_SIZE, cursor: Optional[str] = None
    ) -> PaginatedResponse[Notification]:
        return await self.paginate(unread_query(self.clock()), page_size, cursor)

    async def find_overdue_paginated(
        self, page_size: int = DEFAULT_PAGE_SIZE, cursor: Optional[str] = None
    ) -> PaginatedResponse[Notification]:
        return await self.paginate(overdue_query(self.clock()), page_size, cursor)

    async def find_active_paginated(
        self,
        days: int = DEFAULT_ACTIVE_DAYS,
        page_size: int = DEFAULT_PAGE_SIZE,
        cursor: Optional[str] = None,
    ) -> PaginatedResponse[Notification]:
        return await self.paginate(active_query(self.clock(), days), page_size, cursor)

    async def find_upcoming_paginated(
        self,
        days: int = DEFAULT_UPCOMING_DAYS,
        page_size: int = DEFAULT_PAGE_SIZE,
        cursor: Optional[str] = None,
    ) -> PaginatedResponse[Notification]:
        return await self.paginate(upcoming_query(self.clock(), days), page_size, cursor)

    # -------------------------------------------------------------------------
    # Unpaginated listings (small administrative use only)
    # -------------------------------------------------------------------------

    async def find_all(self) -> list[Notification]:
        return await self.fetch(all_query(self.clock()))

    async def find_unread(self) -> list[Notification]:
        return await self.fetch(unread_query(self.clock()))

    async def find_overdue(self) -> list[Notification]:
        return await self.fetch(overdue_query(self.clock()))

    async def find_upcoming(self, days: int = DEFAULT_UPCOMING_DAYS) -> list[Notification]:
        return await self.fetch(upcoming_query(self.clock(), days))

    async def find_active(self, days: int = DEFAULT_ACTIVE_DAYS) -> list[Notification]:
        return await self.fetch(active_query(self.clock(), days))

    async def find_by_quote_id(self, orcamento_id: str) -> list[Notification]:
        return await self.fetch(NotificationQuery(orcamento_id=orcamento_id))

    async def obtain_summary(
        self,
        upcoming_days: int = 30,
        active_days: int = 10,
    ) -> NotificationSummary:
        """
        Dashboard counters, read concurrently.

        The five numbers come from independent reads and are not
        consistent with each other under concurrent writes.
        """
        now = self.clock()
        total, nao_lidas, vencidas, proximas, ativas = await asyncio.gather(
            self.count(all_query(now)),
            self.count(unread_query(now)),
            self.count(overdue_query(now)),
            self.count(upcoming_query(now, upcoming_days)),
            self.count(active_query(now, active_days)),
        )
        return NotificationSummary(
            total=total,
            nao_lidas=nao_lidas,
            vencidas=vencidas,
            proximas_vencer=proximas,
            ativas=ativas,
        )
