"""
In-memory document store backing the repository contracts.

This module stands in for the tenant's document database. Each collection
is a dict keyed by document id, optionally seeded from JSON fixture files.

Design decisions:
- One class per contract (quotes, keywords, notifications) so the core only
  ever sees the abstract interfaces from core.store
- Every operation yields to the event loop once, like a network round trip
  would, so concurrent callers interleave the way they do in production
- Batch writes are validated and built completely before anything is
  inserted, which makes them all-or-nothing
- Failures can be simulated (``fail_batch_writes``) to exercise error paths
- DataStore bundles the three collections and lazily loads fixtures
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Iterable, Optional
from uuid import uuid4

from core.errors import BatchWriteError, NotFoundError
from core.models import Keyword, Notification, NotificationDraft, Quote, utcnow
from core.store import (
    Clock,
    KeywordDictionary,
    NotificationQuery,
    NotificationStore,
    QuoteRepository,
    sort_key,
)

logger = logging.getLogger("notification_store")


def new_document_id() -> str:
    """Generate a document id the way the database would."""
    return uuid4().hex


async def _round_trip() -> None:
    await asyncio.sleep(0)


class InMemoryQuoteRepository(QuoteRepository):
    """Quotes collection."""

    def __init__(self, quotes: Optional[Iterable[Quote]] = None):
        self._quotes: dict[str, Quote] = {q.id: q for q in quotes or []}

    async def find_by_id(self, quote_id: str) -> Quote:
        await _round_trip()
        quote = self._quotes.get(quote_id)
        if quote is None:
            raise NotFoundError(f"Orçamento não encontrado: {quote_id}")
        return quote

    async def find_by_status(self, status: str) -> list[Quote]:
        """Quotes in ``status``, newest number first."""
        await _round_trip()
        quotes = [q for q in self._quotes.values() if q.status == status]
        return sorted(quotes, key=lambda q: q.numero, reverse=True)

    async def save(self, quote: Quote) -> Quote:
        await _round_trip()
        self._quotes[quote.id] = quote
        return quote

    async def delete(self, quote_id: str) -> None:
        await _round_trip()
        if self._quotes.pop(quote_id, None) is None:
            raise NotFoundError(f"Orçamento não encontrado: {quote_id}")


class InMemoryKeywordDictionary(KeywordDictionary):
    """Keywords collection (palavrasChave)."""

    def __init__(self, keywords: Optional[Iterable[Keyword]] = None):
        self._keywords: dict[str, Keyword] = {k.id: k for k in keywords or []}

    async def find_active(self) -> list[Keyword]:
        """Active keywords ordered by term."""
        await _round_trip()
        active = [k for k in self._keywords.values() if k.ativo]
        return sorted(active, key=lambda k: k.palavra)

    def add(self, keyword: Keyword) -> Keyword:
        self._keywords[keyword.id] = keyword
        return keyword


class InMemoryNotificationStore(NotificationStore):
    """
    Notifications collection (notificacoes).

    Args:
        notifications: Initial records
        clock: Source of "now" for the date-window listings
    """

    def __init__(
        self,
        notifications: Optional[Iterable[Notification]] = None,
        clock: Optional[Clock] = None,
    ):
        super().__init__(clock=clock)
        self._records: dict[str, Notification] = {n.id: n for n in notifications or []}
        self.fail_batch_writes = False

    async def fetch(
        self,
        query: NotificationQuery,
        start_after: Optional[Notification] = None,
        limit: Optional[int] = None,
    ) -> list[Notification]:
        await _round_trip()
        matches = sorted(
            (n for n in self._records.values() if query.matches(n)),
            key=sort_key,
        )
        if start_after is not None:
            position = sort_key(start_after)
            matches = [n for n in matches if sort_key(n) > position]
        if limit is not None:
            matches = matches[:limit]
        return matches

    async def count(self, query: NotificationQuery) -> int:
        await _round_trip()
        return sum(1 for n in self._records.values() if query.matches(n))

    async def find_by_id(self, notification_id: str) -> Optional[Notification]:
        await _round_trip()
        return self._records.get(notification_id)

    async def exists(self, orcamento_id: str, item_descricao: str, palavra_chave: str) -> bool:
        await _round_trip()
        key = (orcamento_id, item_descricao, palavra_chave)
        return any(n.key == key for n in self._records.values())

    async def create_many(self, drafts: Iterable[NotificationDraft]) -> list[Notification]:
        drafts = list(drafts)
        await _round_trip()

        if self.fail_batch_writes:
            logger.error(f"Batch of {len(drafts)} notifications rejected")
            raise BatchWriteError("Falha ao gravar notificações em lote")

        now = utcnow()
        created = [
            Notification(id=new_document_id(), created_at=now, **draft.model_dump())
            for draft in drafts
        ]
        for notification in created:
            self._records[notification.id] = notification

        logger.info(f"Created {len(created)} notifications in one batch")
        return created

    async def mark_as_read(self, notification_id: str) -> Optional[Notification]:
        await _round_trip()
        notification = self._records.get(notification_id)
        if notification is None:
            return None
        updated = notification.model_copy(update={"lida": True})
        self._records[notification_id] = updated
        return updated

    async def mark_all_as_read(self) -> int:
        await _round_trip()
        unread = [n for n in self._records.values() if not n.lida]
        for notification in unread:
            self._records[notification.id] = notification.model_copy(update={"lida": True})
        return len(unread)

    async def delete(self, notification_id: str) -> bool:
        await _round_trip()
        return self._records.pop(notification_id, None) is not None

    async def delete_by_quote_id(self, orcamento_id: str) -> int:
        await _round_trip()
        doomed = [n.id for n in self._records.values() if n.orcamento_id == orcamento_id]
        for notification_id in doomed:
            del self._records[notification_id]
        return len(doomed)


class DataStore:
    """
    The tenant's collections, loaded from JSON fixtures.

    Fixture files (all optional) in ``data_dir``:
    - quotes.json
    - keywords.json
    - notifications.json

    Collections are loaded lazily on first access. Without a ``data_dir``
    every collection starts empty.
    """

    def __init__(self, data_dir: Optional[Path] = None, clock: Optional[Clock] = None):
        self.data_dir = Path(data_dir) if data_dir is not None else None
        self.clock = clock

        self._quotes: Optional[InMemoryQuoteRepository] = None
        self._keywords: Optional[InMemoryKeywordDictionary] = None
        self._notifications: Optional[InMemoryNotificationStore] = None

    def _load_json(self, filename: str) -> list[dict]:
        """Load a JSON fixture file."""
        if self.data_dir is None:
            return []
        filepath = self.data_dir / filename
        if not filepath.exists():
            return []
        with open(filepath, "r", encoding="utf-8") as f:
            return json.load(f)

    @property
    def quotes(self) -> InMemoryQuoteRepository:
        if self._quotes is None:
            data = self._load_json("quotes.json")
            self._quotes = InMemoryQuoteRepository(Quote(**q) for q in data)
        return self._quotes

    @property
    def keywords(self) -> InMemoryKeywordDictionary:
        if self._keywords is None:
            data = self._load_json("keywords.json")
            self._keywords = InMemoryKeywordDictionary(Keyword(**k) for k in data)
        return self._keywords

    @property
    def notifications(self) -> InMemoryNotificationStore:
        if self._notifications is None:
            data = self._load_json("notifications.json")
            self._notifications = InMemoryNotificationStore(
                (Notification(**n) for n in data),
                clock=self.clock,
            )
        return self._notifications
