"""
Notification generator.

Derives expiration notifications from accepted quotes: every line item
whose description contains an active keyword gets a notification due
``prazo_dias`` days after the quote was accepted.

Design decisions:
- Matching is a case-insensitive substring test, not a word match:
  "manutencao" matches "manutencaoPreventiva". Loose recall is intended.
- At most one notification per (quote, item description, keyword).
  Existing records are checked before staging, so re-running generation
  never notifies twice.
- All notifications of one run are written in a single atomic batch;
  a failed batch propagates and nothing is reported as created.
- The generator is called directly (HTTP, backfill) and from the event
  bridge; it never subscribes to anything itself.
"""

import logging
from datetime import datetime, timedelta

from core.models import (
    Keyword,
    Notification,
    NotificationDraft,
    ProcessingResult,
    Quote,
    QuoteStatus,
)
from core.store import KeywordDictionary, NotificationStore, QuoteRepository

logger = logging.getLogger("notification_generator")


class NotificationGenerator:
    """
    Keyword-matching notification generator.

    Example:
        generator = NotificationGenerator(
            quotes=data_store.quotes,
            keywords=data_store.keywords,
            notifications=data_store.notifications,
        )
        created = await generator.generate_for_quote("orc-001")
    """

    def __init__(
        self,
        quotes: QuoteRepository,
        keywords: KeywordDictionary,
        notifications: NotificationStore,
        accepted_status: str = QuoteStatus.ACEITO.value,
    ):
        """
        Initialize the generator.

        Args:
            quotes: Where quotes are loaded from
            keywords: Active keyword dictionary
            notifications: Where notifications are checked and written
            accepted_status: The only status notifications are generated for
        """
        self.quotes = quotes
        self.keywords = keywords
        self.notifications = notifications
        self.accepted_status = accepted_status

    async def generate_for_quote(self, quote_id: str) -> list[Notification]:
        """
        Generate the missing notifications of one quote.

        Quotes that are not accepted are skipped without any write.

        Raises:
            NotFoundError: if the quote does not exist
            BatchWriteError: if the batch write is rejected
        """
        quote = await self.quotes.find_by_id(quote_id)

        if quote.status != self.accepted_status:
            logger.debug(f"Quote {quote_id} is '{quote.status}', not generating")
            return []

        return await self.process_quote(quote)

    async def process_quote(self, quote: Quote) -> list[Notification]:
        """
        Match a quote's items against the active keywords and persist new notifications.

        Does not look at the quote status; callers decide which quotes qualify.
        """
        active_keywords = await self.keywords.find_active()
        if not active_keywords:
            return []

        anchor = quote.anchor_date()
        drafts: list[NotificationDraft] = []
        staged: set[tuple[str, str, str]] = set()

        for description in quote.item_descriptions():
            for keyword in active_keywords:
                if not keyword.matches(description):
                    continue

                key = (quote.id, description, keyword.palavra)
                if key in staged:
                    continue
                if await self.notifications.exists(*key):
                    logger.debug(f"Notification already exists for {key}, skipping")
                    continue

                staged.add(key)
                drafts.append(self._draft(quote, description, keyword, anchor))

        if not drafts:
            return []

        created = await self.notifications.create_many(drafts)
        logger.info(f"Quote {quote.id}: {len(created)} notification(s) created")
        return created

    def _draft(self, quote: Quote, description: str, keyword: Keyword, anchor: datetime) -> NotificationDraft:
        return NotificationDraft(
            orcamento_id=quote.id,
            orcamento_numero=quote.numero,
            orcamento_data_emissao=quote.data_emissao,
            cliente_id=quote.cliente_id,
            cliente_nome=quote.cliente_nome,
            item_descricao=description,
            palavra_chave=keyword.palavra,
            data_vencimento=anchor + timedelta(days=keyword.prazo_dias),
            lida=False,
        )

    async def process_all_accepted(self) -> ProcessingResult:
        """
        Run matching over every accepted quote, one after the other.

        Used for backfills and reconciliation after failed background
        generations; the steady state is driven by status-change events.
        """
        accepted = await self.quotes.find_by_status(self.accepted_status)

        created = 0
        for quote in accepted:
            notifications = await self.process_quote(quote)
            created += len(notifications)

        logger.info(f"Processed {len(accepted)} accepted quote(s), {created} notification(s) created")
        return ProcessingResult(processados=len(accepted), notificacoes_criadas=created)

    async def retract_for_quote(self, quote_id: str) -> int:
        """Delete every notification of a quote, read or not."""
        deleted = await self.notifications.delete_by_quote_id(quote_id)
        logger.info(f"Quote {quote_id}: {deleted} notification(s) retracted")
        return deleted
