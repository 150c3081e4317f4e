"""
Demonstration scripts for the quote notification flow.

These functions show the event-driven generation in action. Run them to see
status-change events being published and notifications being created,
listed and retracted.
"""

import asyncio
import logging

from core.models import Notification
from notifications.backend import Backend

# Configure logging to see what's happening
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
    datefmt="%H:%M:%S",
)


def _print_banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70 + "\n")


def _print_notifications(notifications: list[Notification]) -> None:
    if not notifications:
        print("  (none)")
    for n in notifications:
        status = "read" if n.lida else "unread"
        print(
            f"  #{n.orcamento_numero} {n.cliente_nome}: '{n.item_descricao}' "
            f"[{n.palavra_chave}] due {n.data_vencimento:%Y-%m-%d} ({status})"
        )


async def run_quote_accepted_demo() -> list[Notification]:
    """
    Demonstrate generation driven by a status change.

    This shows:
    1. QuoteService accepts a quote (publishes QuoteStatusChanged)
    2. EventBridge receives the event
    3. NotificationGenerator matches item descriptions against keywords
    4. Notifications are written in one batch

    The key insight: QuoteService doesn't know about notifications!
    """
    _print_banner("DEMO: Quote Accepted -> Expiration Notifications")

    backend = Backend()
    backend.event_bus.set_logging(True)
    backend.bridge.start()

    print("Setup complete. EventBridge is listening for quote status changes.\n")
    print("-" * 70)
    print("ACTION: Accepting quote orc-001 (fire extinguishers for a condominium)")
    print("-" * 70 + "\n")

    await backend.quote_service.change_status("orc-001", backend.settings.accepted_status)

    notifications = await backend.data_store.notifications.find_by_quote_id("orc-001")

    print("\n" + "-" * 70)
    print("RESULT: Check the logs above to see:")
    print("  1. QuoteService published QuoteStatusChanged")
    print("  2. EventBridge invoked the generator")
    print("  3. One notification per matching (item, keyword) pair was created")
    print("-" * 70)

    print("\nEvents published:")
    for event in backend.event_bus.get_event_log():
        print(f"  {event}")

    print("\nNotifications created:")
    _print_notifications(notifications)

    backend.bridge.stop()
    return notifications


async def run_quote_unaccepted_demo() -> int:
    """
    Demonstrate retraction when a quote leaves the accepted status.

    Notifications are deleted whether they were read or not.
    """
    _print_banner("DEMO: Quote Un-accepted -> Notifications Retracted")

    backend = Backend()
    backend.bridge.start()

    print("Backfilling notifications for the quotes that are already accepted...")
    await backend.generator.process_all_accepted()

    before = await backend.data_store.notifications.find_by_quote_id("orc-002")
    print(f"\nQuote orc-002 has {len(before)} notification(s):")
    _print_notifications(before)

    if before:
        await backend.notification_service.mark_as_read(before[0].id)
        print(f"\nMarked one of them as read: '{before[0].item_descricao}'")

    print("\nRefusing quote orc-002...")
    await backend.quote_service.change_status("orc-002", "recusado")

    after = await backend.data_store.notifications.find_by_quote_id("orc-002")
    print(f"\nQuote orc-002 now has {len(after)} notification(s)")

    backend.bridge.stop()
    return len(after)


async def run_backfill_demo() -> None:
    """
    Demonstrate the backfill over every accepted quote and the dashboard views.

    Running it twice shows that generation is idempotent.
    """
    _print_banner("DEMO: Backfill Accepted Quotes + Dashboard")

    backend = Backend()

    first = await backend.generator.process_all_accepted()
    print(f"First run:  {first.processados} quote(s), {first.notificacoes_criadas} notification(s) created")

    second = await backend.generator.process_all_accepted()
    print(f"Second run: {second.processados} quote(s), {second.notificacoes_criadas} notification(s) created")

    summary = await backend.notification_service.obtain_summary()
    print("\nSummary:")
    print(f"  total:          {summary.total}")
    print(f"  unread:         {summary.nao_lidas}")
    print(f"  overdue:        {summary.vencidas}")
    print(f"  upcoming:       {summary.proximas_vencer}")
    print(f"  active:         {summary.ativas}")

    print("\nAll notifications, 2 per page:")
    cursor = None
    page_number = 1
    while True:
        page = await backend.notification_service.list_all(page_size=2, cursor=cursor)
        print(f"\n  Page {page_number} (total {page.total}, has_more={page.has_more})")
        _print_notifications(page.items)
        if not page.has_more:
            break
        cursor = page.cursor
        page_number += 1


async def run_all_demos() -> None:
    await run_quote_accepted_demo()
    await run_quote_unaccepted_demo()
    await run_backfill_demo()


if __name__ == "__main__":
    asyncio.run(run_all_demos())
