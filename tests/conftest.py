"""
Shared pytest fixtures for the quote notification tests.

These fixtures provide consistent test data and fresh state for every test.
Time-dependent views are pinned with a fixed clock.
"""

import itertools
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

import pytest

from core.config import Settings
from core.data_store import DataStore
from core.models import Notification
from events.event_bus import EventBus
from notifications.backend import Backend

# "Now" for every test that depends on the clock
FIXED_NOW = datetime(2025, 6, 1, 12, 0, 0)


@pytest.fixture
def data_dir() -> Path:
    """Path to the JSON fixtures directory."""
    return Path(__file__).parent.parent / "data"


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock pinned to FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def data_store(data_dir: Path, clock) -> DataStore:
    """
    Fresh DataStore instance for each test.

    Uses the real JSON fixtures but creates a new instance
    so tests don't interfere with each other.
    """
    return DataStore(data_dir=data_dir, clock=clock)


@pytest.fixture
def event_bus() -> EventBus:
    """Fresh event bus for each test."""
    return EventBus()


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    """Default settings, independent of the environment."""
    return Settings(_env_file=None, data_dir=data_dir, log_level="DEBUG")


@pytest.fixture
def backend(settings: Settings, data_store: DataStore) -> Backend:
    """Fully wired backend on the fixture collections, bridge not started."""
    return Backend(settings=settings, data_store=data_store)


@pytest.fixture
def make_notification() -> Callable[..., Notification]:
    """
    Factory for notification records.

    Ids are sequential ("n01", "n02", ...) unless given, so creation order
    matches id order.
    """
    counter = itertools.count(1)

    def _make(
        data_vencimento: datetime,
        lida: bool = False,
        orcamento_id: str = "orc-001",
        item_descricao: Optional[str] = None,
        palavra_chave: str = "extintor",
        id: Optional[str] = None,
    ) -> Notification:
        n = next(counter)
        return Notification(
            id=id or f"n{n:02d}",
            orcamento_id=orcamento_id,
            orcamento_numero=1001,
            orcamento_data_emissao=datetime(2025, 1, 10, 9, 0),
            cliente_id="cli-001",
            cliente_nome="Condomínio Jardim das Flores",
            item_descricao=item_descricao or f"Extintor lote {n}",
            palavra_chave=palavra_chave,
            data_vencimento=data_vencimento,
            lida=lida,
            created_at=FIXED_NOW,
        )

    return _make


# =============================================================================
# Quote Fixtures
# =============================================================================

@pytest.fixture
def open_quote_id() -> str:
    """
    Quote orc-001 (aberto), issued 2025-01-10.
    Items: "Extintor ABC 6kg", "Recarga de extintor CO2", a signage plate.
    """
    return "orc-001"


@pytest.fixture
def accepted_quote_id() -> str:
    """
    Quote orc-002 (aceito on 2025-03-01 10:00).
    Items match "hidrante", "manutenção" and "mangueira": 3 notifications.
    """
    return "orc-002"


@pytest.fixture
def refused_quote_id() -> str:
    """Quote orc-003 (recusado); its only keyword match is inactive."""
    return "orc-003"


@pytest.fixture
def accepted_without_acceptance_date_id() -> str:
    """
    Quote orc-004 (aceito, no dataAceite, issued 2025-04-02 11:00).
    One upper-case "EXTINTORES" item and one item with an empty description.
    """
    return "orc-004"
