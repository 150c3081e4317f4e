"""
Tests for the DataStore.

These tests verify that the data store correctly loads the JSON fixtures
and exposes them through the repository contracts.
"""

import json

import pytest

from core.data_store import DataStore
from core.errors import NotFoundError


class TestDataStoreQuotes:
    """Tests for quote repository operations."""

    async def test_find_by_id(self, data_store: DataStore, open_quote_id: str):
        quote = await data_store.quotes.find_by_id(open_quote_id)

        assert quote.numero == 1001
        assert quote.cliente_nome == "Condomínio Jardim das Flores"
        assert quote.item_descriptions()[0] == "Extintor ABC 6kg"

    async def test_find_missing_quote_raises(self, data_store: DataStore):
        with pytest.raises(NotFoundError):
            await data_store.quotes.find_by_id("nonexistent-id")

    async def test_find_by_status_newest_first(self, data_store: DataStore):
        accepted = await data_store.quotes.find_by_status("aceito")
        assert [q.id for q in accepted] == ["orc-004", "orc-002"]

    async def test_delete(self, data_store: DataStore, refused_quote_id: str):
        await data_store.quotes.delete(refused_quote_id)

        with pytest.raises(NotFoundError):
            await data_store.quotes.find_by_id(refused_quote_id)
        with pytest.raises(NotFoundError):
            await data_store.quotes.delete(refused_quote_id)


class TestDataStoreKeywords:
    """Tests for the keyword dictionary."""

    async def test_find_active_sorted_and_lower_case(self, data_store: DataStore):
        keywords = await data_store.keywords.find_active()

        assert [k.palavra for k in keywords] == ["extintor", "hidrante", "mangueira", "manutenção"]


class TestDataStoreLoading:
    """Tests for fixture loading."""

    async def test_without_data_dir_everything_is_empty(self):
        store = DataStore()

        assert await store.quotes.find_by_status("aceito") == []
        assert await store.keywords.find_active() == []
        assert await store.notifications.find_all() == []

    async def test_loads_notifications_fixture(self, tmp_path):
        (tmp_path / "notifications.json").write_text(json.dumps([{
            "id": "not-1",
            "orcamentoId": "orc-001",
            "orcamentoNumero": 1001,
            "clienteId": "cli-001",
            "clienteNome": "Condomínio Jardim das Flores",
            "itemDescricao": "Extintor ABC 6kg",
            "palavraChave": "extintor",
            "dataVencimento": "2026-01-10T09:00:00",
            "lida": False,
            "createdAt": "2025-01-10T09:00:00",
        }]), encoding="utf-8")

        store = DataStore(data_dir=tmp_path)
        notification = await store.notifications.find_by_id("not-1")

        assert notification.palavra_chave == "extintor"
        assert notification.orcamento_data_emissao is None
