"""
Tests for the HTTP surface.

These tests drive the FastAPI app through TestClient on a backend built
from the JSON fixtures, with the clock pinned to 2025-06-01 12:00.

After POST /processar-todos the fixture quotes yield four notifications,
due 2025-08-28 (x2), 2026-03-01 and 2026-04-02, all unread.
"""

import pytest
from fastapi.testclient import TestClient

from api.main import app, reset_api_state
from notifications.backend import Backend

BASE = "/api/notificacoes"


@pytest.fixture
def client(backend: Backend):
    """Test client bound to a fresh backend; the bridge runs for the client's lifetime."""
    reset_api_state(backend)
    with TestClient(app) as test_client:
        yield test_client
    reset_api_state()


@pytest.fixture
def processed_client(client: TestClient) -> TestClient:
    """Client after a backfill over the accepted fixture quotes."""
    response = client.post(f"{BASE}/processar-todos")
    assert response.status_code == 200
    return client


class TestHealth:
    """Tests for the health check."""

    def test_health_check(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestGeneration:
    """Tests for the generation endpoints."""

    def test_process_all(self, client: TestClient):
        response = client.post(f"{BASE}/processar-todos")

        assert response.status_code == 200
        assert response.json() == {"processados": 2, "notificacoesCriadas": 4}

    def test_generate_for_quote(self, client: TestClient, accepted_quote_id: str):
        first = client.post(f"{BASE}/gerar/{accepted_quote_id}")
        second = client.post(f"{BASE}/gerar/{accepted_quote_id}")

        assert first.status_code == 200
        assert len(first.json()) == 3
        assert first.json()[0]["orcamentoId"] == accepted_quote_id
        assert second.json() == []

    def test_generate_for_missing_quote(self, client: TestClient):
        response = client.post(f"{BASE}/gerar/nonexistent")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "Orçamento não encontrado: nonexistent",
        }


class TestListings:
    """Tests for the paginated listings."""

    def test_pages_chain_with_cursor(self, processed_client: TestClient):
        first = processed_client.get(f"{BASE}/paginado", params={"pageSize": 3}).json()
        second = processed_client.get(
            f"{BASE}/paginado", params={"pageSize": 3, "cursor": first["cursor"]}
        ).json()

        assert len(first["items"]) == 3
        assert first["total"] == 4
        assert first["hasMore"] is True
        assert len(second["items"]) == 1
        assert second["hasMore"] is False
        assert second["cursor"] is None

        ids = [n["id"] for n in first["items"] + second["items"]]
        assert len(set(ids)) == 4

    def test_items_use_persisted_field_names(self, processed_client: TestClient):
        item = processed_client.get(f"{BASE}/paginado").json()["items"][0]

        assert item["dataVencimento"].startswith("2025-08-28")
        assert item["lida"] is False
        assert {"orcamentoNumero", "clienteNome", "itemDescricao", "palavraChave"} <= set(item)

    def test_invalid_page_size_falls_back_to_default(self, processed_client: TestClient):
        page = processed_client.get(f"{BASE}/paginado", params={"pageSize": 0}).json()
        assert len(page["items"]) == 4

    @pytest.mark.parametrize(
        "path", ["/paginado", "/nao-lidas/paginado", "/ativas/paginado", "/proximas/paginado"]
    )
    def test_non_numeric_page_size_falls_back_to_default(self, processed_client: TestClient, path: str):
        response = processed_client.get(f"{BASE}{path}", params={"pageSize": "abc", "dias": 400})

        assert response.status_code == 200
        assert response.json()["hasMore"] is False

    def test_numeric_page_size_is_honoured(self, processed_client: TestClient):
        page = processed_client.get(f"{BASE}/paginado", params={"pageSize": "2"}).json()

        assert len(page["items"]) == 2
        assert page["hasMore"] is True

    def test_date_window_listings(self, processed_client: TestClient):
        overdue = processed_client.get(f"{BASE}/vencidas/paginado").json()
        active_default = processed_client.get(f"{BASE}/ativas/paginado").json()
        active_90 = processed_client.get(f"{BASE}/ativas/paginado", params={"dias": 90}).json()
        upcoming_90 = processed_client.get(f"{BASE}/proximas/paginado", params={"dias": 90}).json()
        unread = processed_client.get(f"{BASE}/nao-lidas/paginado").json()

        assert overdue["total"] == 0
        assert active_default["total"] == 0
        assert active_90["total"] == 2
        assert upcoming_90["total"] == 2
        assert unread["total"] == 4


class TestSummaryAndCount:
    """Tests for the counters."""

    def test_empty_summary(self, client: TestClient):
        response = client.get(f"{BASE}/resumo")

        assert response.status_code == 200
        assert response.json() == {
            "total": 0,
            "naoLidas": 0,
            "vencidas": 0,
            "proximasVencer": 0,
            "ativas": 0,
        }

    def test_summary_after_backfill(self, processed_client: TestClient):
        summary = processed_client.get(f"{BASE}/resumo").json()

        assert summary["total"] == 4
        assert summary["naoLidas"] == 4
        assert summary["vencidas"] == 0

    def test_unread_count(self, processed_client: TestClient):
        assert processed_client.get(f"{BASE}/nao-lidas/count").json() == {"quantidade": 4}


class TestSingleNotification:
    """Tests for per-notification routes."""

    def _first_id(self, client: TestClient) -> str:
        return client.get(f"{BASE}/paginado").json()["items"][0]["id"]

    def test_get_by_id(self, processed_client: TestClient):
        notification_id = self._first_id(processed_client)

        response = processed_client.get(f"{BASE}/{notification_id}")

        assert response.status_code == 200
        assert response.json()["id"] == notification_id

    def test_get_missing(self, client: TestClient):
        response = client.get(f"{BASE}/missing")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_mark_as_read(self, processed_client: TestClient):
        notification_id = self._first_id(processed_client)

        response = processed_client.patch(f"{BASE}/{notification_id}/lida")

        assert response.status_code == 200
        assert response.json()["lida"] is True
        assert processed_client.get(f"{BASE}/nao-lidas/count").json() == {"quantidade": 3}

    def test_mark_all_as_read(self, processed_client: TestClient):
        response = processed_client.patch(f"{BASE}/marcar-todas-lidas")

        assert response.json() == {"marcadas": 4}
        assert processed_client.get(f"{BASE}/nao-lidas/count").json() == {"quantidade": 0}

    def test_delete(self, processed_client: TestClient):
        notification_id = self._first_id(processed_client)

        first = processed_client.delete(f"{BASE}/{notification_id}")
        second = processed_client.delete(f"{BASE}/{notification_id}")

        assert first.status_code == 204
        assert second.status_code == 404


class TestQuoteStatusRoute:
    """Tests for the quote status endpoint driving generation through events."""

    def test_accepting_generates_and_refusing_retracts(self, client: TestClient, open_quote_id: str):
        accepted = client.patch(f"/api/orcamentos/{open_quote_id}/status", json={"status": "aceito"})

        assert accepted.status_code == 200
        assert accepted.json()["status"] == "aceito"
        assert accepted.json()["dataAceite"] is not None
        assert client.get(f"{BASE}/nao-lidas/count").json() == {"quantidade": 2}

        client.patch(f"/api/orcamentos/{open_quote_id}/status", json={"status": "recusado"})

        assert client.get(f"{BASE}/resumo").json()["total"] == 0

    def test_missing_quote(self, client: TestClient):
        response = client.patch("/api/orcamentos/nonexistent/status", json={"status": "aceito"})
        assert response.status_code == 404

    def test_empty_status_is_rejected(self, client: TestClient, open_quote_id: str):
        response = client.patch(f"/api/orcamentos/{open_quote_id}/status", json={"status": ""})
        assert response.status_code == 422
