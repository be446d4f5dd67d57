"""Tests for application wiring, end to end over a mocked HTTP service."""

import httpx
import pytest

from wallet.config import get_settings
from wallet.orchestrator import create_app_components
from wallet.services.api import RequestFailedError


ROWS = {
    "u1": [
        {"id": 1, "user_id": "u1", "title": "Salary", "amount": 100, "category": "Income"},
        {"id": 2, "user_id": "u1", "title": "Shoes", "amount": -40, "category": "Shopping"},
    ],
}


def ledger_handler(request: httpx.Request) -> httpx.Response:
    """Tiny stand-in for the ledger API."""
    path = request.url.path
    if request.method == "GET" and path.startswith("/api/v1/transactions/summary/"):
        user = path.rsplit("/", 1)[-1]
        rows = ROWS.get(user, [])
        return httpx.Response(200, json={
            "total_amount": sum(r["amount"] for r in rows),
            "count": len(rows),
            "byCategory": [
                {"category": r["category"], "total_amount": r["amount"], "count": 1}
                for r in rows
            ],
        })
    if request.method == "GET":
        user = path.rsplit("/", 1)[-1]
        return httpx.Response(200, json=ROWS.get(user, []))
    if request.method == "DELETE":
        return httpx.Response(500, json={"message": "Delete is disabled"})
    return httpx.Response(405, text="Method not allowed")


@pytest.fixture
def session(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("API_BASE_URL", "https://ledger.test")
    monkeypatch.delenv("EXPO_PUBLIC_API_BASE_URL", raising=False)
    get_settings.cache_clear()
    client = httpx.AsyncClient(transport=httpx.MockTransport(ledger_handler))
    yield create_app_components(user_id="u1", http_client=client, configure_logs=False)
    get_settings.cache_clear()


class TestCreateAppComponents:
    """Tests for create_app_components."""

    def test_wires_tracked_user_and_base_url(self, session):
        assert session.store.tracked_user_id == "u1"
        assert session.service.transport.base_url == "https://ledger.test"
        assert session.store.audit_logger is session.audit_logger

    @pytest.mark.asyncio
    async def test_prime_then_failed_delete(self, session):
        store = session.store

        assert await store.prime() is True
        assert [t.id for t in store.transactions] == [1, 2]
        assert store.balance.income == 100

        with pytest.raises(RequestFailedError, match="Delete is disabled"):
            await store.delete_transaction(2)
        assert [t.id for t in store.transactions] == [1, 2]
        assert store.error == "Delete is disabled"

    @pytest.mark.asyncio
    async def test_sessions_are_independent(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        get_settings.cache_clear()
        client = httpx.AsyncClient(transport=httpx.MockTransport(ledger_handler))
        a = create_app_components(user_id="u1", http_client=client, configure_logs=False)
        b = create_app_components(http_client=client, configure_logs=False)

        await a.store.fetch_transactions()
        assert b.store.transactions is None
        assert b.store.tracked_user_id is None
        await client.aclose()
