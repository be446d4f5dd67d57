"""Shared fixtures for Wallet tests."""

import pytest

from tests.fakes import FakeTransactionService, U1_SUMMARY, U1_TRANSACTIONS
from wallet.config import SyncSettings
from wallet.sync import TransactionStore


@pytest.fixture
def sync_settings() -> SyncSettings:
    return SyncSettings(
        auto_fetch=True,
        prime_attempts=1,
        discard_stale_fetches=False,
        max_recorded_events=100,
    )


@pytest.fixture
def service() -> FakeTransactionService:
    fake = FakeTransactionService()
    fake.transactions_by_user["u1"] = [dict(r) for r in U1_TRANSACTIONS]
    fake.summaries["u1"] = dict(U1_SUMMARY)
    return fake


@pytest.fixture
def store(service, sync_settings) -> TransactionStore:
    return TransactionStore(service, settings=sync_settings)


@pytest.fixture
def seeded_store(service, sync_settings) -> TransactionStore:
    """Store already holding u1's list, as if fetched."""
    s = TransactionStore(service, user_id="u1", settings=sync_settings)
    s.set_transactions(U1_TRANSACTIONS)
    return s
