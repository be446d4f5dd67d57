"""
Application wiring for Wallet

Builds the synchronization core and everything it depends on from
settings, so the presentation layer only has to ask for a session.

DESIGN DECISION: Nothing here is global. Each call returns a fresh
session with its own store, tracked user and event history.
"""

from dataclasses import dataclass
from typing import Optional

import httpx
import structlog

from wallet.audit import SyncAuditLogger, configure_logging
from wallet.config import Settings, get_settings
from wallet.services.api import HttpTransactionService, Transport
from wallet.sync import TransactionStore


logger = structlog.get_logger("wallet.orchestrator")


@dataclass
class WalletSession:
    """Everything one UI session needs."""

    store: TransactionStore
    service: HttpTransactionService
    audit_logger: SyncAuditLogger

    async def aclose(self) -> None:
        await self.service.aclose()

    async def __aenter__(self) -> "WalletSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def create_app_components(
    user_id: Optional[str] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    settings: Optional[Settings] = None,
    configure_logs: bool = True,
) -> WalletSession:
    """
    Factory function to create all application components.

    Args:
        user_id: Signed-in user, becomes the store's tracked user.
        http_client: Pre-built httpx client (tests, custom transports).
                     The session does not close an injected client.
        settings: Settings to use instead of the cached environment ones.
        configure_logs: Set up structlog from the logging settings.

    Returns:
        A WalletSession. Call `await session.store.prime()` to start
        the initial background load.
    """
    settings = settings or get_settings()
    api = settings.api
    sync = settings.sync

    if configure_logs:
        log_settings = settings.logging
        configure_logging(log_settings.level, log_settings.json_output)

    transport = Transport(api.base_url, client=http_client, timeout=api.timeout_seconds)
    service = HttpTransactionService(transport)
    audit_logger = SyncAuditLogger(max_events=sync.max_recorded_events)
    store = TransactionStore(
        service,
        user_id=user_id,
        audit_logger=audit_logger,
        settings=sync,
    )

    logger.info(
        "session_created",
        base_url=api.base_url,
        tracked_user=user_id,
        auto_fetch=sync.auto_fetch,
    )
    return WalletSession(store=store, service=service, audit_logger=audit_logger)
