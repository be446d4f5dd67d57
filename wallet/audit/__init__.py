"""Sync event logging package."""

from wallet.audit.logger import (
    SyncAuditLogger,
    configure_logging,
    create_correlation_id,
)

__all__ = ["SyncAuditLogger", "configure_logging", "create_correlation_id"]
