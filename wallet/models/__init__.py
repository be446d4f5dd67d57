"""
Data Models Package

This package contains all Pydantic models used by the wallet client.
All data exchanged with the transaction service must conform to these schemas.
"""

from wallet.models.transaction import (
    BalanceSummary,
    CategoryTotal,
    Transaction,
    TransactionsSummary,
    TransactionUpdate,
    ensure_unique_ids,
)
from wallet.models.audit import (
    SyncEvent,
    SyncEventBuilder,
    SyncEventType,
    SyncSeverity,
)

__all__ = [
    # Transaction models
    "BalanceSummary",
    "CategoryTotal",
    "Transaction",
    "TransactionsSummary",
    "TransactionUpdate",
    "ensure_unique_ids",
    # Sync event models
    "SyncEvent",
    "SyncEventBuilder",
    "SyncEventType",
    "SyncSeverity",
]
