"""Synchronization core package."""

from wallet.sync.store import TransactionStore

__all__ = ["TransactionStore"]
