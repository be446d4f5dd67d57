"""Services package."""

from wallet.services.api import (
    HttpTransactionService,
    MissingIdError,
    MissingUserError,
    NetworkError,
    RequestFailedError,
    SyncError,
    TransactionServiceInterface,
    Transport,
)

__all__ = [
    "HttpTransactionService",
    "MissingIdError",
    "MissingUserError",
    "NetworkError",
    "RequestFailedError",
    "SyncError",
    "TransactionServiceInterface",
    "Transport",
]
