"""
Transaction API Package

Provides the abstract service contract, its exceptions, and the HTTP
implementation used against the real ledger API.
"""

from wallet.services.api.interface import (
    MissingIdError,
    MissingUserError,
    NetworkError,
    RequestFailedError,
    SyncError,
    TransactionServiceInterface,
)
from wallet.services.api.transport import Transport, build_url, encode_segment
from wallet.services.api.http_service import HttpTransactionService

__all__ = [
    # Interface
    "TransactionServiceInterface",
    # Exceptions
    "MissingIdError",
    "MissingUserError",
    "NetworkError",
    "RequestFailedError",
    "SyncError",
    # HTTP implementation
    "HttpTransactionService",
    "Transport",
    "build_url",
    "encode_segment",
]
