"""
Abstract Transaction Service Interface

DESIGN DECISION: The synchronization core talks to the remote service
only through this interface. This allows us to:
1. Swap the HTTP client for another transport
2. Use in-memory fakes for testing
3. Keep optimistic-update logic decoupled from wire details

The interface mirrors the remote service's four endpoints and nothing else.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Union

from wallet.models.transaction import (
    Transaction,
    TransactionsSummary,
    TransactionUpdate,
)


class TransactionServiceInterface(ABC):
    """
    Abstract interface for the remote transaction store.

    Any implementation (HTTP, in-memory, etc.) must implement these methods.
    """

    @abstractmethod
    async def list_transactions(self, user_id: str) -> list[Transaction]:
        """
        List a user's transactions in server order.

        Raises:
            RequestFailedError: If the service answers with a failure status
            NetworkError: If the service cannot be reached
        """
        pass

    @abstractmethod
    async def get_summary(self, user_id: str) -> TransactionsSummary:
        """
        Fetch the server-computed summary for a user.

        Raises:
            RequestFailedError: If the service answers with a failure status
            NetworkError: If the service cannot be reached
        """
        pass

    @abstractmethod
    async def update_transaction(
        self,
        transaction_id: int,
        update: TransactionUpdate,
    ) -> Transaction:
        """
        Apply a partial update.

        Returns:
            The full updated record as stored by the server
        """
        pass

    @abstractmethod
    async def delete_transaction(self, transaction_id: int) -> Union[Transaction, Any]:
        """
        Delete a transaction.

        Returns:
            The deleted record when the server sends one, otherwise the raw
            response body (None, text or a JSON value)
        """
        pass


class SyncError(Exception):
    """Base exception for synchronization errors."""
    pass


class MissingUserError(SyncError):
    """No user id given and no tracked user to fall back on."""
    pass


class MissingIdError(SyncError):
    """A transaction operation was called without an id."""
    pass


class RequestFailedError(SyncError):
    """The service answered with a non-success status."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        self.message = message or f"Request failed with status {status_code}"
        super().__init__(self.message)


class NetworkError(SyncError):
    """The request never got an HTTP answer (no connectivity, timeout...)."""
    pass
