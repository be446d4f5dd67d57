"""
HTTP Transaction Service Implementation

Talks to the remote ledger API:

    GET    /api/v1/transactions/{user_id}           list transactions
    GET    /api/v1/transactions/summary/{user_id}   summary
    PUT    /api/v1/transactions/{id}                update (partial body)
    DELETE /api/v1/transactions/{id}                delete (any 2xx body accepted)

Path segments are percent-encoded. Payloads are validated into models
here, so anything malformed fails before it reaches local state.
"""

from typing import Any, Optional, Union

from pydantic import TypeAdapter, ValidationError

from wallet.config import get_settings
from wallet.models.transaction import (
    Transaction,
    TransactionsSummary,
    TransactionUpdate,
)
from wallet.services.api.interface import TransactionServiceInterface
from wallet.services.api.transport import Transport, encode_segment


TRANSACTIONS_PATH = "/api/v1/transactions"

_transaction_list = TypeAdapter(list[Transaction])


class HttpTransactionService(TransactionServiceInterface):
    """Transaction service backed by the HTTP API."""

    def __init__(self, transport: Optional[Transport] = None):
        if transport is None:
            api = get_settings().api
            transport = Transport(api.base_url, timeout=api.timeout_seconds)
        self._transport = transport

    @property
    def transport(self) -> Transport:
        return self._transport

    async def list_transactions(self, user_id: str) -> list[Transaction]:
        data = await self._transport.request(
            "GET", f"{TRANSACTIONS_PATH}/{encode_segment(user_id)}"
        )
        return _transaction_list.validate_python(data)

    async def get_summary(self, user_id: str) -> TransactionsSummary:
        data = await self._transport.request(
            "GET", f"{TRANSACTIONS_PATH}/summary/{encode_segment(user_id)}"
        )
        return TransactionsSummary.model_validate(data)

    async def update_transaction(
        self,
        transaction_id: int,
        update: TransactionUpdate,
    ) -> Transaction:
        data = await self._transport.request(
            "PUT",
            f"{TRANSACTIONS_PATH}/{encode_segment(transaction_id)}",
            json=update.to_payload(),
        )
        return Transaction.model_validate(data)

    async def delete_transaction(self, transaction_id: int) -> Union[Transaction, Any]:
        data = await self._transport.request(
            "DELETE", f"{TRANSACTIONS_PATH}/{encode_segment(transaction_id)}"
        )
        # Any 2xx confirms the delete; the body is only informational
        if isinstance(data, dict):
            try:
                return Transaction.model_validate(data)
            except ValidationError:
                return data
        return data

    async def aclose(self) -> None:
        await self._transport.aclose()
