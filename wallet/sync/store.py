"""
Transaction Store - the synchronization core

Owns the local view of one user's transactions and summary and keeps it
in step with the remote service.

Flow for mutations:
1. Validate preconditions (raise before any request)
2. Apply the change locally right away (optimistic)
3. Send the request
4. Success: reconcile with the server's record
5. Failure: restore what was there before, record the error, re-raise

DESIGN DECISION: No locks, no queue. Operations may overlap; each one
captures its own snapshot when it starts. For overlapping mutations on the
same id the last one to finish wins, rollbacks included. Fetches are
authoritative and replace state wholesale when they complete.

State is never mutated in place: every change installs a new list, so a
snapshot taken by one operation can't be altered by another.
"""

import asyncio
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional, Union
from uuid import UUID

import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from wallet.audit import SyncAuditLogger, create_correlation_id
from wallet.config import SyncSettings, get_settings
from wallet.models.audit import SyncEvent, SyncEventBuilder
from wallet.models.transaction import (
    BalanceSummary,
    Transaction,
    TransactionsSummary,
    TransactionUpdate,
    ensure_unique_ids,
)
from wallet.services.api import (
    MissingIdError,
    MissingUserError,
    NetworkError,
    TransactionServiceInterface,
)


logger = structlog.get_logger("wallet.store")

TRANSACTIONS = "transactions"
SUMMARY = "summary"


def _error_message(exc: BaseException, fallback: str) -> str:
    return str(exc) or fallback


class TransactionStore:
    """
    Stateful engine between the presentation layer and the service.

    One instance per session. The presentation layer reads `transactions`,
    `summary`, `loading` and `error`, and changes them only through the
    operations below (or the explicit setters, for seeding).
    """

    def __init__(
        self,
        service: TransactionServiceInterface,
        user_id: Optional[str] = None,
        audit_logger: Optional[SyncAuditLogger] = None,
        settings: Optional[SyncSettings] = None,
    ):
        """
        Args:
            service: Remote transaction service
            user_id: Initial tracked user, if already known
            audit_logger: Sync event log; a private one is created if omitted
            settings: Sync behaviour; read from the environment if omitted
        """
        self._service = service
        self._settings = settings or get_settings().sync
        self._audit = audit_logger or SyncAuditLogger(
            max_events=self._settings.max_recorded_events
        )

        self._transactions: Optional[list[Transaction]] = None
        self._summary: Optional[TransactionsSummary] = None
        self._tracked_user_id: Optional[str] = user_id or None
        self._loading = False
        self._error: Optional[str] = None

        # Dispatch counters per fetch kind, for the stale-fetch guard
        self._generations = {TRANSACTIONS: 0, SUMMARY: 0}

    # =========================================================================
    # State (read-only)
    # =========================================================================

    @property
    def transactions(self) -> Optional[list[Transaction]]:
        """Current list, or None if never loaded. A copy: mutate via operations."""
        if self._transactions is None:
            return None
        return list(self._transactions)

    @property
    def summary(self) -> Optional[TransactionsSummary]:
        return self._summary

    @property
    def balance(self) -> BalanceSummary:
        return BalanceSummary.from_summary(self._summary)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def tracked_user_id(self) -> Optional[str]:
        return self._tracked_user_id

    @property
    def audit_logger(self) -> SyncAuditLogger:
        return self._audit

    # =========================================================================
    # Seeding
    # =========================================================================

    def set_transactions(
        self,
        transactions: Optional[Iterable[Union[Transaction, Mapping[str, Any]]]],
    ) -> None:
        """
        Replace the list without a network round trip.

        Raises:
            ValueError: If two entries share an id
        """
        if transactions is None:
            self._transactions = None
            return
        items = [
            t if isinstance(t, Transaction) else Transaction.model_validate(t)
            for t in transactions
        ]
        self._transactions = ensure_unique_ids(items)

    def set_summary(
        self,
        summary: Optional[Union[TransactionsSummary, Mapping[str, Any]]],
    ) -> None:
        if summary is not None and not isinstance(summary, TransactionsSummary):
            summary = TransactionsSummary.model_validate(summary)
        self._summary = summary

    # =========================================================================
    # Fetches
    # =========================================================================

    async def fetch_transactions(self, user_id: Optional[str] = None) -> list[Transaction]:
        """
        Load the user's transactions and replace the local list.

        Args:
            user_id: Explicit user; defaults to the tracked user

        Raises:
            MissingUserError: If no user is given or tracked
        """
        uid = self._resolve_user(user_id, "fetch transactions")
        return await self._fetch(
            kind=TRANSACTIONS,
            operation="fetch_transactions",
            user_id=uid,
            call=self._list_unique,
            apply=self._apply_transactions,
            fallback="Failed to fetch transactions",
        )

    async def fetch_summary(self, user_id: Optional[str] = None) -> TransactionsSummary:
        """
        Load the user's summary and replace the local one.

        Raises:
            MissingUserError: If no user is given or tracked
        """
        uid = self._resolve_user(user_id, "fetch summary")
        return await self._fetch(
            kind=SUMMARY,
            operation="fetch_summary",
            user_id=uid,
            call=self._service.get_summary,
            apply=self._apply_summary,
            fallback="Failed to fetch summary",
        )

    async def refetch(self) -> None:
        """Reload transactions, then summary, for the tracked user. No-op without one."""
        uid = self._tracked_user_id
        if not uid:
            return
        await self.fetch_transactions(uid)
        await self.fetch_summary(uid)

    async def _list_unique(self, user_id: str) -> list[Transaction]:
        return ensure_unique_ids(await self._service.list_transactions(user_id))

    def _apply_transactions(self, data: list[Transaction]) -> None:
        self._transactions = list(data)

    def _apply_summary(self, data: TransactionsSummary) -> None:
        self._summary = data

    async def _fetch(
        self,
        kind: str,
        operation: str,
        user_id: str,
        call: Callable[[str], Awaitable[Any]],
        apply: Callable[[Any], None],
        fallback: str,
    ) -> Any:
        correlation_id = create_correlation_id()
        self._track_user(user_id, correlation_id)

        self._generations[kind] += 1
        generation = self._generations[kind]

        self._loading = True
        self._error = None
        self._record(SyncEventBuilder.fetch_started, operation, user_id, correlation_id)

        try:
            data = await call(user_id)
        except Exception as e:
            self._error = _error_message(e, fallback)
            self._record(
                SyncEventBuilder.fetch_failed,
                operation, user_id, self._error, correlation_id,
            )
            raise
        finally:
            self._loading = False

        latest = self._generations[kind]
        if self._settings.discard_stale_fetches and generation < latest:
            self._record(
                SyncEventBuilder.stale_fetch_discarded,
                operation, user_id, generation, latest, correlation_id,
            )
            return data

        apply(data)
        item_count = len(data) if isinstance(data, list) else data.count
        self._record(
            SyncEventBuilder.fetch_completed,
            operation, user_id, item_count, correlation_id,
        )
        return data

    # =========================================================================
    # Mutations
    # =========================================================================

    async def delete_transaction(
        self, transaction_id: Optional[int]
    ) -> Union[Transaction, Any]:
        """
        Delete a transaction, removing it locally before the server answers.

        On failure the whole list is restored to what it was when this
        call started.

        Returns:
            The server's confirmation: the deleted record when one is sent,
            otherwise the raw body

        Raises:
            MissingIdError: If no id is given
        """
        if transaction_id is None:
            raise MissingIdError("id is required")

        operation = "delete_transaction"
        correlation_id = create_correlation_id()

        snapshot = self._transactions
        found = False
        if snapshot is not None:
            remaining = [t for t in snapshot if t.id != transaction_id]
            found = len(remaining) != len(snapshot)
            self._transactions = remaining

        self._error = None
        self._loading = True
        self._record(
            SyncEventBuilder.optimistic_applied,
            operation, transaction_id, found, correlation_id,
        )

        try:
            deleted = await self._service.delete_transaction(transaction_id)
        except Exception as e:
            self._transactions = snapshot
            self._error = _error_message(e, "Failed to delete transaction")
            self._record(
                SyncEventBuilder.rolled_back,
                operation, transaction_id, self._error, correlation_id,
            )
            raise
        finally:
            self._loading = False

        self._record(
            SyncEventBuilder.mutation_confirmed,
            operation, transaction_id, correlation_id,
        )
        return deleted

    async def update_transaction(
        self,
        transaction_id: Optional[int],
        patch: Union[TransactionUpdate, Mapping[str, Any]],
    ) -> Transaction:
        """
        Update a transaction, showing the merged record before the server answers.

        Only the entry itself is restored on failure, and only if it was
        present locally when the call started.

        Returns:
            The server's updated record, which replaces the local one

        Raises:
            MissingIdError: If no id is given
            pydantic.ValidationError: If the patch has unknown or invalid fields
            ValueError: If the server answers with a different transaction;
                the local entry is rolled back as for any failure
        """
        if transaction_id is None:
            raise MissingIdError("id is required")
        update = (
            patch if isinstance(patch, TransactionUpdate)
            else TransactionUpdate.model_validate(patch)
        )

        operation = "update_transaction"
        correlation_id = create_correlation_id()

        existing = self._find(transaction_id)
        if existing is not None:
            self._replace(transaction_id, existing.merged(update))

        self._error = None
        self._loading = True
        self._record(
            SyncEventBuilder.optimistic_applied,
            operation, transaction_id, existing is not None, correlation_id,
        )

        try:
            updated = await self._service.update_transaction(transaction_id, update)
            if updated.id != transaction_id:
                raise ValueError(
                    f"Server returned transaction {updated.id} for update of {transaction_id}"
                )
        except Exception as e:
            if existing is not None:
                self._replace(transaction_id, existing)
            self._error = _error_message(e, "Failed to update transaction")
            self._record(
                SyncEventBuilder.rolled_back,
                operation, transaction_id, self._error, correlation_id,
            )
            raise
        finally:
            self._loading = False

        # Re-locate: other operations may have reshaped the list meanwhile
        self._replace(transaction_id, updated)
        self._record(
            SyncEventBuilder.mutation_confirmed,
            operation, transaction_id, correlation_id,
        )
        return updated

    def _record(self, build: Callable[..., SyncEvent], *args: Any) -> None:
        """Build and record one sync event. Failures are logged and dropped."""
        try:
            self._audit.record(build(*args))
        except Exception:
            logger.exception("sync_event_failed", builder=build.__name__)

    def _find(self, transaction_id: int) -> Optional[Transaction]:
        for item in self._transactions or ():
            if item.id == transaction_id:
                return item
        return None

    def _replace(self, transaction_id: int, record: Transaction) -> bool:
        """Swap the entry with this id for `record`, keeping its position."""
        if self._transactions is None:
            return False
        for index, item in enumerate(self._transactions):
            if item.id == transaction_id:
                clone = list(self._transactions)
                clone[index] = record
                self._transactions = clone
                return True
        return False

    # =========================================================================
    # Tracked user
    # =========================================================================

    def _resolve_user(self, user_id: Optional[str], action: str) -> str:
        uid = user_id if user_id is not None else self._tracked_user_id
        if not uid:
            raise MissingUserError(f"user_id is required to {action}")
        return uid

    def _track_user(self, user_id: str, correlation_id: UUID) -> None:
        previous = self._tracked_user_id
        if previous == user_id:
            return
        self._tracked_user_id = user_id
        self._record(
            SyncEventBuilder.tracked_user_switched,
            previous, user_id, correlation_id,
        )

    # =========================================================================
    # Priming
    # =========================================================================

    async def prime(self) -> bool:
        """
        Best-effort initial load for the tracked user.

        Loads transactions and summary concurrently, but only when auto
        fetch is enabled, a user is tracked, nothing is loaded yet and no
        error is pending. Failures are recorded and discarded; nobody is
        awaiting them.

        Returns:
            True if both loads succeeded
        """
        uid = self._tracked_user_id
        if not self._settings.auto_fetch or not uid:
            return False
        if self._transactions is not None or self._loading or self._error:
            return False

        results = await asyncio.gather(
            self._prime_one("fetch_transactions", self.fetch_transactions, uid),
            self._prime_one("fetch_summary", self.fetch_summary, uid),
        )
        return all(results)

    async def _prime_one(
        self,
        operation: str,
        fetch: Callable[[str], Awaitable[Any]],
        user_id: str,
    ) -> bool:
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._settings.prime_attempts),
                wait=wait_exponential(multiplier=0.5, max=4),
                retry=retry_if_exception_type(NetworkError),
                reraise=True,
            ):
                with attempt:
                    await fetch(user_id)
        except Exception as e:
            self._record(
                SyncEventBuilder.prime_failed,
                operation, user_id, _error_message(e, type(e).__name__), create_correlation_id(),
            )
            return False
        return True
