"""
Sync Event Models for Wallet

Every network-backed operation of the synchronization core is recorded
as a sequence of events. This provides:
1. Traceability of optimistic changes and their rollbacks
2. Debugging information when the service misbehaves
3. A history the presentation layer can show

DESIGN DECISION: Events are append-only. All events of one operation
share a correlation ID.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class SyncEventType(str, Enum):
    """Types of events the synchronization core emits."""
    # Reads
    FETCH_STARTED = "fetch_started"
    FETCH_COMPLETED = "fetch_completed"
    FETCH_FAILED = "fetch_failed"
    STALE_FETCH_DISCARDED = "stale_fetch_discarded"

    # Mutations
    OPTIMISTIC_APPLIED = "optimistic_applied"
    MUTATION_CONFIRMED = "mutation_confirmed"
    MUTATION_ROLLED_BACK = "mutation_rolled_back"

    # Session
    TRACKED_USER_SWITCHED = "tracked_user_switched"
    PRIME_FAILED = "prime_failed"


class SyncSeverity(str, Enum):
    """Severity level for sync events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class SyncEvent(BaseModel):
    """A single synchronization event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: SyncEventType
    severity: SyncSeverity = SyncSeverity.INFO

    # Which operation and entity this is about
    operation: str = Field(
        ...,
        description="Store operation, e.g. 'delete_transaction'"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Transaction id or user id the event concerns"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Shared by all events of one operation"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "operation": self.operation,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class SyncEventBuilder:
    """
    Helper class to build sync events with common patterns.

    Usage:
        event = SyncEventBuilder.fetch_started("fetch_summary", user_id, correlation_id)
        event = SyncEventBuilder.rolled_back("delete_transaction", 7, message, correlation_id)
    """

    @staticmethod
    def fetch_started(
        operation: str,
        user_id: str,
        correlation_id: UUID,
    ) -> SyncEvent:
        return SyncEvent(
            event_type=SyncEventType.FETCH_STARTED,
            severity=SyncSeverity.DEBUG,
            operation=operation,
            entity_id=user_id,
            correlation_id=correlation_id,
            description="Fetch started",
        )

    @staticmethod
    def fetch_completed(
        operation: str,
        user_id: str,
        item_count: int,
        correlation_id: UUID,
    ) -> SyncEvent:
        return SyncEvent(
            event_type=SyncEventType.FETCH_COMPLETED,
            operation=operation,
            entity_id=user_id,
            correlation_id=correlation_id,
            description=f"Fetch completed with {item_count} items",
            details={"item_count": item_count},
        )

    @staticmethod
    def fetch_failed(
        operation: str,
        user_id: str,
        error_message: str,
        correlation_id: UUID,
    ) -> SyncEvent:
        return SyncEvent(
            event_type=SyncEventType.FETCH_FAILED,
            severity=SyncSeverity.ERROR,
            operation=operation,
            entity_id=user_id,
            correlation_id=correlation_id,
            description="Fetch failed",
            error_message=error_message,
        )

    @staticmethod
    def stale_fetch_discarded(
        operation: str,
        user_id: str,
        generation: int,
        latest_generation: int,
        correlation_id: UUID,
    ) -> SyncEvent:
        return SyncEvent(
            event_type=SyncEventType.STALE_FETCH_DISCARDED,
            severity=SyncSeverity.WARNING,
            operation=operation,
            entity_id=user_id,
            correlation_id=correlation_id,
            description="Fetch result superseded by a newer request",
            details={
                "generation": generation,
                "latest_generation": latest_generation,
            },
        )

    @staticmethod
    def optimistic_applied(
        operation: str,
        transaction_id: int,
        found: bool,
        correlation_id: UUID,
    ) -> SyncEvent:
        return SyncEvent(
            event_type=SyncEventType.OPTIMISTIC_APPLIED,
            severity=SyncSeverity.DEBUG,
            operation=operation,
            entity_id=str(transaction_id),
            correlation_id=correlation_id,
            description=(
                "Optimistic change applied"
                if found
                else "No local entry; request sent without optimistic change"
            ),
            details={"found_locally": found},
        )

    @staticmethod
    def mutation_confirmed(
        operation: str,
        transaction_id: int,
        correlation_id: UUID,
    ) -> SyncEvent:
        return SyncEvent(
            event_type=SyncEventType.MUTATION_CONFIRMED,
            operation=operation,
            entity_id=str(transaction_id),
            correlation_id=correlation_id,
            description="Server confirmed the change",
        )

    @staticmethod
    def rolled_back(
        operation: str,
        transaction_id: int,
        error_message: str,
        correlation_id: UUID,
    ) -> SyncEvent:
        return SyncEvent(
            event_type=SyncEventType.MUTATION_ROLLED_BACK,
            severity=SyncSeverity.WARNING,
            operation=operation,
            entity_id=str(transaction_id),
            correlation_id=correlation_id,
            description="Change rejected; local state restored",
            error_message=error_message,
        )

    @staticmethod
    def tracked_user_switched(
        previous_user_id: Optional[str],
        user_id: str,
        correlation_id: UUID,
    ) -> SyncEvent:
        return SyncEvent(
            event_type=SyncEventType.TRACKED_USER_SWITCHED,
            operation="track_user",
            entity_id=user_id,
            correlation_id=correlation_id,
            description="Tracked user switched",
            details={"previous_user_id": previous_user_id},
        )

    @staticmethod
    def prime_failed(
        operation: str,
        user_id: str,
        error_message: str,
        correlation_id: UUID,
    ) -> SyncEvent:
        return SyncEvent(
            event_type=SyncEventType.PRIME_FAILED,
            severity=SyncSeverity.WARNING,
            operation=operation,
            entity_id=user_id,
            correlation_id=correlation_id,
            description="Background load failed and was discarded",
            error_message=error_message,
        )
