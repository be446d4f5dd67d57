"""
Sync Event Logger

DESIGN DECISION: Every optimistic change, confirmation and rollback is logged.
This provides:
1. Traceability of what the user saw versus what the server accepted
2. Debugging capability for flaky connectivity
3. A recent-history view for the presentation layer

The logger:
- Always logs locally through structlog
- Keeps a bounded in-memory history
- Forwards to an optional sink, and never lets a sink failure
  break the operation being recorded
"""

import logging
from collections import deque
from typing import Callable, Optional
from uuid import UUID, uuid4

import structlog

from wallet.models.audit import SyncEvent, SyncSeverity


SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """
    Configure structlog on top of stdlib logging.

    Called once by the application factory; importing this module only
    installs the processor chain.
    """
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[*SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


structlog.configure(
    processors=[*SHARED_PROCESSORS, structlog.processors.JSONRenderer()],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


EventSink = Callable[[SyncEvent], None]


class SyncAuditLogger:
    """
    Central sync event log.

    Logs events to:
    1. Structured local log (for debugging)
    2. A bounded in-memory history (for display)
    3. An optional sink supplied by the host application
    """

    def __init__(
        self,
        max_events: int = 200,
        sink: Optional[EventSink] = None,
    ):
        """
        Initialize sync event logger.

        Args:
            max_events: How many recent events to keep in memory.
            sink: Called with every event, e.g. to persist it.
                  Exceptions it raises are logged and dropped.
        """
        self._events: deque[SyncEvent] = deque(maxlen=max_events)
        self._sink = sink
        self._logger = structlog.get_logger("wallet.sync")

    def record(self, event: SyncEvent) -> bool:
        """
        Record a sync event.

        Returns True unless the sink raised.
        """
        log_dict = event.to_log_dict()

        if event.severity == SyncSeverity.ERROR:
            self._logger.error("sync_event", **log_dict)
        elif event.severity == SyncSeverity.WARNING:
            self._logger.warning("sync_event", **log_dict)
        elif event.severity == SyncSeverity.DEBUG:
            self._logger.debug("sync_event", **log_dict)
        else:
            self._logger.info("sync_event", **log_dict)

        self._events.append(event)

        if self._sink is not None:
            try:
                self._sink(event)
            except Exception as e:
                self._logger.error(
                    "sync_event_sink_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def recent_events(self, limit: Optional[int] = None) -> list[SyncEvent]:
        """Most recent events, oldest first."""
        events = list(self._events)
        if limit is not None:
            events = events[-limit:] if limit > 0 else []
        return events

    def events_for(self, correlation_id: UUID) -> list[SyncEvent]:
        """All retained events of one operation, in order."""
        return [e for e in self._events if e.correlation_id == correlation_id]

    def clear(self) -> None:
        self._events.clear()


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    The store creates one per operation and passes it to every
    event the operation emits.
    """
    return uuid4()
