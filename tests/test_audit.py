"""Tests for the sync event logger."""

from uuid import uuid4

from wallet.audit import SyncAuditLogger, create_correlation_id
from wallet.models import SyncEventBuilder, SyncEventType


def completed(correlation_id=None):
    return SyncEventBuilder.fetch_completed(
        "fetch_transactions", "u1", 2, correlation_id or uuid4()
    )


class TestSyncAuditLogger:
    """Tests for SyncAuditLogger."""

    def test_records_in_order(self):
        audit = SyncAuditLogger()
        first, second = completed(), completed()
        assert audit.record(first) is True
        audit.record(second)
        assert audit.recent_events() == [first, second]

    def test_history_is_bounded(self):
        audit = SyncAuditLogger(max_events=2)
        events = [completed() for _ in range(3)]
        for event in events:
            audit.record(event)
        assert audit.recent_events() == events[1:]

    def test_recent_events_limit(self):
        audit = SyncAuditLogger()
        events = [completed() for _ in range(3)]
        for event in events:
            audit.record(event)
        assert audit.recent_events(limit=1) == events[2:]
        assert audit.recent_events(limit=0) == []

    def test_events_for_correlation(self):
        audit = SyncAuditLogger()
        correlation_id = create_correlation_id()
        mine = SyncEventBuilder.fetch_started("fetch_summary", "u1", correlation_id)
        audit.record(mine)
        audit.record(completed())
        audit.record(completed(correlation_id))
        found = audit.events_for(correlation_id)
        assert [e.event_type for e in found] == [
            SyncEventType.FETCH_STARTED,
            SyncEventType.FETCH_COMPLETED,
        ]

    def test_sink_receives_events(self):
        received = []
        audit = SyncAuditLogger(sink=received.append)
        event = completed()
        audit.record(event)
        assert received == [event]

    def test_sink_failure_does_not_raise(self):
        """A broken sink is logged and reported, not propagated."""
        def broken(event):
            raise RuntimeError("disk full")

        audit = SyncAuditLogger(sink=broken)
        event = completed()
        assert audit.record(event) is False
        assert audit.recent_events() == [event]

    def test_clear(self):
        audit = SyncAuditLogger()
        audit.record(completed())
        audit.clear()
        assert audit.recent_events() == []
