"""
Tests for the domain event log and tamper detection.
"""

import hashlib

import pytest

from didv.config import (
    EVENT_HASH_CHAIN_INITIAL,
    EVENT_IDENTITY_SUBMITTED,
    EVENT_IDENTITY_VERIFIED,
    EVENT_VERIFIER_ADDED,
)
from didv.errors import EventChainBrokenError, EventIntegrityError, EventLogError


H1 = hashlib.sha256(b"Alice|30|D1").digest()
H2 = hashlib.sha256(b"Bob|41|D9").digest()


@pytest.fixture
def populated(registry, owner):
    """Registry with a verifier, two submissions and one verification."""
    registry.add_verifier(owner, "v1")
    registry.submit_identity("alice", "Alice", 30, "D1", H1)
    registry.submit_identity("bob", "Bob", 41, "D9", H2)
    registry.verify_identity("v1", "alice", H1)
    return registry


class TestEventRecording:
    """Test event emission and queries."""
    
    def test_events_in_order(self, populated):
        """Test that events are stored in emission order."""
        kinds = [e.kind for e in populated.get_events()]
        assert kinds == [
            EVENT_VERIFIER_ADDED,
            EVENT_IDENTITY_SUBMITTED,
            EVENT_IDENTITY_SUBMITTED,
            EVENT_IDENTITY_VERIFIED,
        ]
    
    def test_filter_by_account(self, populated):
        """Test filtering events by account."""
        events = populated.get_events(account="alice")
        assert [e.kind for e in events] == [EVENT_IDENTITY_SUBMITTED, EVENT_IDENTITY_VERIFIED]
    
    def test_filter_by_account_and_kind(self, populated):
        """Test combining filters."""
        events = populated.get_events(account="bob", kind=EVENT_IDENTITY_VERIFIED)
        assert events == []
    
    def test_get_event(self, populated):
        """Test fetching a single event by id."""
        first = populated.get_events()[0]
        assert populated.get_event(first.entry_id) == first
    
    def test_get_missing_event(self, populated):
        """Test that a missing event id raises."""
        with pytest.raises(EventLogError):
            populated.get_event(9999)
    
    def test_chain_links(self, populated):
        """Test that each entry links to the previous entry's hash."""
        events = populated.get_events()
        
        assert events[0].previous_hash == EVENT_HASH_CHAIN_INITIAL
        for previous, current in zip(events, events[1:]):
            assert current.previous_hash == previous.entry_hash
    
    def test_unknown_kind_rejected(self, registry):
        """Test that the log refuses unknown event kinds."""
        with pytest.raises(EventLogError):
            with registry.db.transaction():
                registry.event_log.append("IdentityDeleted", "alice")


class TestAtomicity:
    """Test that state changes and their events commit together."""
    
    def test_failed_event_rolls_back_submission(self, registry, monkeypatch):
        """Test that a submission is undone if its event cannot be recorded."""
        def fail(*args, **kwargs):
            raise EventLogError("disk full")
        
        monkeypatch.setattr(registry.event_log, "append", fail)
        
        with pytest.raises(EventLogError):
            registry.submit_identity("alice", "Alice", 30, "D1", H1)
        
        monkeypatch.undo()
        assert registry.get_identity("alice") is None
        assert registry.get_events() == []
    
    def test_failed_event_rolls_back_verification(self, populated, monkeypatch):
        """Test that a verification is undone if its event cannot be recorded."""
        def fail(*args, **kwargs):
            raise EventLogError("disk full")
        
        monkeypatch.setattr(populated.event_log, "append", fail)
        
        with pytest.raises(EventLogError):
            populated.verify_identity("v1", "bob", H2)
        
        monkeypatch.undo()
        assert populated.is_verified("bob") is False
        assert len(populated.get_events(kind=EVENT_IDENTITY_VERIFIED)) == 1


class TestEventIntegrity:
    """Test event chain verification."""
    
    def test_chain_valid(self, populated):
        """Test that an untouched log verifies."""
        assert populated.verify_event_integrity() is True
        
        summary = populated.get_event_summary()
        assert summary['is_valid'] is True
        assert summary['total_entries'] == 4
        assert summary['tampered_entries'] == []
    
    def test_empty_chain_valid(self, registry):
        """Test that an empty log verifies."""
        assert registry.verify_event_integrity() is True
        assert registry.get_event_summary()['last_hash'] == EVENT_HASH_CHAIN_INITIAL
    
    def test_tampered_data_detected(self, populated):
        """Test that editing an event's data is detected."""
        target = populated.get_events(kind=EVENT_IDENTITY_SUBMITTED)[0]
        populated.db.execute(
            "UPDATE events SET data = ? WHERE entry_id = ?",
            ('{"name":"Mallory","age":30,"proof_hash":"00"}', target.entry_id)
        )
        populated.db.commit()
        
        with pytest.raises(EventIntegrityError):
            populated.verify_event_integrity()
        
        summary = populated.get_event_summary()
        assert summary['is_valid'] is False
        assert summary['tampered_entries'] == [target.entry_id]
    
    def test_unparseable_data_detected(self, populated):
        """Test that event data corrupted into invalid JSON is reported, not raised."""
        populated.db.execute("UPDATE events SET data = '{not json' WHERE entry_id = 2")
        populated.db.commit()
        
        assert populated.get_event(2).data == '{not json'
        
        with pytest.raises(EventIntegrityError):
            populated.verify_event_integrity()
        
        summary = populated.get_event_summary()
        assert summary['is_valid'] is False
        assert summary['tampered_entries'] == [2]
        
        health = populated.health_check()
        assert health['status'] == 'unhealthy'
        assert health['events_valid'] is False
    
    def test_deleted_entry_breaks_chain(self, populated):
        """Test that deleting an entry breaks the chain."""
        second = populated.get_events()[1]
        populated.db.execute("DELETE FROM events WHERE entry_id = ?", (second.entry_id,))
        populated.db.commit()
        
        with pytest.raises(EventChainBrokenError):
            populated.verify_event_integrity()
    
    def test_health_reflects_tampering(self, populated):
        """Test that health check reports a tampered log."""
        populated.db.execute("UPDATE events SET account = 'mallory' WHERE entry_id = 1")
        populated.db.commit()
        
        health = populated.health_check()
        assert health['status'] == 'unhealthy'
        assert health['events_valid'] is False
