"""
Append-only domain event log.
Events are written inside the transaction of the mutation that emits them.
"""

import json
from typing import Dict, Any, Optional

from ..config import EVENT_HASH_CHAIN_INITIAL, VALID_EVENT_KINDS
from ..db.connection import DatabaseConnection
from ..errors import DatabaseError, EventLogError
from ..utils.canonical_json import canonicalize_bytes
from ..utils.hashing import chain_hashes
from ..utils.time import now
from .schema import EventRecord, create_event_payload


class EventLog:
    """
    Records registry events in a hash-chained, append-only table.
    """
    
    def __init__(self, db: DatabaseConnection):
        """
        Initialize event log.
        
        Args:
            db: Database connection
        """
        self.db = db
    
    def get_last_entry(self) -> Optional[EventRecord]:
        """Get the most recent event, or None if the log is empty."""
        row = self.db.fetch_one(
            "SELECT * FROM events ORDER BY entry_id DESC LIMIT 1"
        )
        
        if not row:
            return None
        
        return EventRecord.from_row(row)
    
    def get_last_hash(self) -> str:
        """
        Get the hash of the last entry in the chain.
        
        Returns:
            Hash string (initial hash if log is empty)
        """
        last_entry = self.get_last_entry()
        if last_entry is None:
            return EVENT_HASH_CHAIN_INITIAL
        return last_entry.entry_hash
    
    def append(
        self,
        kind: str,
        account: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> EventRecord:
        """
        Append an event to the log.
        
        Must be called inside an open transaction so the event commits or
        rolls back together with the state change it describes.
        
        Args:
            kind: Event kind
            account: Account the event is about
            data: Event-specific fields
            
        Returns:
            Created EventRecord
            
        Raises:
            EventLogError: If the kind is unknown or recording fails
        """
        if kind not in VALID_EVENT_KINDS:
            raise EventLogError(f"Unknown event kind: {kind}")
        
        data = data or {}
        
        try:
            timestamp = now()
            previous_hash = self.get_last_hash()
            
            payload = create_event_payload(
                kind=kind,
                account=account,
                timestamp=timestamp,
                data=data,
            )
            entry_hash = chain_hashes(previous_hash, canonicalize_bytes(payload))
            
            cursor = self.db.execute(
                """
                INSERT INTO events (
                    kind, account, timestamp, previous_hash, entry_hash, data
                )
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    kind,
                    account,
                    timestamp,
                    previous_hash,
                    entry_hash,
                    json.dumps(data) if data else None,
                )
            )
            
        except (DatabaseError, TypeError) as e:
            raise EventLogError(f"Failed to record {kind} event: {e}")
        
        return EventRecord(
            entry_id=cursor.lastrowid,
            kind=kind,
            account=account,
            timestamp=timestamp,
            previous_hash=previous_hash,
            entry_hash=entry_hash,
            data=data,
        )
    
    def get_entry(self, entry_id: int) -> EventRecord:
        """
        Retrieve an event by ID.
        
        Raises:
            EventLogError: If entry not found
        """
        row = self.db.fetch_one(
            "SELECT * FROM events WHERE entry_id = ?",
            (entry_id,)
        )
        
        if not row:
            raise EventLogError(f"Event entry {entry_id} not found")
        
        return EventRecord.from_row(row)
    
    def get_entries(
        self,
        account: Optional[str] = None,
        kind: Optional[str] = None,
    ) -> list[EventRecord]:
        """
        Get events in log order, optionally filtered.
        
        Args:
            account: Only events about this account
            kind: Only events of this kind
            
        Returns:
            List of EventRecord objects
        """
        clauses = []
        params = []
        if account is not None:
            clauses.append("account = ?")
            params.append(account)
        if kind is not None:
            clauses.append("kind = ?")
            params.append(kind)
        
        sql = "SELECT * FROM events"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY entry_id"
        
        rows = self.db.fetch_all(sql, tuple(params))
        return [EventRecord.from_row(row) for row in rows]
    
    def get_all_entries(self) -> list[EventRecord]:
        """Get all events in order."""
        return self.get_entries()
