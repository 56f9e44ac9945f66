"""
Event record structure.
Every domain event is stored immutably with hash chaining.
"""

import json
from typing import Dict, Any, Union
from dataclasses import dataclass


@dataclass
class EventRecord:
    """
    Represents a single entry in the event log.
    """
    entry_id: int
    kind: str
    account: str
    timestamp: str
    previous_hash: str
    entry_hash: str
    data: Union[Dict[str, Any], str]
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert event record to dictionary."""
        return {
            'entry_id': self.entry_id,
            'kind': self.kind,
            'account': self.account,
            'timestamp': self.timestamp,
            'previous_hash': self.previous_hash,
            'entry_hash': self.entry_hash,
            'data': self.data,
        }
    
    @classmethod
    def from_row(cls, row) -> 'EventRecord':
        """
        Create event record from database row.
        
        Data that no longer parses is kept as raw text so integrity checks
        can report the entry instead of failing to load it.
        """
        data = {}
        if row['data']:
            try:
                data = json.loads(row['data'])
            except json.JSONDecodeError:
                data = row['data']
        
        return cls(
            entry_id=row['entry_id'],
            kind=row['kind'],
            account=row['account'],
            timestamp=row['timestamp'],
            previous_hash=row['previous_hash'],
            entry_hash=row['entry_hash'],
            data=data,
        )


def create_event_payload(
    kind: str,
    account: str,
    timestamp: str,
    data: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Create the payload for an event entry (before hashing).
    
    Args:
        kind: Event kind
        account: Account the event is about
        timestamp: Time of emission
        data: Event-specific fields
        
    Returns:
        Payload dictionary
    """
    return {
        'kind': kind,
        'account': account,
        'timestamp': timestamp,
        'data': data,
    }
