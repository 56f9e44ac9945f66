"""
Event log integrity verification.
Detects tampering via hash chain validation.
"""

from typing import List, Optional

from ..config import EVENT_HASH_CHAIN_INITIAL
from ..errors import EventChainBrokenError, EventIntegrityError
from ..utils.canonical_json import canonicalize_bytes
from ..utils.hashing import chain_hashes
from .log import EventLog
from .schema import EventRecord, create_event_payload


class ChainVerifier:
    """
    Verifies event log integrity via hash chain validation.
    """
    
    def __init__(self, event_log: EventLog):
        self.event_log = event_log
    
    def verify_entry(self, entry: EventRecord, previous_hash: str) -> bool:
        """
        Verify a single event's integrity.
        
        Args:
            entry: Event to verify
            previous_hash: Expected previous hash
            
        Returns:
            True if entry is valid
            
        Raises:
            EventChainBrokenError: If the entry does not link to previous_hash
            EventIntegrityError: If the entry content does not match its hash
        """
        if entry.previous_hash != previous_hash:
            raise EventChainBrokenError(
                f"Entry {entry.entry_id}: previous_hash mismatch. "
                f"Expected {previous_hash}, got {entry.previous_hash}"
            )
        
        if not isinstance(entry.data, dict):
            raise EventIntegrityError(
                f"Entry {entry.entry_id}: data is not a JSON object"
            )
        
        payload = create_event_payload(
            kind=entry.kind,
            account=entry.account,
            timestamp=entry.timestamp,
            data=entry.data,
        )
        expected_hash = chain_hashes(previous_hash, canonicalize_bytes(payload))
        
        if entry.entry_hash != expected_hash:
            raise EventIntegrityError(
                f"Entry {entry.entry_id}: entry_hash mismatch. "
                f"Expected {expected_hash}, got {entry.entry_hash}"
            )
        
        return True
    
    def verify_chain(self, entries: Optional[List[EventRecord]] = None) -> bool:
        """
        Verify the entire event chain.
        
        Args:
            entries: Optional list of entries to verify (defaults to all entries)
            
        Returns:
            True if entire chain is valid
            
        Raises:
            EventChainBrokenError: If chain is broken
            EventIntegrityError: If any entry is invalid
        """
        if entries is None:
            entries = self.event_log.get_all_entries()
        
        previous_hash = EVENT_HASH_CHAIN_INITIAL
        for entry in entries:
            self.verify_entry(entry, previous_hash)
            previous_hash = entry.entry_hash
        
        return True
    
    def detect_tampering(self, entries: Optional[List[EventRecord]] = None) -> List[int]:
        """
        Scan for tampered entries.
        
        Each entry is checked against the stored hash of its predecessor, so
        a single altered row is reported once rather than poisoning the rest.
        
        Returns:
            List of entry IDs that failed verification
        """
        if entries is None:
            entries = self.event_log.get_all_entries()
        
        tampered = []
        previous_hash = EVENT_HASH_CHAIN_INITIAL
        
        for entry in entries:
            try:
                self.verify_entry(entry, previous_hash)
            except EventIntegrityError:
                tampered.append(entry.entry_id)
            previous_hash = entry.entry_hash
        
        return tampered
    
    def get_chain_summary(self) -> dict:
        """
        Get summary of event chain status.
        
        Returns:
            Dictionary with chain statistics
        """
        entries = self.event_log.get_all_entries()
        
        summary = {
            'total_entries': len(entries),
            'is_valid': True,
            'tampered_entries': [],
            'first_entry_id': None,
            'last_entry_id': None,
            'last_hash': EVENT_HASH_CHAIN_INITIAL,
        }
        
        if entries:
            summary['first_entry_id'] = entries[0].entry_id
            summary['last_entry_id'] = entries[-1].entry_id
            summary['last_hash'] = entries[-1].entry_hash
            
            tampered = self.detect_tampering(entries)
            summary['is_valid'] = not tampered
            summary['tampered_entries'] = tampered
        
        return summary
