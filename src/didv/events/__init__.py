"""Domain event log for DIDV."""

from .schema import EventRecord, create_event_payload
from .log import EventLog
from .integrity import ChainVerifier

__all__ = [
    'EventRecord',
    'create_event_payload',
    'EventLog',
    'ChainVerifier',
]
