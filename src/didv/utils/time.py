"""
Time utilities for monotonic timestamps.
Timestamps are ISO 8601 formatted and never go backwards within a process.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from ..config import TIMESTAMP_FORMAT


class MonotonicClock:
    """
    Monotonic clock that ensures timestamps never go backwards.
    Keeps event log and record timestamps ordered.
    """
    
    def __init__(self):
        self._last_timestamp: Optional[str] = None
    
    def now(self) -> str:
        """
        Get current timestamp, guaranteed to be > previous timestamp.
        
        Returns:
            ISO 8601 formatted timestamp string
        """
        current_str = datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)
        
        if self._last_timestamp is not None and current_str <= self._last_timestamp:
            # Clock stalled or went backwards: step one microsecond past the last value
            last_dt = datetime.strptime(self._last_timestamp, TIMESTAMP_FORMAT)
            current_str = (last_dt + timedelta(microseconds=1)).strftime(TIMESTAMP_FORMAT)
        
        self._last_timestamp = current_str
        return current_str


_clock = MonotonicClock()


def now() -> str:
    """Get current monotonic timestamp."""
    return _clock.now()
