"""
Canonical JSON serialization for deterministic hashing.
Event payloads and signed calls hash identically wherever they are rebuilt.
"""

import json
from typing import Any

from ..config import JSON_SEPARATORS, JSON_SORT_KEYS, JSON_ENSURE_ASCII


def canonicalize(obj: Any) -> str:
    """
    Serialize an object to canonical JSON.
    
    Keys are sorted, there is no whitespace and NaN/Infinity are rejected.
    
    Args:
        obj: Python object to serialize
        
    Returns:
        Canonical JSON string
        
    Raises:
        TypeError: If object is not JSON-serializable
    """
    try:
        return json.dumps(
            obj,
            separators=JSON_SEPARATORS,
            sort_keys=JSON_SORT_KEYS,
            ensure_ascii=JSON_ENSURE_ASCII,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise TypeError(f"Object not JSON-serializable: {e}")


def canonicalize_bytes(obj: Any) -> bytes:
    """Serialize an object to canonical JSON encoded as UTF-8."""
    return canonicalize(obj).encode('utf-8')
