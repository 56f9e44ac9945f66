"""
Cryptographic hashing utilities.
All hashing is deterministic and uses SHA-256.
"""

import hashlib
import hmac

from ..config import HASH_ALGORITHM


def hash_bytes(data: bytes) -> str:
    """
    Hash bytes using SHA-256.
    
    Args:
        data: Raw bytes to hash
        
    Returns:
        Hex-encoded hash string (64 characters)
    """
    if not isinstance(data, bytes):
        raise TypeError(f"Expected bytes, got {type(data)}")
    
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(data)
    return hasher.hexdigest()


def hash_string(data: str) -> str:
    """Hash a UTF-8 encoded string using SHA-256."""
    if not isinstance(data, str):
        raise TypeError(f"Expected str, got {type(data)}")
    
    return hash_bytes(data.encode('utf-8'))


def digests_equal(left: bytes, right: bytes) -> bool:
    """
    Compare two digests in constant time.
    
    Args:
        left: First digest
        right: Second digest
        
    Returns:
        True if both digests are byte-for-byte equal
    """
    if not isinstance(left, bytes) or not isinstance(right, bytes):
        raise TypeError("Digests must be bytes")
    
    return hmac.compare_digest(left, right)


def chain_hashes(previous_hash: str, current_data: bytes) -> str:
    """
    Create a chained hash by combining previous hash with current data.
    This is used for event log integrity.
    
    Args:
        previous_hash: Previous entry's hash (hex string)
        current_data: Current entry's data
        
    Returns:
        Hex-encoded hash of (previous_hash || current_data)
    """
    if not isinstance(previous_hash, str):
        raise TypeError(f"Expected str for previous_hash, got {type(previous_hash)}")
    
    if len(previous_hash) != 64:
        raise ValueError(f"Invalid previous_hash length: {len(previous_hash)}")
    
    if not isinstance(current_data, bytes):
        raise TypeError(f"Expected bytes for current_data, got {type(current_data)}")
    
    combined = previous_hash.encode('utf-8') + current_data
    return hash_bytes(combined)
