"""
Identity record model and claim validation.
Claims are opaque: only presence and type are checked.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from ..config import (
    MAX_AGE,
    PROOF_HASH_LENGTH,
    STATUS_UNVERIFIED,
    STATUS_VERIFIED,
)
from ..errors import InvalidAccountError, InvalidClaimError, InvalidProofHashError


@dataclass(frozen=True)
class Identity:
    """
    A submitted identity claim and its verification state.
    """
    account: str
    name: str
    age: int
    document_id: str
    proof_hash: bytes
    status: str
    submitted_at: str
    verifier: Optional[str] = None
    verified_at: Optional[str] = None
    
    @property
    def is_verified(self) -> bool:
        return self.status == STATUS_VERIFIED
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert identity to dictionary."""
        return {
            'account': self.account,
            'name': self.name,
            'age': self.age,
            'document_id': self.document_id,
            'proof_hash': self.proof_hash.hex(),
            'status': self.status,
            'verifier': self.verifier,
            'submitted_at': self.submitted_at,
            'verified_at': self.verified_at,
        }
    
    @classmethod
    def from_row(cls, row) -> 'Identity':
        """Create identity from database row."""
        return cls(
            account=row['account'],
            name=row['name'],
            age=row['age'],
            document_id=row['document_id'],
            proof_hash=bytes(row['proof_hash']),
            status=row['status'],
            submitted_at=row['submitted_at'],
            verifier=row['verifier'],
            verified_at=row['verified_at'],
        )
    
    @classmethod
    def unverified(
        cls,
        account: str,
        name: str,
        age: int,
        document_id: str,
        proof_hash: bytes,
        submitted_at: str,
    ) -> 'Identity':
        """Build a freshly submitted record."""
        return cls(
            account=account,
            name=name,
            age=age,
            document_id=document_id,
            proof_hash=proof_hash,
            status=STATUS_UNVERIFIED,
            submitted_at=submitted_at,
        )


def normalize_proof_hash(proof_hash: Union[bytes, bytearray, str]) -> bytes:
    """
    Normalize a proof hash to its raw 32-byte form.
    
    Args:
        proof_hash: Raw bytes or a hex-encoded string
        
    Returns:
        32 raw bytes
        
    Raises:
        InvalidProofHashError: If the value is not a 32-byte digest
    """
    if isinstance(proof_hash, str):
        try:
            proof_hash = bytes.fromhex(proof_hash)
        except ValueError as e:
            raise InvalidProofHashError(f"Proof hash is not valid hex: {e}")
    elif isinstance(proof_hash, bytearray):
        proof_hash = bytes(proof_hash)
    elif not isinstance(proof_hash, bytes):
        raise InvalidProofHashError(
            f"Proof hash must be bytes or hex string, got {type(proof_hash).__name__}"
        )
    
    if len(proof_hash) != PROOF_HASH_LENGTH:
        raise InvalidProofHashError(
            f"Proof hash must be {PROOF_HASH_LENGTH} bytes, got {len(proof_hash)}"
        )
    
    return proof_hash


def _is_encodable(text: str) -> bool:
    # lone surrogates survive str checks but cannot be stored
    try:
        text.encode('utf-8')
    except UnicodeEncodeError:
        return False
    return True


def validate_account(account: Any, role: str = "account"):
    """
    Validate an account handle.
    
    Raises:
        InvalidAccountError: If the handle is not a non-empty string
    """
    if not isinstance(account, str) or not account:
        raise InvalidAccountError(f"{role} must be a non-empty string, got {account!r}")
    
    if not _is_encodable(account):
        raise InvalidAccountError(f"{role} is not valid UTF-8 text: {account!r}")


def validate_claim(name: Any, age: Any, document_id: Any):
    """
    Validate claim field presence and types.
    
    Args:
        name: Claimed name
        age: Claimed age (unsigned 32-bit integer)
        document_id: Claimed document identifier
        
    Raises:
        InvalidClaimError: If a field is missing or of the wrong type
    """
    if not isinstance(name, str):
        raise InvalidClaimError(f"name must be a string, got {type(name).__name__}")
    
    if not isinstance(document_id, str):
        raise InvalidClaimError(
            f"document_id must be a string, got {type(document_id).__name__}"
        )
    
    for field, value in (('name', name), ('document_id', document_id)):
        if not _is_encodable(value):
            raise InvalidClaimError(f"{field} is not valid UTF-8 text: {value!r}")
    
    # bool is an int subclass but never a meaningful age
    if isinstance(age, bool) or not isinstance(age, int):
        raise InvalidClaimError(f"age must be an integer, got {type(age).__name__}")
    
    if age < 0 or age > MAX_AGE:
        raise InvalidClaimError(f"age must be between 0 and {MAX_AGE}, got {age}")
