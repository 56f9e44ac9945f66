"""Identity records for DIDV."""

from .model import Identity, normalize_proof_hash, validate_claim, validate_account
from .identity_store import IdentityStore

__all__ = [
    'Identity',
    'normalize_proof_hash',
    'validate_claim',
    'validate_account',
    'IdentityStore',
]
