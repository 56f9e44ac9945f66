"""
Ed25519 keypairs for registry accounts.
An account handle is the SHA-256 of the account's public key.
"""

from pathlib import Path
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives import serialization

from ..config import KEY_SIZE_BYTES, PUBLIC_KEY_LENGTH
from ..errors import KeypairError
from ..utils.hashing import hash_bytes


class Keypair:
    """
    Ed25519 keypair with account derivation.
    """
    
    def __init__(self, private_key: Ed25519PrivateKey):
        """
        Initialize keypair from private key.
        
        Args:
            private_key: Ed25519 private key object
        """
        if not isinstance(private_key, Ed25519PrivateKey):
            raise KeypairError("Invalid private key type")
        
        self._private_key = private_key
        self._public_key = private_key.public_key()
    
    @classmethod
    def generate(cls) -> 'Keypair':
        """Generate a new Ed25519 keypair."""
        return cls(Ed25519PrivateKey.generate())
    
    @classmethod
    def from_private_bytes(cls, private_bytes: bytes) -> 'Keypair':
        """
        Load keypair from private key bytes.
        
        Args:
            private_bytes: 32-byte Ed25519 private key
            
        Raises:
            KeypairError: If bytes are invalid
        """
        if len(private_bytes) != KEY_SIZE_BYTES:
            raise KeypairError(
                f"Private key must be {KEY_SIZE_BYTES} bytes, got {len(private_bytes)}"
            )
        
        try:
            return cls(Ed25519PrivateKey.from_private_bytes(private_bytes))
        except ValueError as e:
            raise KeypairError(f"Invalid private key bytes: {e}")
    
    @classmethod
    def load_from_file(cls, path: str) -> 'Keypair':
        """
        Load keypair from a PEM file.
        
        Raises:
            KeypairError: If the file cannot be read or holds no Ed25519 key
        """
        try:
            pem_data = Path(path).read_bytes()
        except OSError as e:
            raise KeypairError(f"Cannot read key file: {e}")
        
        try:
            private_key = serialization.load_pem_private_key(pem_data, password=None)
        except ValueError as e:
            raise KeypairError(f"Invalid PEM data: {e}")
        
        if not isinstance(private_key, Ed25519PrivateKey):
            raise KeypairError("PEM does not contain Ed25519 key")
        return cls(private_key)
    
    def save_to_file(self, path: str):
        """
        Save private key to a PEM file readable only by its owner.
        
        Raises:
            KeypairError: If file cannot be written
        """
        pem_data = self._private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        try:
            key_path = Path(path)
            key_path.write_bytes(pem_data)
            key_path.chmod(0o600)
        except OSError as e:
            raise KeypairError(f"Cannot write key file: {e}")
    
    def get_public_bytes(self) -> bytes:
        """Export public key as 32 raw bytes."""
        return self._public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
    
    def get_account(self) -> str:
        """
        Derive the account handle from the public key.
        Account = SHA-256(public_key_bytes)
        
        Returns:
            64-character hex string
        """
        return account_for_public_key(self.get_public_bytes())
    
    def sign(self, data: bytes) -> bytes:
        return self._private_key.sign(data)


def account_for_public_key(public_bytes: bytes) -> str:
    """Derive an account handle from raw public key bytes."""
    return hash_bytes(public_bytes)


def load_public_key(public_bytes: bytes) -> Ed25519PublicKey:
    """
    Load Ed25519 public key from raw bytes.
    
    Raises:
        KeypairError: If bytes are invalid
    """
    if len(public_bytes) != PUBLIC_KEY_LENGTH:
        raise KeypairError(
            f"Public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(public_bytes)}"
        )
    
    try:
        return Ed25519PublicKey.from_public_bytes(public_bytes)
    except ValueError as e:
        raise KeypairError(f"Invalid public key bytes: {e}")
