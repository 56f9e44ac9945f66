"""
Signed calls into the registry.
The host accepts a call only if it is signed by the key its account derives from.
"""

import secrets
from typing import Dict, Any, Optional
from cryptography.exceptions import InvalidSignature

from ..config import CALL_NONCE_BYTES
from ..errors import KeypairError, SignatureError, UnsignedCallError
from ..utils.canonical_json import canonicalize_bytes
from ..utils.hashing import hash_bytes
from .keypair import Keypair, account_for_public_key, load_public_key


class SignedCall:
    """
    Represents a cryptographically signed registry call.
    """
    
    def __init__(
        self,
        account: str,
        operation: str,
        arguments: Dict[str, Any],
        nonce: str,
        public_key: bytes,
        signature: bytes,
    ):
        """
        Initialize signed call.
        
        Args:
            account: Calling account
            operation: Registry operation name
            arguments: Operation arguments (JSON-serializable)
            nonce: Random hex string making every call unique
            public_key: Caller's Ed25519 public key
            signature: Ed25519 signature over the payload
        """
        self.account = account
        self.operation = operation
        self.arguments = arguments
        self.nonce = nonce
        self.public_key = public_key
        self.signature = signature
    
    def get_payload(self) -> Dict[str, Any]:
        """Get the signed payload (everything except signature)."""
        return {
            'account': self.account,
            'operation': self.operation,
            'arguments': self.arguments,
            'nonce': self.nonce,
            'public_key': self.public_key.hex(),
        }
    
    def get_payload_bytes(self) -> bytes:
        return canonicalize_bytes(self.get_payload())
    
    def get_call_hash(self) -> str:
        """
        Get hash of the signed payload.
        Identifies a call for replay detection.
        """
        return hash_bytes(self.get_payload_bytes())
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            **self.get_payload(),
            'signature': self.signature.hex(),
        }


def sign_call(
    keypair: Keypair,
    operation: str,
    arguments: Optional[Dict[str, Any]] = None,
    nonce: Optional[str] = None,
) -> SignedCall:
    """
    Sign a registry call using a keypair.
    
    Args:
        keypair: Keypair of the calling account
        operation: Registry operation name
        arguments: Operation arguments
        nonce: Optional explicit nonce (random by default)
        
    Returns:
        SignedCall object
    """
    call = SignedCall(
        account=keypair.get_account(),
        operation=operation,
        arguments=arguments or {},
        nonce=nonce or secrets.token_hex(CALL_NONCE_BYTES),
        public_key=keypair.get_public_bytes(),
        signature=b'',
    )
    call.signature = keypair.sign(call.get_payload_bytes())
    return call


def verify_call(call: SignedCall) -> bool:
    """
    Verify that a call is bound to its account and correctly signed.
    
    Args:
        call: SignedCall to verify
        
    Returns:
        True if the call is authentic
        
    Raises:
        SignatureError: If binding or signature verification fails
    """
    if account_for_public_key(call.public_key) != call.account:
        raise SignatureError(f"Account {call.account} is not bound to the presented public key")
    
    try:
        public_key = load_public_key(call.public_key)
        public_key.verify(call.signature, call.get_payload_bytes())
        return True
    except InvalidSignature:
        raise SignatureError("Invalid signature")
    except KeypairError as e:
        raise SignatureError(f"Signature verification failed: {e}")


def parse_signed_call(call_dict: Dict[str, Any]) -> SignedCall:
    """
    Parse a signed call from a dictionary.
    
    Raises:
        UnsignedCallError: If the call is not properly signed or is incomplete
    """
    required = ['account', 'operation', 'nonce', 'public_key', 'signature']
    for field in required:
        if field not in call_dict:
            raise UnsignedCallError(f"Missing required field: {field}")
    
    try:
        signature = bytes.fromhex(call_dict['signature'])
        public_key = bytes.fromhex(call_dict['public_key'])
    except (TypeError, ValueError) as e:
        raise UnsignedCallError(f"Invalid key or signature format: {e}")
    
    return SignedCall(
        account=call_dict['account'],
        operation=call_dict['operation'],
        arguments=call_dict.get('arguments', {}),
        nonce=call_dict['nonce'],
        public_key=public_key,
        signature=signature,
    )
