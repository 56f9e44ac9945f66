"""Host runtime: authenticates callers before they reach the registry."""

from .keypair import Keypair, load_public_key
from .calls import SignedCall, sign_call, verify_call, parse_signed_call
from .ledger import CallLedger
from .runtime import HostRuntime

__all__ = [
    'Keypair',
    'load_public_key',
    'SignedCall',
    'sign_call',
    'verify_call',
    'parse_signed_call',
    'CallLedger',
    'HostRuntime',
]
