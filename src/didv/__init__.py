"""
DIDV - Identity Verification Registry

A SQLite-backed registry where users submit identity claims, a
permissioned set of verifiers attest to them by matching a proof hash,
and a single owner manages the verifier set.

Main exports:
- VerificationRegistry: Main registry class
- Identity: Stored identity record
- HostRuntime: Authenticates signed calls before they reach the registry
- Keypair: Ed25519 keypair for account handles
"""

from .registry import VerificationRegistry
from .identity import Identity
from .events import EventRecord
from .host import HostRuntime, Keypair, SignedCall, sign_call
from .utils.log import setup_logging, get_logger
from .errors import *
from .config import *

__version__ = "0.1.0"

__all__ = [
    'VerificationRegistry',
    'Identity',
    'EventRecord',
    'HostRuntime',
    'Keypair',
    'SignedCall',
    'sign_call',
    'setup_logging',
    'get_logger',
]
