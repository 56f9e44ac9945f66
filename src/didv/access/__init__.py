"""Access control for DIDV."""

from .verifier_set import VerifierSet
from .control import AccessControl

__all__ = [
    'VerifierSet',
    'AccessControl',
]
