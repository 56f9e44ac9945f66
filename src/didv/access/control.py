"""
Authorization checks for registry operations.

Two privileges exist:
- owner: the single account fixed at registry creation, may manage verifiers
- verifier: any member of the verifier set, may verify identities
"""

from ..errors import UnauthorizedError
from .verifier_set import VerifierSet


class AccessControl:
    """
    Answers and enforces who may do what.
    """
    
    def __init__(self, owner: str, verifiers: VerifierSet):
        """
        Initialize access control.
        
        Args:
            owner: Owner account (immutable)
            verifiers: Verifier set backing verification privilege
        """
        self._owner = owner
        self.verifiers = verifiers
    
    @property
    def owner(self) -> str:
        return self._owner
    
    def is_owner(self, account: str) -> bool:
        return account == self._owner
    
    def is_verifier(self, account: str) -> bool:
        return self.verifiers.contains(account)
    
    def require_owner(self, caller: str, operation: str):
        """
        Ensure the caller is the registry owner.
        
        Args:
            caller: Authenticated caller
            operation: Operation name, for the error message
            
        Raises:
            UnauthorizedError: If caller is not the owner
        """
        if not self.is_owner(caller):
            raise UnauthorizedError(f"Only the owner can {operation}; caller {caller} is not the owner")
    
    def require_verifier(self, caller: str):
        """
        Ensure the caller is a registered verifier.
        
        Raises:
            UnauthorizedError: If caller is not in the verifier set
        """
        if not self.is_verifier(caller):
            raise UnauthorizedError(f"Only verifiers can verify identities; caller {caller} is not a verifier")
