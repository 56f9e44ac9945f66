"""
Host runtime for the registry.

Plays the part of the execution environment: it authenticates each signed
call, then invokes the registry with the authenticated account as caller.
The registry itself never sees keys or signatures.
"""

from typing import Dict, Any

from ..errors import InvalidCallError, ReplayedCallError
from ..registry import VerificationRegistry
from ..utils.log import get_logger
from ..utils.time import now
from .calls import SignedCall, parse_signed_call, verify_call
from .ledger import CallLedger

logger = get_logger(__name__)

# Mutating operations and the arguments each accepts besides the caller
CALL_ARGUMENTS = {
    'submit_identity': frozenset(['name', 'age', 'document_id', 'proof_hash']),
    'verify_identity': frozenset(['target_account', 'proof_hash']),
    'add_verifier': frozenset(['account']),
    'remove_verifier': frozenset(['account']),
}

QUERY_OPERATIONS = frozenset(['get_identity', 'is_verified', 'is_verifier'])


class HostRuntime:
    """
    Authenticates signed calls and dispatches them to a registry.
    """
    
    def __init__(self, registry: VerificationRegistry):
        self.registry = registry
        self.ledger = CallLedger(registry.db)
    
    def execute(self, call: SignedCall):
        """
        Authenticate and execute a mutating call.
        
        A call is consumed once it authenticates, whatever the outcome of the
        registry operation. Consumed calls are stored in the registry database,
        so a call cannot be replayed through another host or after a restart.
        
        Args:
            call: Signed call to execute
            
        Raises:
            InvalidCallError: If operation or arguments are unknown
            SignatureError: If the call is not authentic
            ReplayedCallError: If the call was already executed
            RegistryError: Whatever the registry operation raises
        """
        expected = CALL_ARGUMENTS.get(call.operation)
        if expected is None:
            raise InvalidCallError(f"Unknown operation: {call.operation}")
        
        if not isinstance(call.arguments, dict) or set(call.arguments) != expected:
            raise InvalidCallError(
                f"{call.operation} expects arguments {sorted(expected)}, "
                f"got {sorted(call.arguments) if isinstance(call.arguments, dict) else call.arguments!r}"
            )
        
        verify_call(call)
        
        call_hash = call.get_call_hash()
        with self.registry.db.transaction():
            consumed = self.ledger.consume(call_hash, call.account, call.operation, now())
        
        if not consumed:
            logger.warning("call_replay_rejected", account=call.account, operation=call.operation)
            raise ReplayedCallError(f"Call {call_hash} was already executed")
        
        logger.debug("call_dispatched", account=call.account, operation=call.operation)
        
        handler = getattr(self.registry, call.operation)
        handler(call.account, **call.arguments)
    
    def execute_dict(self, call_dict: Dict[str, Any]):
        """Parse and execute a call from dictionary format."""
        self.execute(parse_signed_call(call_dict))
    
    def query(self, operation: str, account: str) -> Any:
        """
        Run a read-only query. Queries need no authentication.
        
        Args:
            operation: get_identity, is_verified or is_verifier
            account: Account to query
            
        Raises:
            InvalidCallError: If operation is not a query
        """
        if operation not in QUERY_OPERATIONS:
            raise InvalidCallError(f"Unknown query: {operation}")
        
        return getattr(self.registry, operation)(account)
