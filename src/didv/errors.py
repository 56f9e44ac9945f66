"""
Domain-specific exceptions for DIDV.
All exceptions are explicit and carry meaningful context.
"""


class DIDVError(Exception):
    """Base exception for all DIDV errors."""
    pass


class RegistryError(DIDVError):
    """Base exception for registry operation failures."""
    code = "RegistryError"


class UnauthorizedError(RegistryError):
    """Raised when the caller lacks the privilege an operation requires."""
    code = "Unauthorized"


class IdentityNotFoundError(RegistryError):
    """Raised when an operation references an account with no identity."""
    code = "NotFound"


class ProofMismatchError(RegistryError):
    """Raised when a supplied proof hash does not equal the stored one."""
    code = "ProofMismatch"


class AlreadyVerifiedError(RegistryError):
    """Raised when verifying an identity that is already verified."""
    code = "AlreadyVerified"


class RegistryStateError(RegistryError):
    """Raised when a registry cannot be created or reopened consistently."""
    code = "RegistryState"


class ValidationError(DIDVError):
    """Base exception for malformed operation inputs."""
    pass


class InvalidClaimError(ValidationError):
    """Raised when claim fields are missing or of the wrong type."""
    pass


class InvalidProofHashError(ValidationError):
    """Raised when a proof hash is not a 32-byte value."""
    pass


class InvalidAccountError(ValidationError):
    """Raised when an account handle is malformed."""
    pass


class EventLogError(DIDVError):
    """Base exception for event log errors."""
    pass


class EventIntegrityError(EventLogError):
    """Raised when event log integrity is compromised."""
    pass


class EventChainBrokenError(EventIntegrityError):
    """Raised when the event hash chain is broken."""
    pass


class DatabaseError(DIDVError):
    """Base exception for database-related errors."""
    pass


class SchemaError(DatabaseError):
    """Raised when database schema operations fail."""
    pass


class MigrationError(DatabaseError):
    """Raised when database migrations fail."""
    pass


class InvariantViolationError(DIDVError):
    """Raised when a core state-machine invariant is violated."""
    pass


class HostError(DIDVError):
    """Base exception for host runtime errors."""
    pass


class KeypairError(HostError):
    """Raised when keypair operations fail."""
    pass


class SignatureError(HostError):
    """Raised when signature validation fails."""
    pass


class UnsignedCallError(HostError):
    """Raised when a call lacks a signature or required fields."""
    pass


class InvalidCallError(HostError):
    """Raised when a call is malformed or names an unknown operation."""
    pass


class ReplayedCallError(HostError):
    """Raised when an already executed call is submitted again."""
    pass
