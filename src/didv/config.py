"""
Configuration constants for DIDV.
These are immutable system constants, not runtime configuration.
"""

# Cryptographic constants
HASH_ALGORITHM = "sha256"
KEY_SIZE_BYTES = 32
PROOF_HASH_LENGTH = 32  # Raw bytes of the opaque commitment

# Identity status values
STATUS_UNVERIFIED = "Unverified"
STATUS_VERIFIED = "Verified"
VALID_STATUSES = frozenset([STATUS_UNVERIFIED, STATUS_VERIFIED])

# Claim limits (age is an unsigned 32-bit value)
MAX_AGE = 2**32 - 1

# Domain event kinds
EVENT_IDENTITY_SUBMITTED = "IdentitySubmitted"
EVENT_IDENTITY_VERIFIED = "IdentityVerified"
EVENT_VERIFIER_ADDED = "VerifierAdded"
EVENT_VERIFIER_REMOVED = "VerifierRemoved"
VALID_EVENT_KINDS = frozenset([
    EVENT_IDENTITY_SUBMITTED,
    EVENT_IDENTITY_VERIFIED,
    EVENT_VERIFIER_ADDED,
    EVENT_VERIFIER_REMOVED,
])

# Database constants
DB_SCHEMA_VERSION = 1
EVENT_HASH_CHAIN_INITIAL = "0" * 64  # Initial hash for first entry

# Canonical JSON settings
JSON_SEPARATORS = (',', ':')  # No whitespace
JSON_SORT_KEYS = True
JSON_ENSURE_ASCII = False

# Time constants
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

# Account constants
PUBLIC_KEY_LENGTH = 32  # Ed25519 public key bytes
CALL_NONCE_BYTES = 16

# Logging defaults
DEFAULT_LOG_LEVEL = "INFO"
LOG_SERVICE_NAME = "didv"
