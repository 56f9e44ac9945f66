"""
Database schema definitions for DIDV.
All schema changes must be versioned and migrated.
"""

from ..config import DB_SCHEMA_VERSION, PROOF_HASH_LENGTH


# Schema version tracking
SCHEMA_VERSION_TABLE = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL,
    description TEXT NOT NULL
)
"""

# Singleton row holding the owner fixed at creation
REGISTRY_TABLE = """
CREATE TABLE IF NOT EXISTS registry (
    id INTEGER PRIMARY KEY CHECK(id = 1),
    owner TEXT NOT NULL,
    created_at TEXT NOT NULL,
    CHECK(length(owner) > 0)
)
"""

# Identity records, one per account
IDENTITIES_TABLE = f"""
CREATE TABLE IF NOT EXISTS identities (
    account TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    age INTEGER NOT NULL,
    document_id TEXT NOT NULL,
    proof_hash BLOB NOT NULL,
    status TEXT NOT NULL,
    verifier TEXT,
    submitted_at TEXT NOT NULL,
    verified_at TEXT,
    CHECK(length(proof_hash) = {PROOF_HASH_LENGTH}),
    CHECK(status IN ('Unverified', 'Verified')),
    CHECK((status = 'Verified') = (verifier IS NOT NULL)),
    CHECK((status = 'Verified') = (verified_at IS NOT NULL))
)
"""

IDENTITIES_INDEX_STATUS = """
CREATE INDEX IF NOT EXISTS idx_identities_status
ON identities(status)
"""

# Accounts authorized to verify
VERIFIERS_TABLE = """
CREATE TABLE IF NOT EXISTS verifiers (
    account TEXT PRIMARY KEY,
    added_at TEXT NOT NULL
)
"""

# Hash-chained domain event log
EVENTS_TABLE = """
CREATE TABLE IF NOT EXISTS events (
    entry_id INTEGER PRIMARY KEY AUTOINCREMENT,
    kind TEXT NOT NULL,
    account TEXT NOT NULL,
    timestamp TEXT NOT NULL,
    previous_hash TEXT NOT NULL,
    entry_hash TEXT NOT NULL UNIQUE,
    data TEXT,
    CHECK(kind IN ('IdentitySubmitted', 'IdentityVerified', 'VerifierAdded', 'VerifierRemoved')),
    CHECK(length(previous_hash) = 64),
    CHECK(length(entry_hash) = 64)
)
"""

EVENTS_INDEX_ACCOUNT = """
CREATE INDEX IF NOT EXISTS idx_events_account
ON events(account, entry_id)
"""

EVENTS_INDEX_KIND = """
CREATE INDEX IF NOT EXISTS idx_events_kind
ON events(kind, entry_id)
"""

# Signed calls already executed by a host, kept to reject replays
CONSUMED_CALLS_TABLE = """
CREATE TABLE IF NOT EXISTS consumed_calls (
    call_hash TEXT PRIMARY KEY,
    account TEXT NOT NULL,
    operation TEXT NOT NULL,
    consumed_at TEXT NOT NULL,
    CHECK(length(call_hash) = 64)
)
"""

REQUIRED_TABLES = ['schema_version', 'registry', 'identities', 'verifiers', 'events', 'consumed_calls']


def get_schema_statements() -> list[str]:
    """
    Get all schema creation statements in order.
    
    Returns:
        List of SQL statements to create schema
    """
    return [
        SCHEMA_VERSION_TABLE,
        REGISTRY_TABLE,
        IDENTITIES_TABLE,
        IDENTITIES_INDEX_STATUS,
        VERIFIERS_TABLE,
        EVENTS_TABLE,
        EVENTS_INDEX_ACCOUNT,
        EVENTS_INDEX_KIND,
        CONSUMED_CALLS_TABLE,
    ]


def get_initial_version_insert() -> tuple[str, tuple]:
    """
    Get the initial schema version insert statement.
    
    Returns:
        Tuple of (SQL statement, parameters)
    """
    from ..utils.time import now
    
    sql = """
    INSERT INTO schema_version (version, applied_at, description)
    VALUES (?, ?, ?)
    """
    params = (DB_SCHEMA_VERSION, now(), "Initial schema")
    return sql, params
