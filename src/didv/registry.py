"""
DIDV Public API - Identity Verification Registry

This is the main entry point for the DIDV system.
Every state change to identities and verifiers flows through this registry.
"""

from typing import Dict, Any, Optional, Union

from .access import AccessControl, VerifierSet
from .config import (
    EVENT_IDENTITY_SUBMITTED,
    EVENT_IDENTITY_VERIFIED,
    EVENT_VERIFIER_ADDED,
    EVENT_VERIFIER_REMOVED,
    STATUS_VERIFIED,
)
from .db.connection import DatabaseConnection
from .db.migrations import initialize_schema, verify_schema
from .errors import (
    AlreadyVerifiedError,
    DIDVError,
    IdentityNotFoundError,
    InvariantViolationError,
    ProofMismatchError,
    RegistryError,
    RegistryStateError,
    UnauthorizedError,
)
from .events import ChainVerifier, EventLog, EventRecord
from .identity import (
    Identity,
    IdentityStore,
    normalize_proof_hash,
    validate_account,
    validate_claim,
)
from .invariants import check_submission_invariants, check_verification_invariants
from .utils.hashing import digests_equal
from .utils.log import get_logger
from .utils.time import now

logger = get_logger(__name__)

ProofHash = Union[bytes, bytearray, str]


class VerificationRegistry:
    """
    Identity verification registry.

    This is the primary interface for:
    - Submitting identity claims
    - Verifying claims against their proof hash
    - Managing the verifier set (owner only)
    - Querying identities and the event log

    The caller of every operation is an account already authenticated by
    the hosting environment.
    """

    def __init__(self, db_path: str, creator: Optional[str] = None):
        """
        Open a registry, creating it if the database is empty.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
            creator: Account creating the registry; becomes the owner.
                Required for a new registry, optional when reopening.

        Raises:
            RegistryStateError: If creator is missing for a new registry or
                differs from the owner of an existing one
        """
        self.db = DatabaseConnection(db_path)
        self.db.connect()

        try:
            initialize_schema(self.db)
            owner = self._load_or_create_owner(creator)
        except DIDVError:
            self.db.close()
            raise

        self.identity_store = IdentityStore(self.db)
        self.verifier_set = VerifierSet(self.db)
        self.access = AccessControl(owner, self.verifier_set)
        self.event_log = EventLog(self.db)
        self.chain_verifier = ChainVerifier(self.event_log)

    def _load_or_create_owner(self, creator: Optional[str]) -> str:
        if creator is not None:
            validate_account(creator, "creator")

        with self.db.transaction():
            row = self.db.fetch_one("SELECT owner FROM registry WHERE id = 1")

            if row is None:
                if creator is None:
                    raise RegistryStateError(
                        f"Registry at {self.db.db_path} does not exist and no creator was given"
                    )
                self.db.execute(
                    "INSERT INTO registry (id, owner, created_at) VALUES (1, ?, ?)",
                    (creator, now())
                )
                logger.info("registry_created", db_path=self.db.db_path, owner=creator)
                return creator

        owner = row['owner']
        if creator is not None and creator != owner:
            raise RegistryStateError(
                f"Registry at {self.db.db_path} is owned by {owner}, not {creator}"
            )

        logger.debug("registry_opened", db_path=self.db.db_path, owner=owner)
        return owner

    def close(self):
        """Close database connection."""
        self.db.close()

    @property
    def owner(self) -> str:
        """The account fixed as owner at creation."""
        return self.access.owner

    # ==================== Submission ====================

    def submit_identity(
        self,
        caller: str,
        name: str,
        age: int,
        document_id: str,
        proof_hash: ProofHash,
    ):
        """
        Submit (or resubmit) the caller's own identity claim.

        Any prior record for the caller is replaced entirely and its
        verification is reset to Unverified.

        Args:
            caller: Authenticated submitting account
            name: Claimed name
            age: Claimed age
            document_id: Claimed document identifier
            proof_hash: 32-byte commitment (bytes or hex string)

        Raises:
            InvalidAccountError: If caller is malformed
            InvalidClaimError: If claim fields are missing or mistyped
            InvalidProofHashError: If proof_hash is not 32 bytes
        """
        validate_account(caller, "caller")
        validate_claim(name, age, document_id)
        proof = normalize_proof_hash(proof_hash)

        with self.db.transaction():
            previous = self.identity_store.find(caller)

            identity = Identity.unverified(
                account=caller,
                name=name,
                age=age,
                document_id=document_id,
                proof_hash=proof,
                submitted_at=now(),
            )
            self.identity_store.put(identity)

            check_submission_invariants(previous, self.identity_store.find(caller), identity)

            self.event_log.append(
                EVENT_IDENTITY_SUBMITTED,
                caller,
                {'name': name, 'age': age, 'proof_hash': proof.hex()},
            )

        logger.info(
            "identity_submitted",
            account=caller,
            resubmission=previous is not None,
            verification_reset=previous is not None and previous.is_verified,
        )

    # ==================== Verification ====================

    def verify_identity(self, caller: str, target_account: str, proof_hash: ProofHash):
        """
        Verify another account's identity by matching its proof hash.

        Preconditions are checked in order and the first failure wins:
        1. caller is a verifier
        2. target_account has an identity
        3. that identity is not already verified
        4. proof_hash equals the stored proof hash

        Args:
            caller: Authenticated verifier account
            target_account: Account whose identity is verified
            proof_hash: Proof hash presented for comparison

        Raises:
            UnauthorizedError: If caller is not a verifier
            IdentityNotFoundError: If target_account never submitted
            AlreadyVerifiedError: If the identity is already verified
            ProofMismatchError: If proof_hash does not match
        """
        validate_account(caller, "caller")
        validate_account(target_account, "target_account")
        proof = normalize_proof_hash(proof_hash)

        try:
            with self.db.transaction():
                self.access.require_verifier(caller)

                before = self.identity_store.find(target_account)
                if before is None:
                    raise IdentityNotFoundError(f"Identity {target_account} not found")

                if before.is_verified:
                    raise AlreadyVerifiedError(
                        f"Identity {target_account} already verified by {before.verifier}"
                    )

                if not digests_equal(before.proof_hash, proof):
                    raise ProofMismatchError(
                        f"Proof hash does not match identity {target_account}"
                    )

                if not self.identity_store.mark_verified(target_account, caller, now()):
                    raise InvariantViolationError(
                        f"Identity {target_account} changed while being verified"
                    )

                check_verification_invariants(
                    before, self.identity_store.find(target_account), caller
                )

                self.event_log.append(
                    EVENT_IDENTITY_VERIFIED,
                    target_account,
                    {'verifier': caller},
                )
        except RegistryError as e:
            logger.warning(
                "verification_rejected",
                verifier=caller,
                account=target_account,
                reason=e.code,
            )
            raise

        logger.info("identity_verified", account=target_account, verifier=caller)

    # ==================== Verifier Management ====================

    def add_verifier(self, caller: str, account: str):
        """
        Grant verification privilege to an account (owner only).

        Adding an existing verifier is a no-op.

        Raises:
            UnauthorizedError: If caller is not the owner
        """
        validate_account(caller, "caller")
        validate_account(account, "verifier")

        try:
            with self.db.transaction():
                self.access.require_owner(caller, "add verifiers")

                added = self.verifier_set.add(account, now())
                if added:
                    self.event_log.append(EVENT_VERIFIER_ADDED, account)
        except UnauthorizedError:
            logger.warning("verifier_change_rejected", caller=caller, verifier=account, change="add")
            raise

        logger.info("verifier_added", verifier=account, changed=added)

    def remove_verifier(self, caller: str, account: str):
        """
        Revoke verification privilege from an account (owner only).

        Removing an absent verifier is a no-op.

        Raises:
            UnauthorizedError: If caller is not the owner
        """
        validate_account(caller, "caller")
        validate_account(account, "verifier")

        try:
            with self.db.transaction():
                self.access.require_owner(caller, "remove verifiers")

                removed = self.verifier_set.remove(account)
                if removed:
                    self.event_log.append(EVENT_VERIFIER_REMOVED, account)
        except UnauthorizedError:
            logger.warning("verifier_change_rejected", caller=caller, verifier=account, change="remove")
            raise

        logger.info("verifier_removed", verifier=account, changed=removed)

    # ==================== Queries ====================

    def get_identity(self, account: str) -> Optional[Identity]:
        """
        Get the stored identity for an account.

        Returns:
            Identity or None if the account never submitted
        """
        return self.identity_store.find(account)

    def is_verified(self, account: str) -> bool:
        """
        Check if an account's identity is verified.

        Returns False both when no identity exists and when it is
        unverified; use get_identity to tell the two apart.
        """
        return self.identity_store.is_verified(account)

    def is_verifier(self, account: str) -> bool:
        """Check if an account is a registered verifier."""
        return self.access.is_verifier(account)

    def list_verifiers(self) -> list[str]:
        return self.verifier_set.list_all()

    def list_identities(self) -> list[Identity]:
        return self.identity_store.list_all()

    # ==================== Event Log ====================

    def get_event(self, entry_id: int) -> EventRecord:
        """
        Get an event log entry.

        Raises:
            EventLogError: If the entry does not exist
        """
        return self.event_log.get_entry(entry_id)

    def get_events(
        self,
        account: Optional[str] = None,
        kind: Optional[str] = None,
    ) -> list[EventRecord]:
        """
        Get emitted events in order.

        Args:
            account: Optional filter by account
            kind: Optional filter by event kind

        Returns:
            List of EventRecord objects
        """
        return self.event_log.get_entries(account=account, kind=kind)

    def verify_event_integrity(self) -> bool:
        """
        Verify event log integrity.

        Returns:
            True if the event log is intact

        Raises:
            EventChainBrokenError: If chain is broken
            EventIntegrityError: If entries are tampered
        """
        return self.chain_verifier.verify_chain()

    def get_event_summary(self) -> Dict[str, Any]:
        """Get event log summary with tampered entry ids."""
        return self.chain_verifier.get_chain_summary()

    # ==================== Utilities ====================

    def health_check(self) -> Dict[str, Any]:
        """
        Perform registry health check.

        Returns:
            Health status dictionary
        """
        try:
            schema_valid = verify_schema(self.db)
            event_summary = self.get_event_summary()

            return {
                'status': 'healthy' if schema_valid and event_summary['is_valid'] else 'unhealthy',
                'schema_valid': schema_valid,
                'events_valid': event_summary['is_valid'],
                'event_entries': event_summary['total_entries'],
                'owner': self.owner,
                'identities': self.identity_store.count(),
                'verified_identities': self.identity_store.count(STATUS_VERIFIED),
                'verifiers': self.verifier_set.count(),
            }
        except DIDVError as e:
            logger.error("health_check_failed", error=str(e))
            return {
                'status': 'error',
                'error': str(e),
            }

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
