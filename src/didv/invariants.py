"""
Runtime validation of the identity state machine.
These checks run before a mutation commits; a violation aborts it.
"""

from typing import Optional

from .errors import InvariantViolationError
from .config import STATUS_UNVERIFIED, STATUS_VERIFIED, VALID_STATUSES
from .identity.model import Identity


def validate_status(status: str):
    """
    Validate that status is one of the allowed values.
    
    Raises:
        InvariantViolationError: If status is unknown
    """
    if status not in VALID_STATUSES:
        raise InvariantViolationError(f"Invalid identity status: {status}")


def validate_status_transition(previous: Optional[str], current: str, operation: str):
    """
    Validate a status change against the identity state machine.
    
    Submission may move any state (including no record) to Unverified.
    Verification may only move Unverified to Verified.
    
    Args:
        previous: Status before the operation, None if no record existed
        current: Status after the operation
        operation: 'submit' or 'verify'
        
    Raises:
        InvariantViolationError: If the transition is illegal
    """
    if previous is not None:
        validate_status(previous)
    validate_status(current)
    
    if operation == "submit":
        if current != STATUS_UNVERIFIED:
            raise InvariantViolationError(
                f"Submission must leave identity {STATUS_UNVERIFIED}, got {current}"
            )
    elif operation == "verify":
        if previous != STATUS_UNVERIFIED or current != STATUS_VERIFIED:
            raise InvariantViolationError(
                f"Illegal verification transition {previous} -> {current}"
            )
    else:
        raise InvariantViolationError(f"Unknown state machine operation: {operation}")


def validate_verifier_binding(identity: Identity):
    """
    Validate that verifier and verified_at are set exactly when verified.
    
    Raises:
        InvariantViolationError: If binding is inconsistent
    """
    verified = identity.status == STATUS_VERIFIED
    
    if verified != (identity.verifier is not None):
        raise InvariantViolationError(
            f"Identity {identity.account} has status {identity.status} "
            f"but verifier {identity.verifier!r}"
        )
    
    if verified != (identity.verified_at is not None):
        raise InvariantViolationError(
            f"Identity {identity.account} has status {identity.status} "
            f"but verified_at {identity.verified_at!r}"
        )


def validate_claim_unchanged(before: Identity, after: Identity):
    """
    Validate that verification touched nothing but verification state.
    
    Raises:
        InvariantViolationError: If claim fields or the proof hash changed
    """
    for field in ('account', 'name', 'age', 'document_id', 'proof_hash', 'submitted_at'):
        if getattr(before, field) != getattr(after, field):
            raise InvariantViolationError(
                f"Identity {before.account}: field '{field}' changed during verification"
            )


def check_submission_invariants(
    previous: Optional[Identity],
    stored: Optional[Identity],
    submitted: Identity,
):
    """
    Check all invariants after a submission, before commit.
    
    Args:
        previous: Record before the submission, if any
        stored: Record read back after the write
        submitted: Record that was written
        
    Raises:
        InvariantViolationError: If any invariant is violated
    """
    if stored is None:
        raise InvariantViolationError(f"Identity {submitted.account} missing after submission")
    
    if stored != submitted:
        raise InvariantViolationError(
            f"Identity {submitted.account} does not match the submitted fields"
        )
    
    validate_status_transition(
        previous.status if previous is not None else None,
        stored.status,
        "submit",
    )
    validate_verifier_binding(stored)


def check_verification_invariants(
    before: Identity,
    after: Optional[Identity],
    verifier: str,
):
    """
    Check all invariants after a verification, before commit.
    
    Args:
        before: Record before the verification
        after: Record read back after the update
        verifier: Verifier that performed the verification
        
    Raises:
        InvariantViolationError: If any invariant is violated
    """
    if after is None:
        raise InvariantViolationError(f"Identity {before.account} missing after verification")
    
    validate_status_transition(before.status, after.status, "verify")
    validate_verifier_binding(after)
    validate_claim_unchanged(before, after)
    
    if after.verifier != verifier:
        raise InvariantViolationError(
            f"Identity {after.account} records verifier {after.verifier}, expected {verifier}"
        )
