"""
Tests for state machine invariant validation.
These tests feed the validators states the registry must never produce.
"""

from dataclasses import replace

import pytest

from didv.config import STATUS_UNVERIFIED, STATUS_VERIFIED
from didv.errors import InvariantViolationError
from didv.identity import Identity
from didv.invariants import *


def make_identity(**overrides):
    identity = Identity.unverified(
        account="alice",
        name="Alice",
        age=30,
        document_id="D1",
        proof_hash=b"\x01" * 32,
        submitted_at="2026-01-01T00:00:00.000000Z",
    )
    return replace(identity, **overrides)


def make_verified(**overrides):
    fields = {
        'status': STATUS_VERIFIED,
        'verifier': "v1",
        'verified_at': "2026-01-01T00:00:01.000000Z",
    }
    fields.update(overrides)
    return make_identity(**fields)


class TestStatusTransitions:
    """Test the legal and illegal status transitions."""
    
    @pytest.mark.parametrize("previous", [None, STATUS_UNVERIFIED, STATUS_VERIFIED])
    def test_submit_always_resets(self, previous):
        """Test that submission from any state to Unverified is legal."""
        validate_status_transition(previous, STATUS_UNVERIFIED, "submit")
    
    def test_submit_cannot_verify(self):
        """Test that submission never produces a verified record."""
        with pytest.raises(InvariantViolationError):
            validate_status_transition(None, STATUS_VERIFIED, "submit")
    
    def test_verify_unverified(self):
        """Test that Unverified -> Verified is legal."""
        validate_status_transition(STATUS_UNVERIFIED, STATUS_VERIFIED, "verify")
    
    @pytest.mark.parametrize("previous,current", [
        (STATUS_VERIFIED, STATUS_VERIFIED),
        (STATUS_VERIFIED, STATUS_UNVERIFIED),
        (STATUS_UNVERIFIED, STATUS_UNVERIFIED),
        (None, STATUS_VERIFIED),
    ])
    def test_illegal_verify_transitions(self, previous, current):
        """Test that verification cannot revert, repeat or skip submission."""
        with pytest.raises(InvariantViolationError):
            validate_status_transition(previous, current, "verify")
    
    def test_unknown_status(self):
        """Test that unknown statuses are rejected."""
        with pytest.raises(InvariantViolationError):
            validate_status("Pending")
    
    def test_unknown_operation(self):
        """Test that unknown state machine operations are rejected."""
        with pytest.raises(InvariantViolationError):
            validate_status_transition(STATUS_UNVERIFIED, STATUS_UNVERIFIED, "delete")


class TestVerifierBinding:
    """Test that verifier fields track the status."""
    
    def test_consistent_records(self):
        """Test that well-formed records pass."""
        validate_verifier_binding(make_identity())
        validate_verifier_binding(make_verified())
    
    def test_verified_without_verifier(self):
        """Test that a verified record must name its verifier."""
        with pytest.raises(InvariantViolationError):
            validate_verifier_binding(make_verified(verifier=None))
    
    def test_unverified_with_verifier(self):
        """Test that an unverified record must not name a verifier."""
        with pytest.raises(InvariantViolationError):
            validate_verifier_binding(make_identity(verifier="v1"))
    
    def test_verified_without_timestamp(self):
        """Test that a verified record must carry its verification time."""
        with pytest.raises(InvariantViolationError):
            validate_verifier_binding(make_verified(verified_at=None))


class TestVerificationInvariants:
    """Test the combined post-verification check."""
    
    def test_valid_verification(self):
        """Test that a clean verification passes."""
        check_verification_invariants(make_identity(), make_verified(), "v1")
    
    def test_proof_hash_changed(self):
        """Test that the proof hash is immutable across verification."""
        with pytest.raises(InvariantViolationError):
            check_verification_invariants(
                make_identity(), make_verified(proof_hash=b"\x02" * 32), "v1"
            )
    
    def test_wrong_verifier_recorded(self):
        """Test that the record must name the verifier that acted."""
        with pytest.raises(InvariantViolationError):
            check_verification_invariants(make_identity(), make_verified(), "v2")
    
    def test_missing_after(self):
        """Test that the record cannot vanish during verification."""
        with pytest.raises(InvariantViolationError):
            check_verification_invariants(make_identity(), None, "v1")


class TestSubmissionInvariants:
    """Test the combined post-submission check."""
    
    def test_valid_submission(self):
        """Test that a record read back as written passes."""
        identity = make_identity()
        check_submission_invariants(make_verified(), identity, identity)
    
    def test_stored_differs(self):
        """Test that a stored record must equal the submitted one."""
        with pytest.raises(InvariantViolationError):
            check_submission_invariants(None, make_identity(name="Eve"), make_identity())
    
    def test_stored_missing(self):
        """Test that the submitted record must exist after the write."""
        with pytest.raises(InvariantViolationError):
            check_submission_invariants(None, None, make_identity())
