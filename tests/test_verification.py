"""
Tests for identity verification.
These tests walk the verification state machine and its precondition order.
"""

import hashlib

import pytest

from didv.config import EVENT_IDENTITY_VERIFIED, STATUS_UNVERIFIED, STATUS_VERIFIED
from didv.errors import (
    AlreadyVerifiedError,
    IdentityNotFoundError,
    InvalidProofHashError,
    ProofMismatchError,
    RegistryError,
    UnauthorizedError,
)


H1 = hashlib.sha256(b"Alice|30|D1").digest()
H2 = hashlib.sha256(b"Alice2|31|D2").digest()
H_WRONG = hashlib.sha256(b"forged").digest()


@pytest.fixture
def submitted(registry, owner):
    """Registry with verifier 'v1' and an unverified identity for 'alice'."""
    registry.add_verifier(owner, "v1")
    registry.submit_identity("alice", "Alice", 30, "D1", H1)
    return registry


class TestVerifyIdentity:
    """Test successful verification."""
    
    def test_verify_with_matching_proof(self, submitted):
        """Test that a verifier with the matching proof verifies the identity."""
        assert submitted.is_verifier("v1")
        
        submitted.verify_identity("v1", "alice", H1)
        
        identity = submitted.get_identity("alice")
        assert submitted.is_verified("alice") is True
        assert identity.status == STATUS_VERIFIED
        assert identity.verifier == "v1"
        assert identity.verified_at is not None
        assert identity.verified_at >= identity.submitted_at
    
    def test_verify_leaves_claim_untouched(self, submitted):
        """Test that verification changes only verification state."""
        before = submitted.get_identity("alice")
        
        submitted.verify_identity("v1", "alice", H1)
        
        after = submitted.get_identity("alice")
        assert after.name == before.name
        assert after.age == before.age
        assert after.document_id == before.document_id
        assert after.proof_hash == before.proof_hash
        assert after.submitted_at == before.submitted_at
    
    def test_verify_accepts_hex_proof(self, submitted):
        """Test that a hex-encoded proof matches the stored bytes."""
        submitted.verify_identity("v1", "alice", H1.hex())
        
        assert submitted.is_verified("alice")
    
    def test_verification_emits_event(self, submitted):
        """Test that success emits IdentityVerified with account and verifier."""
        submitted.verify_identity("v1", "alice", H1)
        
        events = submitted.get_events(kind=EVENT_IDENTITY_VERIFIED)
        assert len(events) == 1
        assert events[0].account == "alice"
        assert events[0].data == {'verifier': "v1"}


class TestVerificationFailures:
    """Test each failing precondition."""
    
    def test_proof_mismatch(self, submitted):
        """Test that a wrong proof fails and leaves the identity unverified."""
        with pytest.raises(ProofMismatchError):
            submitted.verify_identity("v1", "alice", H_WRONG)
        
        assert submitted.is_verified("alice") is False
        assert submitted.get_identity("alice").status == STATUS_UNVERIFIED
        assert submitted.get_events(kind=EVENT_IDENTITY_VERIFIED) == []
    
    def test_non_verifier_unauthorized(self, submitted):
        """Test that a non-verifier cannot verify, even with the right proof."""
        before = submitted.get_identity("alice")
        
        with pytest.raises(UnauthorizedError):
            submitted.verify_identity("mallory", "alice", H1)
        
        assert submitted.get_identity("alice") == before
        assert submitted.get_events(kind=EVENT_IDENTITY_VERIFIED) == []
    
    def test_owner_is_not_implicitly_verifier(self, submitted, owner):
        """Test that the owner needs to be in the verifier set to verify."""
        with pytest.raises(UnauthorizedError):
            submitted.verify_identity(owner, "alice", H1)
    
    def test_unknown_target_not_found(self, submitted):
        """Test that verifying an account with no identity fails with NotFound."""
        with pytest.raises(IdentityNotFoundError):
            submitted.verify_identity("v1", "bob", H1)
    
    def test_already_verified(self, submitted):
        """Test that reverifying is reported and changes nothing."""
        submitted.verify_identity("v1", "alice", H1)
        before = submitted.get_identity("alice")
        events_before = len(submitted.get_events())
        
        with pytest.raises(AlreadyVerifiedError):
            submitted.verify_identity("v1", "alice", H1)
        
        assert submitted.get_identity("alice") == before
        assert len(submitted.get_events()) == events_before
    
    def test_malformed_proof_rejected(self, submitted):
        """Test that a proof of the wrong size is rejected as malformed."""
        with pytest.raises(InvalidProofHashError):
            submitted.verify_identity("v1", "alice", b"abc")
    
    def test_removed_verifier_unauthorized(self, submitted, owner):
        """Test that removing a verifier revokes its privilege."""
        submitted.remove_verifier(owner, "v1")
        
        with pytest.raises(UnauthorizedError):
            submitted.verify_identity("v1", "alice", H1)
    
    def test_error_codes(self):
        """Test that each failure reports its taxonomy name."""
        assert UnauthorizedError.code == "Unauthorized"
        assert IdentityNotFoundError.code == "NotFound"
        assert ProofMismatchError.code == "ProofMismatch"
        assert AlreadyVerifiedError.code == "AlreadyVerified"
        for error in (UnauthorizedError, IdentityNotFoundError, ProofMismatchError, AlreadyVerifiedError):
            assert issubclass(error, RegistryError)


class TestPreconditionOrder:
    """Test that the first failing precondition wins."""
    
    def test_unauthorized_before_not_found(self, submitted):
        """Test that a non-verifier gets Unauthorized for an unknown account."""
        with pytest.raises(UnauthorizedError):
            submitted.verify_identity("mallory", "bob", H1)
    
    def test_unauthorized_before_already_verified(self, submitted):
        """Test that a non-verifier gets Unauthorized for a verified account."""
        submitted.verify_identity("v1", "alice", H1)
        
        with pytest.raises(UnauthorizedError):
            submitted.verify_identity("mallory", "alice", H1)
    
    def test_already_verified_before_mismatch(self, submitted):
        """Test that a verified identity reports AlreadyVerified even for a wrong proof."""
        submitted.verify_identity("v1", "alice", H1)
        
        with pytest.raises(AlreadyVerifiedError):
            submitted.verify_identity("v1", "alice", H_WRONG)
    
    def test_mismatch_then_success(self, submitted):
        """Test that a failed attempt does not block a later correct one."""
        with pytest.raises(ProofMismatchError):
            submitted.verify_identity("v1", "alice", H_WRONG)
        
        submitted.verify_identity("v1", "alice", H1)
        assert submitted.is_verified("alice")


class TestAtMostOneVerification:
    """Test at-most-one effective verification per submission epoch."""
    
    def test_two_verifiers_in_sequence(self, submitted, owner):
        """Test that the second verifier observes AlreadyVerified."""
        submitted.add_verifier(owner, "v2")
        
        submitted.verify_identity("v1", "alice", H1)
        with pytest.raises(AlreadyVerifiedError):
            submitted.verify_identity("v2", "alice", H1)
        
        assert len(submitted.get_events(kind=EVENT_IDENTITY_VERIFIED)) == 1
        assert submitted.get_identity("alice").verifier == "v1"
    
    def test_resubmission_starts_new_epoch(self, submitted):
        """Test that a resubmitted identity can be verified once more."""
        submitted.verify_identity("v1", "alice", H1)
        submitted.submit_identity("alice", "Alice2", 31, "D2", H2)
        
        with pytest.raises(ProofMismatchError):
            submitted.verify_identity("v1", "alice", H1)
        
        submitted.verify_identity("v1", "alice", H2)
        
        events = submitted.get_events(account="alice", kind=EVENT_IDENTITY_VERIFIED)
        assert len(events) == 2
    
    def test_independent_accounts(self, submitted):
        """Test that verifying one account does not affect another."""
        submitted.submit_identity("bob", "Bob", 41, "D9", H2)
        
        submitted.verify_identity("v1", "alice", H1)
        
        assert submitted.is_verified("alice")
        assert not submitted.is_verified("bob")
        submitted.verify_identity("v1", "bob", H2)
        assert submitted.is_verified("bob")


class TestScenarios:
    """End-to-end walk through the documented scenarios."""
    
    def test_full_lifecycle(self, registry, owner):
        """Test submit, verify, failed attempts and reset in sequence."""
        # Scenario 1
        registry.submit_identity("A", "Alice", 30, "D1", H1)
        identity = registry.get_identity("A")
        assert (identity.name, identity.age, identity.document_id, identity.proof_hash, identity.status) == (
            "Alice", 30, "D1", H1, STATUS_UNVERIFIED
        )
        
        # Scenario 3
        registry.add_verifier(owner, "V")
        with pytest.raises(ProofMismatchError):
            registry.verify_identity("V", "A", H_WRONG)
        assert registry.is_verified("A") is False
        
        # Scenario 4
        with pytest.raises(UnauthorizedError):
            registry.verify_identity("not-a-verifier", "A", H1)
        assert registry.is_verified("A") is False
        
        # Scenario 2
        assert registry.is_verifier("V") is True
        registry.verify_identity("V", "A", H1)
        assert registry.is_verified("A") is True
        
        # Scenario 5
        registry.submit_identity("A", "Alice2", 31, "D2", H2)
        assert registry.is_verified("A") is False
