"""
Identity storage and retrieval.
One row per account; submissions replace the whole row.
"""

from typing import Optional

from ..config import STATUS_UNVERIFIED, STATUS_VERIFIED
from ..db.connection import DatabaseConnection
from .model import Identity


class IdentityStore:
    """
    Manages identity records in the database.
    
    Writes assume the caller holds an open transaction.
    """
    
    def __init__(self, db: DatabaseConnection):
        """
        Initialize identity store.
        
        Args:
            db: Database connection
        """
        self.db = db
    
    def put(self, identity: Identity):
        """
        Write an identity, replacing any prior record for the account.
        
        Args:
            identity: Record to store
        """
        self.db.execute(
            """
            INSERT OR REPLACE INTO identities (
                account, name, age, document_id, proof_hash,
                status, verifier, submitted_at, verified_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                identity.account,
                identity.name,
                identity.age,
                identity.document_id,
                identity.proof_hash,
                identity.status,
                identity.verifier,
                identity.submitted_at,
                identity.verified_at,
            )
        )
    
    def find(self, account: str) -> Optional[Identity]:
        """
        Retrieve an identity by account.
        
        Args:
            account: Account to look up
            
        Returns:
            Identity object or None if the account never submitted
        """
        row = self.db.fetch_one(
            "SELECT * FROM identities WHERE account = ?",
            (account,)
        )
        
        if not row:
            return None
        
        return Identity.from_row(row)
    
    def mark_verified(self, account: str, verifier: str, verified_at: str) -> bool:
        """
        Flip an unverified record to verified.
        
        The status guard is part of the update so a record already verified
        is never touched.
        
        Args:
            account: Account whose record is verified
            verifier: Verifier performing the verification
            verified_at: Verification timestamp
            
        Returns:
            True if exactly one record changed
        """
        cursor = self.db.execute(
            """
            UPDATE identities
            SET status = ?, verifier = ?, verified_at = ?
            WHERE account = ? AND status = ?
            """,
            (STATUS_VERIFIED, verifier, verified_at, account, STATUS_UNVERIFIED)
        )
        return cursor.rowcount == 1
    
    def is_verified(self, account: str) -> bool:
        """True only if a record exists and is verified."""
        row = self.db.fetch_one(
            "SELECT status FROM identities WHERE account = ?",
            (account,)
        )
        return row is not None and row['status'] == STATUS_VERIFIED
    
    def list_all(self) -> list[Identity]:
        """List all identities in submission order."""
        rows = self.db.fetch_all("SELECT * FROM identities ORDER BY submitted_at, account")
        return [Identity.from_row(row) for row in rows]
    
    def count(self, status: Optional[str] = None) -> int:
        """
        Count identities, optionally restricted to one status.
        
        Args:
            status: Optional status filter
            
        Returns:
            Number of records
        """
        if status is None:
            row = self.db.fetch_one("SELECT COUNT(*) as count FROM identities")
        else:
            row = self.db.fetch_one(
                "SELECT COUNT(*) as count FROM identities WHERE status = ?",
                (status,)
            )
        return row['count'] if row else 0
