"""
Verifier set storage.
Membership is the only signal that authorizes a verification.
"""

from ..db.connection import DatabaseConnection


class VerifierSet:
    """
    Set of accounts permitted to verify identities.
    
    Writes assume the caller holds an open transaction.
    """
    
    def __init__(self, db: DatabaseConnection):
        self.db = db
    
    def add(self, account: str, added_at: str) -> bool:
        """
        Insert an account into the set.
        
        Args:
            account: Account to authorize
            added_at: Timestamp of the change
            
        Returns:
            True if the account was not already present
        """
        cursor = self.db.execute(
            "INSERT OR IGNORE INTO verifiers (account, added_at) VALUES (?, ?)",
            (account, added_at)
        )
        return cursor.rowcount == 1
    
    def remove(self, account: str) -> bool:
        """
        Remove an account from the set.
        
        Returns:
            True if the account was present
        """
        cursor = self.db.execute(
            "DELETE FROM verifiers WHERE account = ?",
            (account,)
        )
        return cursor.rowcount == 1
    
    def contains(self, account: str) -> bool:
        row = self.db.fetch_one(
            "SELECT 1 FROM verifiers WHERE account = ? LIMIT 1",
            (account,)
        )
        return row is not None
    
    def list_all(self) -> list[str]:
        """List verifier accounts in the order they were added."""
        rows = self.db.fetch_all("SELECT account FROM verifiers ORDER BY added_at, account")
        return [row['account'] for row in rows]
    
    def count(self) -> int:
        row = self.db.fetch_one("SELECT COUNT(*) as count FROM verifiers")
        return row['count'] if row else 0
