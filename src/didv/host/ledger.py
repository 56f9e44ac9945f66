"""
Consumed call storage.
A signed call may run at most once per registry database.
"""

from ..db.connection import DatabaseConnection


class CallLedger:
    """
    Records the hashes of executed signed calls.
    
    Writes assume the caller holds an open transaction.
    """
    
    def __init__(self, db: DatabaseConnection):
        self.db = db
    
    def consume(self, call_hash: str, account: str, operation: str, consumed_at: str) -> bool:
        """
        Mark a call as executed.
        
        Returns:
            True if the call had not been consumed before
        """
        cursor = self.db.execute(
            """
            INSERT OR IGNORE INTO consumed_calls (call_hash, account, operation, consumed_at)
            VALUES (?, ?, ?, ?)
            """,
            (call_hash, account, operation, consumed_at)
        )
        return cursor.rowcount == 1
    
    def contains(self, call_hash: str) -> bool:
        row = self.db.fetch_one(
            "SELECT 1 FROM consumed_calls WHERE call_hash = ? LIMIT 1",
            (call_hash,)
        )
        return row is not None
    
    def count(self, account=None) -> int:
        if account is None:
            row = self.db.fetch_one("SELECT COUNT(*) as count FROM consumed_calls")
        else:
            row = self.db.fetch_one(
                "SELECT COUNT(*) as count FROM consumed_calls WHERE account = ?",
                (account,)
            )
        return row['count'] if row else 0
