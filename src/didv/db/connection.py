"""
Database connection management for DIDV.
All database operations use parameterized queries to prevent injection.
"""

import sqlite3
from pathlib import Path
from typing import Optional
from contextlib import contextmanager

from ..errors import DatabaseError

MEMORY_PATH = ":memory:"


class DatabaseConnection:
    """
    Manages a SQLite connection holding the registry state.
    """
    
    def __init__(self, db_path: str):
        """
        Initialize database connection.
        
        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        self.db_path = db_path
        self._connection: Optional[sqlite3.Connection] = None
    
    @property
    def is_memory(self) -> bool:
        return self.db_path == MEMORY_PATH
    
    def connect(self) -> sqlite3.Connection:
        """
        Establish database connection with security settings.
        
        Returns:
            SQLite connection object
            
        Raises:
            DatabaseError: If connection fails
        """
        if self._connection is not None:
            return self._connection
        
        try:
            if not self.is_memory:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            
            conn = sqlite3.connect(
                self.db_path,
                isolation_level='DEFERRED',
                check_same_thread=False,
            )
            
            conn.execute("PRAGMA foreign_keys = ON")
            conn.execute("PRAGMA trusted_schema = OFF")
            
            if not self.is_memory:
                conn.execute("PRAGMA journal_mode = WAL")
            
            conn.row_factory = sqlite3.Row
            
            self._connection = conn
            return conn
            
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to connect to database: {e}")
    
    def close(self):
        """Close database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
    
    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """
        Execute a SQL statement with parameters.
        
        Args:
            sql: SQL statement (use ? for parameters)
            params: Parameter values
            
        Returns:
            Cursor object
            
        Raises:
            DatabaseError: If execution fails
        """
        conn = self.connect()
        try:
            return conn.execute(sql, params)
        except sqlite3.Error as e:
            raise DatabaseError(f"SQL execution failed: {e}")
    
    def fetch_one(self, sql: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        """Execute query and fetch one row (or None)."""
        cursor = self.execute(sql, params)
        return cursor.fetchone()
    
    def fetch_all(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Execute query and fetch all rows."""
        cursor = self.execute(sql, params)
        return cursor.fetchall()
    
    def commit(self):
        """Commit current transaction."""
        if self._connection is not None:
            try:
                self._connection.commit()
            except sqlite3.Error as e:
                raise DatabaseError(f"Commit failed: {e}")
    
    def rollback(self):
        """Rollback current transaction."""
        if self._connection is not None:
            try:
                self._connection.rollback()
            except sqlite3.Error as e:
                raise DatabaseError(f"Rollback failed: {e}")
    
    @contextmanager
    def transaction(self):
        """
        Context manager for a write transaction.
        
        The transaction is opened with BEGIN IMMEDIATE so that the reads
        guarding a mutation and the mutation itself see the same state.
        Any exception rolls everything back and is re-raised.
        
        Usage:
            with db.transaction():
                db.execute(...)
        """
        conn = self.connect()
        if conn.in_transaction:
            raise DatabaseError("Nested transactions are not supported")
        
        try:
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to begin transaction: {e}")
        
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
