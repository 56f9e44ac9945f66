"""
Database migration management for DIDV.
Ensures schema is correctly initialized and versioned.
"""

from typing import Optional

from .connection import DatabaseConnection
from .schema import (
    get_schema_statements,
    get_initial_version_insert,
    DB_SCHEMA_VERSION,
    REQUIRED_TABLES,
)
from ..errors import DatabaseError, SchemaError


def get_current_version(db: DatabaseConnection) -> Optional[int]:
    """
    Get current schema version from database.
    
    Args:
        db: Database connection
        
    Returns:
        Current version number or None if not initialized
    """
    row = db.fetch_one(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
    )
    if not row:
        return None
    
    row = db.fetch_one("SELECT MAX(version) as version FROM schema_version")
    if row and row['version'] is not None:
        return row['version']
    return None


def initialize_schema(db: DatabaseConnection) -> bool:
    """
    Initialize database schema.
    
    Args:
        db: Database connection
        
    Returns:
        True if a fresh schema was created, False if it already existed
        
    Raises:
        SchemaError: If the stored version is incompatible or creation fails
    """
    current_version = get_current_version(db)
    
    if current_version is not None:
        if current_version == DB_SCHEMA_VERSION:
            return False
        elif current_version > DB_SCHEMA_VERSION:
            raise SchemaError(
                f"Database schema version {current_version} is newer than "
                f"expected version {DB_SCHEMA_VERSION}. Cannot downgrade."
            )
        else:
            raise SchemaError(
                f"Database schema version {current_version} is older than "
                f"expected version {DB_SCHEMA_VERSION}. Migration needed."
            )
    
    try:
        with db.transaction():
            for statement in get_schema_statements():
                db.execute(statement)
            
            sql, params = get_initial_version_insert()
            db.execute(sql, params)
            
    except DatabaseError as e:
        raise SchemaError(f"Failed to initialize schema: {e}")
    
    return True


def verify_schema(db: DatabaseConnection) -> bool:
    """
    Verify that schema is correct and complete.
    
    Args:
        db: Database connection
        
    Returns:
        True if schema is valid
    """
    try:
        if get_current_version(db) != DB_SCHEMA_VERSION:
            return False
        
        for table_name in REQUIRED_TABLES:
            row = db.fetch_one(
                "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
                (table_name,)
            )
            if not row:
                return False
        
        return True
        
    except DatabaseError:
        return False
