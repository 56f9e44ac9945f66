"""Database layer for DIDV."""

from .connection import DatabaseConnection
from .migrations import initialize_schema, verify_schema, get_current_version
from . import schema

__all__ = [
    'DatabaseConnection',
    'initialize_schema',
    'verify_schema',
    'get_current_version',
    'schema',
]
