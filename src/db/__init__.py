"""Database package initialization.

This module exposes the public interface of the database package.
"""

from .db_core import (
    Database,
    DatabaseConfig,
    ConnectionState,
    DatabaseError,
    ConnectionError,
    DatabaseTimeoutError,
    ConflictError,
    SessionError,
    open_engine,
)
from .operations import with_retry, execute_in_transaction

__all__ = [
    # Core database classes
    'Database',
    'DatabaseConfig',
    'ConnectionState',
    'open_engine',
    
    # Exceptions
    'DatabaseError',
    'ConnectionError',
    'DatabaseTimeoutError',
    'ConflictError',
    'SessionError',
    
    # Utilities
    'with_retry',
    'execute_in_transaction',
]
