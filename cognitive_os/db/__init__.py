"""
Database Module

Key-value persistence: SQLAlchemy model, session management and
the store interface used by the engine.
"""

from .models import Base, KeyValueRecord
from .session import (
    DatabaseSession,
    init_db,
)
from .store import (
    KeyValueStore,
    MemoryStore,
    SqlStore,
    StorageError,
)

__all__ = [
    # Models
    "Base",
    "KeyValueRecord",
    # Session
    "DatabaseSession",
    "init_db",
    # Stores
    "KeyValueStore",
    "MemoryStore",
    "SqlStore",
    "StorageError",
]
