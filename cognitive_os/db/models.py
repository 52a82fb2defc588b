"""
Database Models

SQLAlchemy models for the engine's key-value persistence.

Tables:
- kv_records: JSON documents keyed by a string (skill graph snapshot,
  finished sessions, session history index, in-progress scratch sessions)
"""

from datetime import datetime

from sqlalchemy import (
    Column,
    String,
    Text,
    DateTime,
    Index,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class KeyValueRecord(Base):
    """
    A single persisted record.

    Values are stored as JSON text so any store implementation
    (in-memory, SQL, remote) sees the same payload.
    """
    __tablename__ = "kv_records"

    key = Column(String(255), primary_key=True)  # e.g. "session:symbol_memory:1718000000000"
    value = Column(Text, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<KeyValueRecord {self.key}>"


Index("idx_kv_records_updated", KeyValueRecord.updated_at)
