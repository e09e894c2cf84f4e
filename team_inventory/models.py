"""
SQLAlchemy ORM models for the SQL snapshot backend.

Snapshots are stored as key-value rows so the SQL backend honours the same
contract as the Redis one.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text

from .database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class KeyValueEntry(Base):
    """
    One stored snapshot.

    Attributes:
        key (str): Primary key, the snapshot name
        value (str): JSON-encoded list of records
        updated_at (datetime): Last time the snapshot was written
    """
    __tablename__ = "kv_store"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
