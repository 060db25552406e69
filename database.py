"""Database module for MemoryKeeper.

This module defines the key-value table the record set is persisted in,
and database session management.

The record set is stored as a single JSON-encoded array under a fixed key
(``settings.STORAGE_KEY``), the same layout the browser version used in
local storage.
"""

from sqlalchemy import create_engine, Column, String, Text, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker

from config import settings

# SQLAlchemy Base
Base = declarative_base()


class KeyValueEntry(Base):
    """Key-value model - one row per storage key.

    ``value`` is an opaque string; callers own its encoding.
    """

    __tablename__ = "kv_store"

    key = Column(String, primary_key=True, doc="Storage key (namespace)")
    value = Column(Text, nullable=False, doc="Stored value, usually JSON text")
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        doc="When the value was last written (timezone-aware)"
    )

    def __repr__(self):
        """String representation"""
        return f"<KeyValueEntry(key={self.key}, size={len(self.value or '')}, updated={self.updated_at})>"


def make_engine(url: str):
    """Create an engine, allowing SQLite connections to cross threads."""
    return create_engine(
        url,
        connect_args={"check_same_thread": False} if "sqlite" in url else {},
        echo=False  # Set to True for SQL debugging
    )


# Database Engine Setup
engine = make_engine(settings.DATABASE_URL)

# Session Factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Create all tables
Base.metadata.create_all(bind=engine)
