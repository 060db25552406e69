"""Shared pytest fixtures for MemoryKeeper tests."""

import os
import tempfile

# Keep the module-level engine away from the working directory
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite:///{os.path.join(tempfile.mkdtemp(prefix='memory_keeper_'), 'test.db')}"
)

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base
from schemas import Category, Record
from store import RecordStore


@pytest.fixture
def session_factory():
    """Session factory bound to a fresh in-memory database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    """Loaded store; starts with the two seed records."""
    record_store = RecordStore(session_factory=session_factory)
    record_store.load()
    return record_store


@pytest.fixture
def make_record():
    """Factory for records built from field names."""
    def _make(record_id, title, origin, category=Category.BIRTHDAY, notes=None):
        return Record(id=record_id, title=title, origin_date=origin, category=category, notes=notes)
    return _make


@pytest.fixture
def today():
    return date(2024, 6, 1)
