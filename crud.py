"""Storage operations for MemoryKeeper.

Reads and writes of the key-value table, and the JSON encoding of the
record set stored under ``settings.STORAGE_KEY``.
"""

import json
from datetime import date, datetime, timezone
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from config import settings
from database import KeyValueEntry
from logger_config import setup_logger
from schemas import Category, Record

logger = setup_logger(__name__, 'store.log')

_record = TypeAdapter(Record)


def seed_records() -> List[Record]:
    """Example records shown to first-time users."""
    return [
        Record(id='1', title='示例: 妈妈生日', origin_date=date(1975, 5, 20),
               category=Category.BIRTHDAY, notes='喜欢花'),
        Record(id='2', title='示例: 结婚纪念日', origin_date=date(2020, 10, 1),
               category=Category.ANNIVERSARY, notes='三周年'),
    ]


def get_value(db: Session, key: str) -> Optional[str]:
    """Get the raw value stored under a key.

    Returns:
        Optional[str]: Stored text, or None when the key is absent
    """
    entry = db.get(KeyValueEntry, key)
    return entry.value if entry else None


def set_value(db: Session, key: str, value: str) -> KeyValueEntry:
    """Insert or replace the value stored under a key.

    Raises:
        SQLAlchemyError: On database errors
    """
    now = datetime.now(timezone.utc)
    entry = db.get(KeyValueEntry, key)
    if entry is None:
        entry = KeyValueEntry(key=key, value=value, updated_at=now)
        db.add(entry)
    else:
        entry.value = value
        entry.updated_at = now

    db.commit()
    db.refresh(entry)
    return entry


def encode_records(records) -> str:
    """Encode records as the JSON array persisted in storage."""
    payload = [
        r.model_dump(mode="json", by_alias=True, exclude_none=True)
        for r in records
    ]
    return json.dumps(payload, ensure_ascii=False)


def decode_records(raw: str) -> List[Record]:
    """Decode a stored JSON array into records.

    Entries that are not valid records are dropped with a warning; the
    rest keep their stored order.

    Raises:
        ValueError: If the text is not JSON or not an array
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")

    records = []
    for index, item in enumerate(data):
        try:
            records.append(_record.validate_python(item))
        except ValidationError as e:
            logger.warning(f"Dropping invalid stored record at index {index}: {e}")
    return records


def _drop_duplicate_ids(records: List[Record]) -> List[Record]:
    seen = set()
    unique = []
    for r in records:
        if r.id in seen:
            logger.warning(f"Dropping record '{r.title}' with duplicate id {r.id}")
            continue
        seen.add(r.id)
        unique.append(r)
    return unique


def load_records(db: Session, key: Optional[str] = None) -> List[Record]:
    """Load the record set.

    - Absent key: the seed records are stored and returned.
    - Corrupt value (not JSON, not an array): the error is logged and the
      seed records are returned without overwriting what is stored.
    - Invalid entries inside the array are dropped; valid ones are kept.

    Args:
        db: Database session
        key: Storage key (default: settings.STORAGE_KEY)

    Returns:
        List[Record]: Records in stored order, ids unique
    """
    key = key or settings.STORAGE_KEY
    raw = get_value(db, key)

    if raw is None:
        logger.info(f"No records stored under '{key}', seeding examples")
        seed = seed_records()
        save_records(db, seed, key)
        return seed

    try:
        records = decode_records(raw)
    except ValueError as e:
        logger.error(f"Failed to parse records stored under '{key}', using examples: {e}")
        return seed_records()

    return _drop_duplicate_ids(records)


def save_records(db: Session, records, key: Optional[str] = None) -> None:
    """Persist the full record set under the storage key."""
    key = key or settings.STORAGE_KEY
    set_value(db, key, encode_records(records))
