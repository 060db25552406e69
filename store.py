"""Record store for MemoryKeeper.

The store owns the application's record set. It is loaded once from
storage, mutated only through ``add``/``update``/``remove`` (each of which
persists the full set and returns the new immutable snapshot), and the
urgency view is recomputed from the current snapshot on every ``view`` call.
"""

import threading
import uuid
from datetime import date
from typing import Optional, Tuple, Union

import crud
import database
from config import settings
from logger_config import setup_logger
from schemas import ALL_CATEGORIES, Category, Record, RecordCreate, RecordUpdate
from view import build_view

logger = setup_logger(__name__, 'store.log')

Snapshot = Tuple[Record, ...]

# Fields that may be cleared by an edit; the rest ignore None
_CLEARABLE_FIELDS = {'notes', 'is_lunar'}


class RecordNotFoundError(LookupError):
    """No record with the given id exists."""

    def __init__(self, record_id: str):
        super().__init__(f"Record not found: {record_id}")
        self.record_id = record_id


class DeleteNotConfirmedError(Exception):
    """A delete was requested without the confirm step."""

    prompt = "确定要删除这条记录吗？删除后将无法恢复。"

    def __init__(self, record_id: str):
        super().__init__(self.prompt)
        self.record_id = record_id


class RecordStore:
    """Session-owned record set backed by the key-value table.

    Args:
        session_factory: Callable returning a SQLAlchemy session
            (default: database.SessionLocal)
        key: Storage key (default: settings.STORAGE_KEY)
    """

    def __init__(self, session_factory=None, key: Optional[str] = None):
        self._session_factory = session_factory or database.SessionLocal
        self._key = key or settings.STORAGE_KEY
        self._records: Optional[Snapshot] = None
        self._lock = threading.RLock()

    def load(self) -> Snapshot:
        """Load the record set from storage, replacing what is held in memory."""
        with self._lock:
            with self._session_factory() as db:
                records = crud.load_records(db, self._key)
            self._records = tuple(records)
            logger.info(f"Loaded {len(self._records)} record(s) from '{self._key}'")
            return self._records

    def snapshot(self) -> Optional[Snapshot]:
        """Current record set, or None if nothing has been loaded yet."""
        return self._records

    def _current(self) -> Snapshot:
        if self._records is None:
            return self.load()
        return self._records

    def _commit(self, records: Snapshot) -> Snapshot:
        with self._session_factory() as db:
            crud.save_records(db, records, self._key)
        self._records = records
        return records

    def get(self, record_id: str) -> Record:
        """Get a record by id.

        Raises:
            RecordNotFoundError: If no record has this id
        """
        for r in self._current():
            if r.id == record_id:
                return r
        raise RecordNotFoundError(record_id)

    def add(self, data: Union[RecordCreate, dict]) -> Snapshot:
        """Append a new record with a fresh id.

        Returns:
            Snapshot: The new record set; the added record is last
        """
        if isinstance(data, dict):
            data = RecordCreate.model_validate(data)

        with self._lock:
            current = self._current()
            existing = {r.id for r in current}
            record_id = str(uuid.uuid4())
            while record_id in existing:
                record_id = str(uuid.uuid4())

            record = Record(id=record_id, **data.model_dump())
            snapshot = self._commit(current + (record,))
            logger.info(f"Added record {record.id}: {record.title} ({record.origin_date})")
            return snapshot

    def update(self, record_id: str, updates: Union[RecordUpdate, dict]) -> Snapshot:
        """Edit a record in place; its id and position are preserved.

        Raises:
            RecordNotFoundError: If no record has this id
        """
        if isinstance(updates, RecordUpdate):
            updates = updates.model_dump(exclude_unset=True)
        else:
            updates = RecordUpdate.model_validate(updates).model_dump(exclude_unset=True)

        changes = {
            k: v for k, v in updates.items()
            if v is not None or k in _CLEARABLE_FIELDS
        }

        with self._lock:
            current = self._current()
            for index, r in enumerate(current):
                if r.id == record_id:
                    break
            else:
                raise RecordNotFoundError(record_id)

            edited = Record.model_validate({**r.model_dump(), **changes, 'id': r.id})
            snapshot = self._commit(current[:index] + (edited,) + current[index + 1:])
            logger.info(f"Updated record {record_id}: {sorted(changes)}")
            return snapshot

    def remove(self, record_id: str, confirmed: bool = False) -> Snapshot:
        """Delete a record after the confirm step.

        Raises:
            DeleteNotConfirmedError: If ``confirmed`` is False
            RecordNotFoundError: If no record has this id
        """
        with self._lock:
            current = self._current()
            if not any(r.id == record_id for r in current):
                raise RecordNotFoundError(record_id)
            if not confirmed:
                raise DeleteNotConfirmedError(record_id)

            snapshot = self._commit(tuple(r for r in current if r.id != record_id))
            logger.info(f"Removed record {record_id}")
            return snapshot

    def view(
        self,
        search_term: str = "",
        type_filter: Union[str, Category, None] = ALL_CATEGORIES,
        today: Optional[date] = None
    ) -> Optional[Snapshot]:
        """Recompute the urgency view from the current record set.

        Returns:
            Optional[Snapshot]: Ordered matching records, or None before load()
        """
        records = self._records
        if records is None:
            return None
        return build_view(records, search_term, type_filter, today)


_default_store: Optional[RecordStore] = None
_default_store_lock = threading.Lock()


def get_store() -> RecordStore:
    """Process-wide record store, loaded on first use.

    The REST API and the MCP tools share this instance.
    """
    global _default_store
    with _default_store_lock:
        if _default_store is None:
            _default_store = RecordStore()
            _default_store.load()
        return _default_store
