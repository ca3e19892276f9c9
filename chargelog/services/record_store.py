"""
Record store for ChargeLog.

Owns the ordered list of charging records and the identifier policy, and
writes a snapshot through the persistence adapter after every mutation.
Persistence is best effort: a failed save is logged and remembered on
`last_persist_error`, but the in-memory change stands.
"""

import enum
import itertools
import logging
import uuid
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple

from ..exceptions import PersistenceError
from ..models import ChargeRecord
from ..schema import SCHEMA
from ..utils.csv_codec import HEADER_MODE_POSITIONAL
from ..utils.csv_importer import ChargeLogCSVImporter
from ..utils.wide_events import WideEvent

logger = logging.getLogger(__name__)


class StoreResult(enum.Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ALREADY_POPULATED = "already_populated"


def uuid_id_factory() -> str:
    """Default identifier policy: random UUID4 strings."""
    return str(uuid.uuid4())


class CounterIdFactory:
    """Monotonic identifiers ("1", "2", ...), for predictable ids in tests and exports."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return str(next(self._counter))


class RecordStore:
    """
    In-memory ordered collection of charging records.

    Args:
        adapter: Persistence adapter with load()/save(snapshot); None keeps
            the store purely in memory
        id_factory: Callable returning a new identifier string
    """

    def __init__(self, adapter=None, id_factory: Optional[Callable[[], str]] = None):
        self.adapter = adapter
        self.id_factory = id_factory or uuid_id_factory
        self.last_persist_error: Optional[PersistenceError] = None
        self._records: List[ChargeRecord] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __len__(self):
        return len(self._records)

    def is_empty(self) -> bool:
        return not self._records

    def list(self) -> List[ChargeRecord]:
        """Records in insertion order, as copies."""
        return [record.copy() for record in self._records]

    def get(self, record_id: str) -> Optional[ChargeRecord]:
        index = self._index_of(record_id)
        return self._records[index].copy() if index is not None else None

    def sorted_records(self, field: str, descending: bool = False) -> List[ChargeRecord]:
        """
        Records ordered by one field, for display.

        The store's own order is not changed. Sorting is by the raw text,
        with empty values last.
        """
        if field not in SCHEMA:
            raise ValueError(f"Unknown field: {field}")
        filled = [r for r in self._records if r.fields[field] != ""]
        empty = [r for r in self._records if r.fields[field] == ""]
        filled.sort(key=lambda r: r.fields[field].lower(), reverse=descending)
        return [record.copy() for record in filled + empty]

    def field_maps(self) -> List[dict]:
        """Plain field mappings in insertion order (for export and dashboards)."""
        return [dict(record.fields) for record in self._records]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, fields: Mapping[str, Any]) -> str:
        """Append a new record and return its identifier."""
        record = ChargeRecord(self._next_id(), fields)
        self._records.append(record)
        logger.debug(f"Created record {record.id}")
        self._persist("create")
        return record.id

    def update(self, record_id: str, fields: Mapping[str, Any]) -> StoreResult:
        """
        Replace every field of an existing record.

        Returns NOT_FOUND (and leaves the store untouched) when the id is
        unknown; callers decide whether to fall back to create().
        """
        index = self._index_of(record_id)
        if index is None:
            return StoreResult.NOT_FOUND

        self._records[index] = ChargeRecord(record_id, fields)
        self._persist("update")
        return StoreResult.SUCCESS

    def remove(self, record_id: str) -> StoreResult:
        index = self._index_of(record_id)
        if index is None:
            return StoreResult.NOT_FOUND

        del self._records[index]
        self._persist("remove")
        return StoreResult.SUCCESS

    def replace_all(self, field_maps: Iterable[Mapping[str, Any]]) -> List[str]:
        """
        Replace the whole store with new records.

        Records absent from the new set are destroyed. Every new record gets a
        fresh identifier.
        """
        self._records = []
        ids = self._bulk_insert(field_maps)
        self._persist("replace_all")
        return ids

    def seed_from_csv(
        self,
        text: str,
        header_mode: str = HEADER_MODE_POSITIONAL
    ) -> Tuple[StoreResult, int]:
        """
        Populate an empty store from CSV text.

        A store that already holds records is left alone so repeated start-ups
        never duplicate rows.

        Returns:
            Tuple of (SUCCESS or ALREADY_POPULATED, number of rows inserted)
        """
        if not self.is_empty():
            logger.info(f"Seed skipped: store already holds {len(self)} records")
            return StoreResult.ALREADY_POPULATED, 0

        rows, stats = ChargeLogCSVImporter.parse_csv(text, header_mode)
        if not rows:
            logger.info("Seed source contained no data rows")
            return StoreResult.SUCCESS, 0

        self._bulk_insert(rows)
        self._persist("seed")
        logger.info(f"Seeded store with {len(rows)} records")
        return StoreResult.SUCCESS, len(rows)

    def import_csv(
        self,
        text: str,
        header_mode: str = HEADER_MODE_POSITIONAL,
        replace: bool = False
    ) -> Tuple[List[str], dict]:
        """
        Import user-supplied CSV text.

        Rows are appended with fresh identifiers, or replace the store
        entirely when `replace` is set.

        Returns:
            Tuple of (new identifiers, importer stats)
        """
        rows, stats = ChargeLogCSVImporter.parse_csv(text, header_mode)
        if replace:
            self._records = []
        ids = self._bulk_insert(rows)
        if ids or replace:
            self._persist("import_replace" if replace else "import")
        return ids, stats

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def snapshot(self) -> List[dict]:
        return [record.to_dict() for record in self._records]

    def load(self) -> int:
        """
        Replace the in-memory records with the adapter's snapshot.

        Entries without an identifier get a new one. A missing snapshot leaves
        the store empty.

        Returns:
            Number of records loaded
        """
        if self.adapter is None:
            return 0

        snapshot = self.adapter.load()
        self._records = []
        for entry in snapshot or []:
            if not isinstance(entry, Mapping):
                logger.warning(f"Skipping malformed snapshot entry: {entry!r}")
                continue
            record = ChargeRecord.from_dict(entry)
            if not record.id or self._index_of(record.id) is not None:
                record.id = self._next_id()
            self._records.append(record)

        logger.info(f"Loaded {len(self._records)} records from {self.adapter.backend} storage")
        return len(self._records)

    def _persist(self, operation: str) -> None:
        if self.adapter is None:
            return

        event = WideEvent("snapshot_save")
        event.add_context(
            trigger=operation,
            backend=self.adapter.backend,
            storage_key=getattr(self.adapter, 'key', None),
        )
        event.add_business_metric("records", len(self._records))

        try:
            with event.timer("save"):
                self.adapter.save(self.snapshot())
        except PersistenceError as e:
            self.last_persist_error = e
            logger.error(f"Failed to persist records after {operation}: {e}", exc_info=True)
            event.add_error(e)
            event.emit(level="error")
            return

        self.last_persist_error = None
        event.mark_success()
        event.emit(level="debug")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _index_of(self, record_id: str) -> Optional[int]:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    def _next_id(self) -> str:
        record_id = self.id_factory()
        while self._index_of(record_id) is not None:
            record_id = self.id_factory()
        return record_id

    def _bulk_insert(self, field_maps: Iterable[Mapping[str, Any]]) -> List[str]:
        ids = []
        for fields in field_maps:
            record = ChargeRecord(self._next_id(), fields)
            self._records.append(record)
            ids.append(record.id)
        return ids
