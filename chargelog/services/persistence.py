"""
Persistence adapters for the record store.

A snapshot is the list of records as JSON-ready dicts
(`[{"id": ..., "fields": {...}}, ...]`) stored under a single versioned key.
Changing the key is how schema migrations are detected: an old snapshot is
simply not found under the new key.

Adapters raise PersistenceError; the record store decides what to do with it.
"""

import json
import logging
import os
import tempfile
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..config import Config
from ..exceptions import ConfigurationError, PersistenceError
from ..models import Base, StoredSnapshot, get_engine, get_session

logger = logging.getLogger(__name__)

Snapshot = List[Dict[str, Any]]


class MemoryAdapter:
    """Keeps snapshots in a dict; used for tests and throwaway sessions."""

    backend = 'memory'

    def __init__(self, key: str = Config.STORAGE_KEY, initial: Optional[Snapshot] = None):
        self.key = key
        self.storage: Dict[str, Snapshot] = {}
        if initial is not None:
            self.storage[key] = initial

    def load(self) -> Optional[Snapshot]:
        snapshot = self.storage.get(self.key)
        return json.loads(json.dumps(snapshot)) if snapshot is not None else None

    def save(self, snapshot: Snapshot) -> None:
        try:
            self.storage[self.key] = json.loads(json.dumps(snapshot))
        except (TypeError, ValueError) as e:
            raise PersistenceError(
                f"Snapshot is not serializable: {e}",
                storage_key=self.key,
                backend=self.backend
            ) from e


class JsonFileAdapter:
    """
    Stores snapshots in a JSON document on disk.

    The document maps storage keys to snapshots, so several schema versions
    can sit side by side in one file.
    """

    backend = 'json'

    def __init__(self, path: str, key: str = Config.STORAGE_KEY):
        self.path = path
        self.key = key

    def _read_document(self) -> Dict[str, Any]:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            raise PersistenceError(
                f"Failed to read snapshot file {self.path}: {e}",
                storage_key=self.key,
                backend=self.backend
            ) from e

        if not isinstance(document, dict):
            raise PersistenceError(
                f"Snapshot file {self.path} does not contain a JSON object",
                storage_key=self.key,
                backend=self.backend
            )
        return document

    def load(self) -> Optional[Snapshot]:
        snapshot = self._read_document().get(self.key)
        if snapshot is None:
            return None
        if not isinstance(snapshot, list):
            raise PersistenceError(
                f"Snapshot under {self.key} is not a list",
                storage_key=self.key,
                backend=self.backend
            )
        return snapshot

    def _set_aside_unreadable(self, error: PersistenceError) -> None:
        """Move an unreadable snapshot file out of the way so saving can resume."""
        corrupt_path = f"{self.path}.corrupt"
        try:
            os.replace(self.path, corrupt_path)
        except OSError as e:
            raise PersistenceError(
                f"Snapshot file {self.path} is unreadable and could not be moved aside: {e}",
                storage_key=self.key,
                backend=self.backend
            ) from e
        logger.warning(f"Moved unreadable snapshot file to {corrupt_path}: {error}")

    def save(self, snapshot: Snapshot) -> None:
        try:
            document = self._read_document()
        except PersistenceError as e:
            self._set_aside_unreadable(e)
            document = {}
        document[self.key] = snapshot

        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix='.tmp')
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise PersistenceError(
                f"Failed to write snapshot file {self.path}: {e}",
                storage_key=self.key,
                backend=self.backend
            ) from e


class SqlSnapshotAdapter:
    """Stores snapshots as JSON rows in the `snapshots` table."""

    backend = 'sql'

    def __init__(self, engine_or_url, key: str = Config.STORAGE_KEY):
        if isinstance(engine_or_url, str):
            engine_or_url = get_engine(engine_or_url)
        self.engine = engine_or_url
        self.key = key
        Base.metadata.create_all(self.engine)

    def load(self) -> Optional[Snapshot]:
        db = get_session(self.engine)
        try:
            row = db.get(StoredSnapshot, self.key)
            return list(row.payload) if row is not None else None
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to load snapshot: {e}",
                storage_key=self.key,
                backend=self.backend
            ) from e
        finally:
            db.close()

    def save(self, snapshot: Snapshot) -> None:
        db = get_session(self.engine)
        try:
            row = db.get(StoredSnapshot, self.key)
            if row is None:
                db.add(StoredSnapshot(key=self.key, payload=snapshot))
            else:
                row.payload = snapshot
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError(
                f"Failed to save snapshot: {e}",
                storage_key=self.key,
                backend=self.backend
            ) from e
        finally:
            db.close()


def build_adapter(settings):
    """
    Create the persistence adapter selected by STORAGE_BACKEND.

    Args:
        settings: Mapping of configuration values (e.g. Flask app.config)
    """
    backend = (settings.get('STORAGE_BACKEND') or 'json').lower()
    key = settings.get('STORAGE_KEY') or Config.STORAGE_KEY

    if backend == 'json':
        return JsonFileAdapter(settings.get('SNAPSHOT_PATH') or Config.SNAPSHOT_PATH, key)
    if backend == 'sql':
        return SqlSnapshotAdapter(settings.get('DATABASE_URL') or Config.DATABASE_URL, key)
    if backend == 'memory':
        return MemoryAdapter(key)

    raise ConfigurationError(
        f"Unknown storage backend: {backend}",
        config_key='STORAGE_BACKEND'
    )
