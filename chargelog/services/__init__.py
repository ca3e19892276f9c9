"""
Services module for ChargeLog business logic.

This module contains the record store, its persistence adapters and the
seed service, kept separate from the Flask route handlers.
"""

from .persistence import (
    JsonFileAdapter,
    MemoryAdapter,
    SqlSnapshotAdapter,
    build_adapter,
)
from .record_store import (
    CounterIdFactory,
    RecordStore,
    StoreResult,
    uuid_id_factory,
)
from .seed_service import (
    SeedResult,
    read_seed_source,
    seed_store,
)

__all__ = [
    # Persistence
    'JsonFileAdapter',
    'MemoryAdapter',
    'SqlSnapshotAdapter',
    'build_adapter',
    # Record store
    'CounterIdFactory',
    'RecordStore',
    'StoreResult',
    'uuid_id_factory',
    # Seeding
    'SeedResult',
    'read_seed_source',
    'seed_store',
]
