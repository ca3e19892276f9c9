"""
Pytest fixtures for ChargeLog tests.
"""

import pytest

from chargelog.app import create_app
from chargelog.services import CounterIdFactory, MemoryAdapter, RecordStore
from tests.factories import SAMPLE_CSV


@pytest.fixture
def sample_csv():
    return SAMPLE_CSV


@pytest.fixture
def memory_adapter():
    return MemoryAdapter()


@pytest.fixture
def store(memory_adapter):
    """Empty store with predictable ids backed by an in-memory adapter."""
    return RecordStore(memory_adapter, id_factory=CounterIdFactory())


@pytest.fixture
def app_config(tmp_path):
    return {
        'TESTING': True,
        'RATELIMIT_ENABLED': False,
        'STORAGE_BACKEND': 'json',
        'SNAPSHOT_PATH': str(tmp_path / 'records.json'),
        'SEED_SOURCE': str(tmp_path / 'initial_data.csv'),
        'SEED_ON_START': False,
    }


@pytest.fixture
def app(app_config):
    """Create application for testing, persisting to a temp JSON file."""
    yield create_app(app_config)


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()
