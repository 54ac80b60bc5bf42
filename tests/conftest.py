"""
Pytest fixtures and test configuration for todokern tests.
"""

import pytest

from todokern.engine import ActionEngine
from todokern.storage import InMemoryKeyValueStore, RecordStore, SQLiteKeyValueStore
from todokern.types import Action, ActionRequest, Record


@pytest.fixture
def kv():
    """Empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def sqlite_kv(tmp_path):
    """SQLite key-value store in a temp directory."""
    return SQLiteKeyValueStore(tmp_path / "store.db")


@pytest.fixture
def store(kv):
    return RecordStore(kv)


@pytest.fixture
def engine(store):
    return ActionEngine(store)


@pytest.fixture
def make_request():
    """Factory for action requests with sensible defaults."""

    def _make(record_id=1, action=Action.CREATE, user="alice", **record_fields):
        return ActionRequest(id=record_id, action=action, user=user, record=Record(**record_fields))

    return _make
