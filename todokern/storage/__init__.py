"""Storage backends and the record store."""

from todokern.storage.memory import InMemoryKeyValueStore
from todokern.storage.records import DEFAULT_NAMESPACE, RecordStore
from todokern.storage.sqlite import SQLiteKeyValueStore

__all__ = [
    "DEFAULT_NAMESPACE",
    "InMemoryKeyValueStore",
    "RecordStore",
    "SQLiteKeyValueStore",
]
