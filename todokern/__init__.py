"""
todokern - Encrypted todo kernel.

Drains an inbound message queue and applies owner-encrypted record
mutations to a key-value store.
"""

from .engine import ActionEngine, ActionResult
from .kernel import DispatchLoop, DispatchSummary, entry
from .storage import InMemoryKeyValueStore, RecordStore, SQLiteKeyValueStore
from .types import Action, ActionRequest, Record

try:
    from importlib.metadata import version

    __version__ = version("todokern")
except Exception:
    __version__ = "0.0.0"

__all__ = [
    "Action",
    "ActionEngine",
    "ActionRequest",
    "ActionResult",
    "DispatchLoop",
    "DispatchSummary",
    "InMemoryKeyValueStore",
    "Record",
    "RecordStore",
    "SQLiteKeyValueStore",
    "entry",
]
