"""In-memory key-value backend for tests and dry runs."""

from typing import Dict, Optional


class InMemoryKeyValueStore:
    """Simple dict-backed implementation of the KeyValueStore protocol."""

    def __init__(self) -> None:
        self._entries: Dict[str, bytes] = {}

    def read(self, key: str) -> Optional[bytes]:
        return self._entries.get(key)

    def write(self, key: str, value: bytes) -> None:
        self._entries[key] = bytes(value)

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._entries if k.startswith(prefix))

    def __len__(self) -> int:
        return len(self._entries)

    def snapshot(self) -> Dict[str, bytes]:
        """Copy of every stored entry, for comparing store state."""
        return dict(self._entries)
