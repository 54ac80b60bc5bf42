"""Record store: maps numeric record ids onto key-value paths."""

import contextlib
import logging
from typing import List

from todokern.protocols import (
    BackendError,
    KeyValueStore,
    ListableKeyValueStore,
    RecordNotFoundError,
    StoreError,
)
from todokern.types import I64_MAX, I64_MIN

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "todo"


def validate_namespace(namespace: str) -> str:
    """Reject namespaces that would break the one-segment path layout."""
    if not isinstance(namespace, str) or not namespace.strip():
        raise ValueError("Namespace cannot be empty")
    if "/" in namespace:
        raise ValueError("Namespace must not contain path separators")
    return namespace


class RecordStore:
    """Get/put/delete sealed record blobs by id.

    Keys look like ``/todo/42``: one namespace segment, then the decimal id.
    Distinct ids always map to distinct keys.

    Deleting an id that was never stored (or was already deleted) is a
    successful no-op. The host cannot tell those two cases apart, so
    deletion is idempotent on purpose.

    Whatever the host store raises is reported as BackendError.
    """

    def __init__(self, kv: KeyValueStore, namespace: str = DEFAULT_NAMESPACE):
        self._kv = kv
        self.namespace = validate_namespace(namespace)
        self._prefix = f"/{self.namespace}/"

    @contextlib.contextmanager
    def _backend(self, operation: str, key: str):
        """Translate host store failures into BackendError."""
        try:
            yield
        except StoreError:
            raise
        except Exception as e:
            logger.debug(f"Backend {operation} failed for {key}: {e}")
            raise BackendError(f"Backend {operation} failed for {key}: {e}") from e

    def path_for(self, record_id: int) -> str:
        if isinstance(record_id, bool) or not isinstance(record_id, int):
            raise ValueError(f"Record id must be an integer, got {record_id!r}")
        if not I64_MIN <= record_id <= I64_MAX:
            raise ValueError(f"Record id out of signed 64-bit range: {record_id}")
        return f"{self._prefix}{record_id}"

    def put(self, record_id: int, blob: bytes) -> None:
        key = self.path_for(record_id)
        logger.debug(f"Writing {len(blob)} bytes to {key}")
        with self._backend("write", key):
            self._kv.write(key, blob)

    def get(self, record_id: int) -> bytes:
        """Fetch the stored blob.

        Raises:
            RecordNotFoundError: If nothing is stored for ``record_id``
            BackendError: If the host store fails
        """
        key = self.path_for(record_id)
        with self._backend("read", key):
            blob = self._kv.read(key)
        if blob is None:
            raise RecordNotFoundError(record_id, key)
        return blob

    def delete(self, record_id: int) -> None:
        key = self.path_for(record_id)
        with self._backend("delete", key):
            removed = self._kv.delete(key)
        if not removed:
            logger.debug(f"Delete of absent key {key} treated as success")

    def exists(self, record_id: int) -> bool:
        key = self.path_for(record_id)
        with self._backend("read", key):
            return self._kv.read(key) is not None

    def ids(self) -> List[int]:
        """Ids of every stored record in this namespace, ascending.

        Raises:
            TypeError: If the host store cannot list its keys
        """
        if not isinstance(self._kv, ListableKeyValueStore):
            raise TypeError(f"{type(self._kv).__name__} cannot list keys")
        with self._backend("list", self._prefix):
            keys = self._kv.keys(self._prefix)

        result = []
        for key in keys:
            suffix = key[len(self._prefix) :]
            try:
                result.append(int(suffix))
            except ValueError:
                logger.warning(f"Skipping non-record key in namespace: {key}")
        return sorted(result)
