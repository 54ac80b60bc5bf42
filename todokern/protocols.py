"""
todokern Protocol Definitions
=============================

The interface contracts between the kernel core and its host.

Collaborators supplied by the host:
- MessageSource:  The inbox. Hands over one raw message at a time, then
                  signals exhaustion by returning None.
- KeyValueStore:  Durable byte storage addressed by hierarchical string keys.

Error handling philosophy:
- The codec and the crypto layer never recover; they raise typed errors
- The action engine does not catch anything; errors go up to the loop
- The dispatch loop is the only place per-message errors are swallowed,
  so one bad message never halts the inbox
- Anything that is not a TodokernError is a programming error and propagates
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

# =============================================================================
# ERRORS
# =============================================================================


class TodokernError(Exception):
    """Base for all todokern errors."""

    kind = "error"


# --- Codec -------------------------------------------------------------------


class DecodeError(TodokernError):
    """Raised when a binary buffer is not a valid encoding."""

    kind = "decode"


class UnknownActionError(DecodeError):
    """Action discriminant is not one of the known tags."""

    kind = "UnknownAction"

    def __init__(self, tag: int):
        super().__init__(f"Unknown action tag: {tag}")
        self.tag = tag


class TruncatedError(DecodeError):
    """Buffer ended before a field was complete."""

    kind = "Truncated"

    def __init__(self, field_name: str, needed: int, available: int):
        super().__init__(
            f"Truncated while reading {field_name}: need {needed} bytes, have {available}"
        )
        self.field_name = field_name
        self.needed = needed
        self.available = available


class InvalidUtf8Error(DecodeError):
    """Text field is not valid UTF-8."""

    kind = "InvalidUtf8"

    def __init__(self, field_name: str, cause: Exception):
        super().__init__(f"Invalid UTF-8 in {field_name}: {cause}")
        self.field_name = field_name


class InvalidBoolError(DecodeError):
    """Boolean byte is neither 0x00 nor 0x01."""

    kind = "InvalidBool"

    def __init__(self, field_name: str, value: int):
        super().__init__(f"Invalid boolean byte for {field_name}: 0x{value:02x}")
        self.field_name = field_name
        self.value = value


class TrailingBytesError(DecodeError):
    """Bytes left over after a complete value was decoded."""

    kind = "TrailingBytes"

    def __init__(self, count: int):
        super().__init__(f"{count} trailing bytes after decoded value")
        self.count = count


class MessageTooLargeError(DecodeError):
    """Inbound message exceeds the configured size ceiling."""

    kind = "MessageTooLarge"

    def __init__(self, size: int, limit: int):
        super().__init__(f"Message of {size} bytes exceeds limit of {limit}")
        self.size = size
        self.limit = limit


# --- Crypto ------------------------------------------------------------------


class CryptoError(TodokernError):
    """Base exception for crypto errors."""

    kind = "crypto"


class AuthenticationFailedError(CryptoError):
    """Ciphertext did not verify under the given key material."""

    kind = "AuthenticationFailed"


class MalformedCiphertextError(CryptoError):
    """Ciphertext is structurally invalid."""

    kind = "Malformed"


# --- Storage -----------------------------------------------------------------


class StoreError(TodokernError):
    """Raised by the record store on storage failures."""

    kind = "store"


class RecordNotFoundError(StoreError):
    """No record is stored under the requested id."""

    kind = "NotFound"

    def __init__(self, record_id: int, key: str):
        super().__init__(f"No record stored for id {record_id} at {key}")
        self.record_id = record_id
        self.key = key


class BackendError(StoreError):
    """The underlying key-value backend failed."""

    kind = "Backend"


# =============================================================================
# HOST COLLABORATORS
# =============================================================================


@runtime_checkable
class MessageSource(Protocol):
    """The inbox the dispatch loop drains.

    ``next_message`` returns the next raw message, or None once the inbox
    is exhausted. Exhaustion is a terminal state, not an error.
    """

    def next_message(self) -> Optional[bytes]: ...


@runtime_checkable
class KeyValueStore(Protocol):
    """Durable byte storage keyed by hierarchical paths like ``/todo/1``."""

    def read(self, key: str) -> Optional[bytes]:
        """Return the stored value, or None if the key is absent."""
        ...

    def write(self, key: str, value: bytes) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True if a value was removed."""
        ...


@runtime_checkable
class ListableKeyValueStore(KeyValueStore, Protocol):
    """Optional capability: a KeyValueStore that can enumerate its keys.

    Only needed for listing records; the dispatch loop never uses it.
    """

    def keys(self, prefix: str = "") -> list[str]:
        """List stored keys starting with ``prefix``, sorted."""
        ...
