"""
Binary codec for records and action requests.

Layout (all integers big-endian):
- i64:    8 bytes, two's complement
- text:   u32 byte length, then UTF-8 bytes
- bool:   1 byte, 0x00 or 0x01
- action: 1 byte discriminant, see ``Action``

Record:        title | created_time | due_time | completed | owner
ActionRequest: id | action | user | record

Decoding is strict: every malformed buffer raises a DecodeError subclass.
Nothing is defaulted or skipped.
"""

import logging
import struct

from todokern.protocols import (
    InvalidBoolError,
    InvalidUtf8Error,
    TrailingBytesError,
    TruncatedError,
    UnknownActionError,
)
from todokern.types import I64_MAX, I64_MIN, Action, ActionRequest, Record

logger = logging.getLogger(__name__)

_I64 = struct.Struct(">q")
_U32 = struct.Struct(">I")
_U32_MAX = 2**32 - 1


# === Encoding ===


def _write_i64(out: bytearray, value: int, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer")
    if not I64_MIN <= value <= I64_MAX:
        raise ValueError(f"{field_name} out of signed 64-bit range: {value}")
    out += _I64.pack(value)


def _write_text(out: bytearray, value: str, field_name: str) -> None:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")
    data = value.encode("utf-8")
    if len(data) > _U32_MAX:
        raise ValueError(f"{field_name} too long ({len(data)} bytes)")
    out += _U32.pack(len(data))
    out += data


def _write_record(out: bytearray, record: Record) -> None:
    _write_text(out, record.title, "title")
    _write_i64(out, record.created_time, "created_time")
    _write_i64(out, record.due_time, "due_time")
    out.append(1 if record.completed else 0)
    _write_text(out, record.owner, "owner")


def encode_record(record: Record) -> bytes:
    """Encode a record to its binary form."""
    out = bytearray()
    _write_record(out, record)
    return bytes(out)


def encode_request(request: ActionRequest) -> bytes:
    """Encode an action request (without the message tag byte)."""
    out = bytearray()
    _write_i64(out, request.id, "id")
    out.append(Action(request.action).value)
    _write_text(out, request.user, "user")
    _write_record(out, request.record)
    return bytes(out)


# === Decoding ===


class _Reader:
    """Cursor over a byte buffer that raises typed errors on short reads."""

    def __init__(self, data: bytes):
        self._data = memoryview(bytes(data))
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def take(self, size: int, field_name: str) -> bytes:
        if size > self.remaining:
            raise TruncatedError(field_name, size, self.remaining)
        chunk = self._data[self._pos : self._pos + size].tobytes()
        self._pos += size
        return chunk

    def i64(self, field_name: str) -> int:
        return _I64.unpack(self.take(_I64.size, field_name))[0]

    def byte(self, field_name: str) -> int:
        return self.take(1, field_name)[0]

    def boolean(self, field_name: str) -> bool:
        value = self.byte(field_name)
        if value == 0:
            return False
        if value == 1:
            return True
        raise InvalidBoolError(field_name, value)

    def text(self, field_name: str) -> str:
        length = _U32.unpack(self.take(_U32.size, f"{field_name} length"))[0]
        raw = self.take(length, field_name)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidUtf8Error(field_name, e) from e

    def action(self) -> Action:
        tag = self.byte("action")
        try:
            return Action(tag)
        except ValueError:
            raise UnknownActionError(tag) from None

    def finish(self) -> None:
        if self.remaining:
            raise TrailingBytesError(self.remaining)


def _read_record(reader: _Reader) -> Record:
    return Record(
        title=reader.text("title"),
        created_time=reader.i64("created_time"),
        due_time=reader.i64("due_time"),
        completed=reader.boolean("completed"),
        owner=reader.text("owner"),
    )


def decode_record(data: bytes) -> Record:
    """Decode a record.

    Raises:
        DecodeError: If the buffer is not exactly one valid record
    """
    reader = _Reader(data)
    record = _read_record(reader)
    reader.finish()
    return record


def decode_request(data: bytes) -> ActionRequest:
    """Decode an action request payload (the bytes after the message tag).

    Raises:
        DecodeError: If the buffer is not exactly one valid request
    """
    reader = _Reader(data)
    request = ActionRequest(
        id=reader.i64("id"),
        action=reader.action(),
        user=reader.text("user"),
        record=_read_record(reader),
    )
    reader.finish()
    logger.debug(f"Decoded request: id={request.id} action={request.action.name}")
    return request
