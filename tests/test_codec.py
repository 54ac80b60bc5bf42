"""Tests for the binary record/request codec."""

import struct

import pytest

from todokern.codec import decode_record, decode_request, encode_record, encode_request
from todokern.protocols import (
    DecodeError,
    InvalidBoolError,
    InvalidUtf8Error,
    TrailingBytesError,
    TruncatedError,
    UnknownActionError,
)
from todokern.types import I64_MAX, I64_MIN, Action, ActionRequest, Record


@pytest.fixture
def record():
    return Record(
        title="Buy milk",
        created_time=1_700_000_000,
        due_time=1_700_086_400,
        completed=False,
        owner="alice",
    )


class TestLayout:
    """Tests pinning the exact byte layout."""

    def test_request_bytes(self):
        """Known request encodes to the documented layout."""
        request = ActionRequest(id=1, action=Action.MARK_COMPLETE, user="Rayer")

        expected = (
            bytes.fromhex("0000000000000001")  # id
            + b"\x03"  # action
            + bytes.fromhex("00000005") + b"Rayer"  # user
            + bytes.fromhex("00000000")  # title
            + bytes(8)  # created_time
            + bytes(8)  # due_time
            + b"\x00"  # completed
            + bytes.fromhex("00000000")  # owner
        )

        assert encode_request(request) == expected

    def test_completed_flag_is_one_byte(self):
        done = encode_record(Record(completed=True))
        not_done = encode_record(Record(completed=False))

        assert done[4 + 16] == 0x01
        assert not_done[4 + 16] == 0x00

    def test_text_length_counts_utf8_bytes(self):
        data = encode_record(Record(title="é"))

        assert data[:4] == struct.pack(">I", 2)
        assert data[4:6] == "é".encode("utf-8")

    def test_negative_timestamps_are_twos_complement(self):
        data = encode_record(Record(created_time=-1))

        assert data[4:12] == b"\xff" * 8


class TestRoundTrip:
    """Round-trip behaviour."""

    def test_record_round_trip(self, record):
        assert decode_record(encode_record(record)) == record

    def test_request_round_trip(self, record):
        for action in Action:
            request = ActionRequest(id=-42, action=action, user="bob", record=record)
            assert decode_request(encode_request(request)) == request

    def test_extreme_values(self):
        record = Record(
            title="日本語 ✓", created_time=I64_MIN, due_time=I64_MAX, completed=True, owner=""
        )
        request = ActionRequest(id=I64_MAX, action=Action.CREATE, user="", record=record)

        assert decode_request(encode_request(request)) == request


class TestDecodeErrors:
    """Malformed input always raises a typed error."""

    def test_unknown_action(self):
        data = bytearray(encode_request(ActionRequest(id=1, action=Action.READ, user="a")))
        data[8] = 4

        with pytest.raises(UnknownActionError) as exc_info:
            decode_request(bytes(data))

        assert exc_info.value.tag == 4
        assert exc_info.value.kind == "UnknownAction"

    def test_empty_buffer_is_truncated(self):
        with pytest.raises(TruncatedError):
            decode_request(b"")

    def test_every_prefix_is_truncated(self, record):
        """Cutting a valid request anywhere yields Truncated, never a value."""
        data = encode_request(ActionRequest(id=5, action=Action.CREATE, user="al", record=record))

        for cut in range(len(data)):
            with pytest.raises(TruncatedError):
                decode_request(data[:cut])

    def test_declared_length_exceeds_buffer(self):
        data = struct.pack(">I", 1000) + b"short"

        with pytest.raises(TruncatedError) as exc_info:
            decode_record(data)

        assert exc_info.value.field_name == "title"
        assert exc_info.value.needed == 1000

    def test_invalid_utf8(self):
        data = struct.pack(">I", 2) + b"\xff\xfe" + bytes(17) + struct.pack(">I", 0)

        with pytest.raises(InvalidUtf8Error):
            decode_record(data)

    def test_invalid_bool(self):
        data = bytearray(encode_record(Record()))
        data[4 + 16] = 0xFF

        with pytest.raises(InvalidBoolError) as exc_info:
            decode_record(bytes(data))

        assert exc_info.value.value == 0xFF

    def test_trailing_bytes(self, record):
        with pytest.raises(TrailingBytesError) as exc_info:
            decode_record(encode_record(record) + b"\x00\x00")

        assert exc_info.value.count == 2

    def test_all_errors_are_decode_errors(self):
        for error in (UnknownActionError, TruncatedError, InvalidUtf8Error, InvalidBoolError):
            assert issubclass(error, DecodeError)


class TestEncodeErrors:
    """Values that cannot be represented are rejected on encode."""

    def test_timestamp_out_of_range(self):
        with pytest.raises(ValueError, match="out of signed 64-bit range"):
            encode_record(Record(created_time=I64_MAX + 1))

    def test_id_out_of_range(self):
        with pytest.raises(ValueError):
            encode_request(ActionRequest(id=I64_MIN - 1, action=Action.READ, user="a"))

    def test_non_string_text(self):
        with pytest.raises(ValueError, match="title must be a string"):
            encode_record(Record(title=None))
