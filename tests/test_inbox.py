"""Tests for message sources."""

import json

import pytest

from todokern.inbox import InputsFileSource, QueueMessageSource, parse_inputs
from todokern.protocols import MessageSource


class TestQueueMessageSource:
    """Tests for QueueMessageSource."""

    def test_fifo_then_none(self):
        source = QueueMessageSource([b"a", b"b"])
        source.push(b"c")

        assert [source.next_message() for _ in range(4)] == [b"a", b"b", b"c", None]

    def test_stays_exhausted(self):
        source = QueueMessageSource()

        assert source.next_message() is None
        assert source.next_message() is None

    def test_satisfies_protocol(self):
        assert isinstance(QueueMessageSource(), MessageSource)


class TestParseInputs:
    """Tests for parse_inputs."""

    def test_debugger_levels(self):
        data = [[{"external": "0100"}, {"external": "02"}], [{"external": "0x00"}]]

        assert parse_inputs(data) == [b"\x01\x00", b"\x02", b"\x00"]

    def test_flat_hex_list(self):
        assert parse_inputs(["01ff", "00"]) == [b"\x01\xff", b"\x00"]

    def test_non_external_object_becomes_kernel_message(self):
        assert parse_inputs([[{"internal": "start_of_level"}]]) == [b"\x00"]

    def test_rejects_non_list(self):
        with pytest.raises(ValueError, match="JSON list"):
            parse_inputs({"external": "00"})

    def test_rejects_bad_hex(self):
        with pytest.raises(ValueError, match="level 0 item 1"):
            parse_inputs([["00", "zz"]])

    def test_rejects_non_string_hex(self):
        with pytest.raises(ValueError, match="expected a hex string"):
            parse_inputs([[5]])


class TestInputsFileSource:
    """Tests for InputsFileSource."""

    def test_loads_file(self, tmp_path):
        path = tmp_path / "inputs.json"
        path.write_text(json.dumps([[{"external": "0100"}]]))

        source = InputsFileSource(path)

        assert len(source) == 1
        assert source.next_message() == b"\x01\x00"
        assert source.next_message() is None

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "inputs.json"
        path.write_text("[not json")

        with pytest.raises(ValueError, match="Invalid JSON"):
            InputsFileSource(path)
