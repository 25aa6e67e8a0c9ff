"""Tests for the stream reader and sentinel ids."""
import io
import struct

import pytest

from chariotdata.dat.ids import optional_id, required_id
from chariotdata.dat.reader import StreamReader
from chariotdata.errors import MissingIdentifierError, OffsetOutOfRangeError, TruncatedStreamError


class TestPrimitives:

    def test_reads_advance_by_width(self):
        data = struct.pack("<BHIbhif", 0xFE, 0xBEEF, 0xCAFEBABE, -2, -300, -70000, 1.5)
        reader = StreamReader.from_bytes(data)

        assert reader.read_u8() == 0xFE
        assert reader.position == 1
        assert reader.read_u16() == 0xBEEF
        assert reader.position == 3
        assert reader.read_u32() == 0xCAFEBABE
        assert reader.read_i8() == -2
        assert reader.read_i16() == -300
        assert reader.read_i32() == -70000
        assert reader.read_f32() == 1.5
        assert reader.remaining == 0

    def test_short_read_raises(self):
        reader = StreamReader.from_bytes(b"\x01\x02\x03")
        with pytest.raises(TruncatedStreamError) as exc:
            reader.read_u32()
        assert exc.value.requested == 4
        assert exc.value.available == 3

    def test_skip_past_end_raises(self):
        reader = StreamReader.from_bytes(b"\x00" * 4)
        reader.skip(4)
        assert reader.position == 4
        with pytest.raises(TruncatedStreamError):
            reader.skip(1)

    @pytest.mark.parametrize("offset", [5, -1])
    def test_seek_outside_stream_raises(self, offset):
        reader = StreamReader.from_bytes(b"\x00" * 4)
        with pytest.raises(OffsetOutOfRangeError) as exc:
            reader.seek(offset)
        assert str(exc.value) == f"Offset {offset} is outside the stream (size 4)"
        assert isinstance(exc.value, TruncatedStreamError)
        assert reader.position == 0

    def test_starts_at_current_stream_position(self):
        stream = io.BytesIO(b"\x00\x00\x07\x00")
        stream.seek(2)
        reader = StreamReader(stream)
        assert reader.size == 4
        assert reader.read_u16() == 7


class TestStrings:

    def test_fixed_string_stops_at_nul(self):
        reader = StreamReader.from_bytes(b"Stone Age\x00junk\x00" + b"\x00" * 17)
        assert reader.read_fixed_string(31) == "Stone Age"
        assert reader.position == 31

    def test_fixed_string_without_nul_uses_whole_field(self):
        reader = StreamReader.from_bytes(b"abcd")
        assert reader.read_fixed_string(4) == "abcd"

    def test_legacy_code_page(self):
        reader = StreamReader.from_bytes(b"Caf\xe9\x00")
        assert reader.read_fixed_string(5) == "Café"

    def test_pascal_string(self):
        reader = StreamReader.from_bytes(struct.pack("<H", 5) + b"hello" + b"tail")
        assert reader.read_pascal_string() == "hello"
        assert reader.position == 7

    def test_empty_pascal_string(self):
        reader = StreamReader.from_bytes(b"\x00\x00")
        assert reader.read_pascal_string() == ""
        assert reader.remaining == 0


class TestReadArray:

    def test_reads_exactly_count_items(self):
        reader = StreamReader.from_bytes(struct.pack("<4H", 1, 2, 3, 4))
        assert reader.read_array(3, StreamReader.read_u16) == [1, 2, 3]
        assert reader.position == 6

    def test_zero_count_reads_nothing(self):
        reader = StreamReader.from_bytes(b"\x01")
        assert reader.read_array(0, StreamReader.read_u8) == []
        assert reader.position == 0

    def test_shortfall_fails(self):
        reader = StreamReader.from_bytes(struct.pack("<2H", 1, 2))
        with pytest.raises(TruncatedStreamError):
            reader.read_array(3, StreamReader.read_u16)


class TestIdentifiers:

    @pytest.mark.parametrize("raw", [0, 1, 42, 32767, -2])
    def test_non_sentinel_is_present(self, raw):
        assert optional_id(raw) == raw
        assert required_id(raw, "unit_id") == raw

    def test_sentinel_is_absent(self):
        assert optional_id(-1) is None

    def test_required_sentinel_raises(self):
        with pytest.raises(MissingIdentifierError) as exc:
            required_id(-1, "unit_id")
        assert exc.value.field_name == "unit_id"
