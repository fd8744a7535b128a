"""
Tests for the bounded byte cursor.

Every multi-byte read goes through these primitives, so they are the
one place where byte order and bounds checking are verified directly.
"""

import struct

import pytest

from savreader.cursor import ByteCursor, trim_text
from savreader.errors import TruncatedStream


class TestIntegers:
    """Reversed-order integer reads."""

    def test_read_int32(self):
        cursor = ByteCursor(b"\x02\x00\x00\x00")
        assert cursor.read_int32() == 2
        assert cursor.offset == 4
        assert cursor.at_end()

    def test_read_int32_reverses_big_endian_bytes(self):
        stored = struct.pack(">i", 999)[::-1]
        assert ByteCursor(stored).read_int32() == 999

    def test_read_int32_signed(self):
        assert ByteCursor(b"\xfe\xff\xff\xff").read_int32() == -2

    def test_read_int64(self):
        cursor = ByteCursor(struct.pack("<q", -(2 ** 40)))
        assert cursor.read_int64() == -(2 ** 40)

    def test_read_double(self):
        cursor = ByteCursor(struct.pack("<d", 100.0))
        assert cursor.read_double() == 100.0

    def test_double_matches_int64_bits(self):
        raw = struct.pack("<d", 3.25)
        bits = ByteCursor(raw).read_int64()
        assert struct.unpack("<d", struct.pack("<q", bits))[0] == 3.25


class TestBounds:
    """Short reads are errors, never short values."""

    def test_short_int32(self):
        cursor = ByteCursor(b"\x01\x02\x03")
        with pytest.raises(TruncatedStream) as exc_info:
            cursor.read_int32()
        assert exc_info.value.needed == 4
        assert exc_info.value.available == 3

    def test_failed_read_does_not_advance(self):
        cursor = ByteCursor(b"\x01\x02\x03")
        with pytest.raises(TruncatedStream):
            cursor.read_double()
        assert cursor.offset == 0
        assert cursor.remaining == 3

    def test_skip_past_end(self):
        cursor = ByteCursor(b"\x00\x00")
        with pytest.raises(TruncatedStream):
            cursor.skip(3)

    def test_read_zero_bytes(self):
        cursor = ByteCursor(b"")
        assert cursor.read_bytes(0) == b""
        assert cursor.at_end()

    def test_start_offset(self):
        cursor = ByteCursor(b"$FL2\x07\x00\x00\x00", offset=4)
        assert cursor.read_int32() == 7


class TestText:
    """Fixed-width text fields."""

    def test_trim_text(self):
        assert trim_text(b"  AGE\x00\x00\t") == b"AGE"

    def test_trim_keeps_interior_bytes(self):
        assert trim_text(b"A\x00B ") == b"A\x00B"

    def test_read_text(self):
        cursor = ByteCursor(b"Survey   \x00\x00")
        assert cursor.read_text(11) == "Survey"
        assert cursor.at_end()

    def test_read_text_invalid_utf8_is_replaced(self):
        cursor = ByteCursor(b"ab\xffcd")
        assert cursor.read_text(5) == "ab\ufffdcd"

    def test_read_text_latin1(self):
        cursor = ByteCursor(b"Kj\xf8nn")
        assert cursor.read_text(5, encoding="latin-1") == "Kjønn"
