"""
Bounded byte cursor over an immutable buffer.

All multi-byte numbers in a data file are stored in reversed byte order
relative to a big-endian read, i.e. little-endian. This module is the one
place that knows it: header and dictionary decoding both go through
read_int32 / read_int64 / read_double.
"""

import struct

from savreader.errors import TruncatedStream

_INT32 = struct.Struct("<i")
_INT64 = struct.Struct("<q")
_DOUBLE = struct.Struct("<d")

# Every byte up to and including space, NUL among them
_TRIM_BYTES = bytes(range(0x21))


def trim_text(raw: bytes) -> bytes:
    """Strip surrounding whitespace and control bytes (NUL included)."""
    return raw.strip(_TRIM_BYTES)


class ByteCursor:
    """
    Sequential reader over an in-memory buffer.

    Every read checks the remaining length first and raises
    TruncatedStream rather than returning a short or wrong value.
    """

    def __init__(self, data: bytes, offset: int = 0):
        self._data = memoryview(bytes(data))
        self._offset = offset

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def at_end(self) -> bool:
        return self.remaining <= 0

    def read_bytes(self, size: int) -> bytes:
        if size > self.remaining:
            raise TruncatedStream(self._offset, size, max(self.remaining, 0))
        chunk = self._data[self._offset:self._offset + size].tobytes()
        self._offset += size
        return chunk

    def skip(self, size: int) -> None:
        self.read_bytes(size)

    def read_int32(self) -> int:
        """Read a signed 32-bit integer stored in reversed byte order."""
        return _INT32.unpack(self.read_bytes(_INT32.size))[0]

    def read_int64(self) -> int:
        """Read a signed 64-bit integer stored in reversed byte order."""
        return _INT64.unpack(self.read_bytes(_INT64.size))[0]

    def read_double(self) -> float:
        """Read a 64-bit value in reversed byte order as an IEEE-754 double."""
        return _DOUBLE.unpack(self.read_bytes(_DOUBLE.size))[0]

    def read_text(self, size: int, encoding: str = "utf-8", errors: str = "replace") -> str:
        """Read a fixed-width text field, trimmed of whitespace and NULs."""
        return trim_text(self.read_bytes(size)).decode(encoding, errors)
