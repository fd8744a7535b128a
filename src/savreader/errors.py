"""
Decode failures for "$FL2" data files.

Every failure is fatal to the decode call that raised it. The decoder
never retries, resynchronizes, or returns a partial result.
"""

from typing import Optional


class FormatError(Exception):
    """Base class for every decode failure."""
    pass


class EmptyInput(FormatError):
    """Raised when the input buffer holds zero bytes."""

    def __init__(self) -> None:
        super().__init__("Input is empty")


class BadMagic(FormatError):
    """Raised when the buffer does not start with the "$FL2" marker."""

    def __init__(self, actual: bytes):
        self.actual = actual
        super().__init__(f"Invalid file format: expected magic b'$FL2', got {actual!r}")


class UnexpectedRecordType(FormatError):
    """Raised when a dictionary record carries the wrong record-type tag."""

    def __init__(self, expected: int, actual: int, offset: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        self.offset = offset
        where = f" at offset {offset}" if offset is not None else ""
        super().__init__(f"Expected variable record type {expected}, got type {actual}{where}")


class TruncatedStream(FormatError):
    """Raised when a read needs more bytes than the buffer has left."""

    def __init__(self, offset: int, needed: int, available: int):
        self.offset = offset
        self.needed = needed
        self.available = available
        super().__init__(
            f"Unexpected end of data at offset {offset}: "
            f"needed {needed} bytes, {available} available"
        )


class InvalidCount(FormatError):
    """Raised when a declared count or length is negative."""

    def __init__(self, field: str, value: int, offset: Optional[int] = None):
        self.field = field
        self.value = value
        self.offset = offset
        where = f" at offset {offset}" if offset is not None else ""
        super().__init__(f"Invalid {field} {value}{where}: must not be negative")


class InvalidExtension(FormatError):
    """Raised by file-level entry points for names not ending in .sav."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"File must be a .sav file: {filename}")


__all__ = [
    "BadMagic",
    "EmptyInput",
    "FormatError",
    "InvalidCount",
    "InvalidExtension",
    "TruncatedStream",
    "UnexpectedRecordType",
]
