"""
Record Tags for the "$FL2" Stream

Every segment of a data file after the magic marker is introduced by a
32-bit record-type tag. The decoder never branches on raw integers; it
classifies each tag into a RecordKind first and dispatches on the kind.

ARCHITECTURAL RULE:
    Adding support for a new record type is an additive change:
        - add a RecordKind member
        - map its tag in RECORD_TAGS
        - handle the kind in the scanner
    Nothing else needs to be rewritten.
"""

from dataclasses import dataclass
from enum import Enum


class RecordKind(Enum):
    """
    Variants of the record-type discriminated stream.

    HEADER is the fixed prologue behind the magic marker. It carries no
    tag of its own and is listed so that every part of the file has a kind.
    """

    HEADER = "header"
    VARIABLE = "variable"
    TERMINATOR = "terminator"
    UNKNOWN = "unknown"


VARIABLE_RECORD_TAG = 2
TERMINATOR_TAG = 999

RECORD_TAGS = {
    VARIABLE_RECORD_TAG: RecordKind.VARIABLE,
    TERMINATOR_TAG: RecordKind.TERMINATOR,
}


def classify_tag(tag: int) -> RecordKind:
    """Map a record-type tag to its RecordKind (UNKNOWN when unmapped)."""
    return RECORD_TAGS.get(tag, RecordKind.UNKNOWN)


@dataclass(frozen=True)
class StreamRecord:
    """
    A record tag observed while scanning the stream after the dictionary.

    Properties:
        kind: Classified variant of the tag
        tag: Raw tag value as stored in the file
        offset: Byte offset of the tag within the buffer
    """

    kind: RecordKind
    tag: int
    offset: int
