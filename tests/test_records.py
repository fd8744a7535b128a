"""
Tests for record tag classification.

These tests verify:
    - Known tags map to their kinds
    - Unmapped tags are UNKNOWN rather than errors
    - StreamRecord immutability
"""

import dataclasses

import pytest

from savreader.records import (
    RECORD_TAGS,
    TERMINATOR_TAG,
    VARIABLE_RECORD_TAG,
    RecordKind,
    StreamRecord,
    classify_tag,
)


class TestClassifyTag:
    """Test classify_tag."""

    def test_variable_tag(self):
        assert classify_tag(VARIABLE_RECORD_TAG) is RecordKind.VARIABLE
        assert VARIABLE_RECORD_TAG == 2

    def test_terminator_tag(self):
        assert classify_tag(TERMINATOR_TAG) is RecordKind.TERMINATOR
        assert TERMINATOR_TAG == 999

    @pytest.mark.parametrize("tag", [0, 1, 3, 4, 6, 7, 998, 1000, -1])
    def test_unmapped_tags_are_unknown(self, tag):
        assert classify_tag(tag) is RecordKind.UNKNOWN

    def test_header_has_no_tag(self):
        assert RecordKind.HEADER not in RECORD_TAGS.values()


class TestStreamRecord:
    """Test StreamRecord objects."""

    def test_fields(self):
        record = StreamRecord(kind=RecordKind.UNKNOWN, tag=7, offset=140)
        assert record.kind is RecordKind.UNKNOWN
        assert record.tag == 7
        assert record.offset == 140

    def test_immutable(self):
        record = StreamRecord(kind=RecordKind.TERMINATOR, tag=999, offset=0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.tag = 2

    def test_equality(self):
        a = StreamRecord(kind=RecordKind.UNKNOWN, tag=7, offset=4)
        b = StreamRecord(kind=RecordKind.UNKNOWN, tag=7, offset=4)
        assert a == b
