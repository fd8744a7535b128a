"""
Example data file builder.

Packs headers, variable records and stream tags into "$FL2" bytes so that
small, fully known files can be produced without a statistics package.
Used by the demo script and the test suite.
"""
import struct
from typing import Iterable, Optional, Sequence

from savreader.records import TERMINATOR_TAG, VARIABLE_RECORD_TAG
from savreader.sav_parser import (
    CREATION_DATE_SIZE,
    FILE_LABEL_SIZE,
    HEADER_PADDING_SIZE,
    MAGIC,
    VARIABLE_NAME_SIZE,
    padded_label_length,
)


def pack_int32(value: int) -> bytes:
    return struct.pack("<i", value)


def pack_text(text: str, size: int, fill: bytes = b" ") -> bytes:
    raw = text.encode("utf-8")[:size]
    return raw + fill * (size - len(raw))


def pack_header(
    variable_count: int,
    case_count: int = 0,
    layout_code: int = 2,
    compression: int = 0,
    weight_index: int = 0,
    bias: float = 100.0,
    creation_date: str = "19 OCT 26",
    file_label: str = "",
) -> bytes:
    """Magic marker plus the complete header prologue."""
    return b"".join([
        MAGIC,
        pack_int32(layout_code),
        pack_int32(variable_count),
        pack_int32(compression),
        pack_int32(weight_index),
        pack_int32(case_count),
        struct.pack("<d", bias),
        pack_text(creation_date, CREATION_DATE_SIZE),
        pack_text(file_label, FILE_LABEL_SIZE),
        b"\x00" * HEADER_PADDING_SIZE,
    ])


def pack_variable(
    name: str,
    type_code: int = 0,
    label: Optional[str] = None,
    missing_format: int = 0,
    print_format: int = 0x050800,
    write_format: int = 0x050800,
    record_type: int = VARIABLE_RECORD_TAG,
) -> bytes:
    """One variable record; a label adds its length and 4-byte aligned text."""
    parts = [
        pack_int32(record_type),
        pack_int32(type_code),
        pack_int32(1 if label is not None else 0),
        pack_int32(missing_format),
        pack_int32(print_format),
        pack_int32(write_format),
        pack_text(name, VARIABLE_NAME_SIZE, fill=b"\x00"),
    ]
    if label is not None:
        raw = label.encode("utf-8")
        parts.append(pack_int32(len(raw)))
        parts.append(raw + b" " * (padded_label_length(len(raw)) - len(raw)))
    return b"".join(parts)


def pack_tags(tags: Iterable[int]) -> bytes:
    return b"".join(pack_int32(tag) for tag in tags)


def build_example_sav(
    variables: Sequence[dict] = (),
    case_count: int = 0,
    file_label: str = "",
    tags: Sequence[int] = (TERMINATOR_TAG,),
) -> bytes:
    """
    Build a complete file from keyword dicts accepted by pack_variable.

    Example:
        build_example_sav([{"name": "AGE"}, {"name": "CITY", "type_code": 8}])
    """
    return b"".join([
        pack_header(variable_count=len(variables), case_count=case_count, file_label=file_label),
        *(pack_variable(**fields) for fields in variables),
        pack_tags(tags),
    ])


def build_example_survey_file() -> bytes:
    """A small household survey dictionary with labelled variables."""
    return build_example_sav(
        variables=[
            {"name": "RESPID", "label": "Respondent identifier"},
            {"name": "AGE", "label": "Age in years"},
            {"name": "SEX", "label": "Sex"},
            {"name": "REGION", "type_code": 12, "label": "Region of residence"},
            {"name": "INCOME"},
        ],
        case_count=250,
        file_label="Household survey wave 2204",
        tags=[7, 7, TERMINATOR_TAG],
    )
