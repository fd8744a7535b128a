"""
Parser for "$FL2" data files (Layer 1: Raw Bytes → DecodedFile).

File Layout (all integers stored little-endian):
    magic       "$FL2"                                          4 bytes
    header      layout, variables, compression, weight, cases   5 x 4 bytes
                compression bias (double)                       8 bytes
                creation date (text)                            9 bytes
                file label (text)                               64 bytes
                padding                                         3 bytes
    variable    record type (= 2), type code, has label,
                missing/print/write format                      6 x 4 bytes
                name (text)                                     8 bytes
                label length L + label, when has label          4 + ceil(L/4)*4 bytes
    stream      record-type tags until 999 or end of data       4 bytes each

Decoding Notes:
    - Declared counts from the header are trusted as loop bounds
    - The case payload after the dictionary is scanned, not decoded
    - Every failure is a FormatError; nothing is recovered
"""

import math
import os
import warnings
from typing import List, Optional, Tuple

from savreader.config import DecodeOptions
from savreader.cursor import ByteCursor, trim_text
from savreader.errors import (
    BadMagic,
    EmptyInput,
    FormatError,
    InvalidCount,
    InvalidExtension,
    TruncatedStream,
    UnexpectedRecordType,
)
from savreader.logging import get_logger
from savreader.model import DecodedFile, FileMetadata, VariableDefinition, VariableType
from savreader.records import (
    VARIABLE_RECORD_TAG,
    RecordKind,
    StreamRecord,
    classify_tag,
)

MAGIC = b"$FL2"
SAV_EXTENSION = ".sav"

CREATION_DATE_SIZE = 9
FILE_LABEL_SIZE = 64
HEADER_PADDING_SIZE = 3
VARIABLE_NAME_SIZE = 8
LABEL_ALIGNMENT = 4

KNOWN_LAYOUT_CODES = (2, 3)

logger = get_logger("parser")


def padded_label_length(length: int) -> int:
    """Label length rounded up to the next multiple of 4."""
    return math.ceil(length / LABEL_ALIGNMENT) * LABEL_ALIGNMENT


def _read_magic(cursor: ByteCursor) -> None:
    if cursor.remaining < len(MAGIC):
        prefix = cursor.read_bytes(cursor.remaining)
        if MAGIC.startswith(prefix):
            raise TruncatedStream(0, len(MAGIC), len(prefix))
        raise BadMagic(prefix)

    magic = cursor.read_bytes(len(MAGIC))
    if magic != MAGIC:
        raise BadMagic(magic)


def _read_header(cursor: ByteCursor, options: DecodeOptions) -> FileMetadata:
    layout_code = cursor.read_int32()

    count_offset = cursor.offset
    variable_count = cursor.read_int32()
    if variable_count < 0:
        raise InvalidCount("variable count", variable_count, count_offset)

    compression = cursor.read_int32()
    weight_index = cursor.read_int32()
    case_count = cursor.read_int32()
    bias = cursor.read_double()
    creation_date = cursor.read_text(CREATION_DATE_SIZE, options.encoding, options.errors)
    file_label = cursor.read_text(FILE_LABEL_SIZE, options.encoding, options.errors)
    cursor.skip(HEADER_PADDING_SIZE)

    if layout_code not in KNOWN_LAYOUT_CODES:
        warnings.warn(f"Unusual layout code {layout_code}", UserWarning)

    return FileMetadata(
        layout_code=layout_code,
        variable_count=variable_count,
        compression=compression,
        weight_index=weight_index,
        case_count=case_count,
        bias=bias,
        creation_date=creation_date,
        file_label=file_label,
    )


def _read_variable(cursor: ByteCursor, options: DecodeOptions) -> VariableDefinition:
    """Read one variable record, tag included."""
    tag_offset = cursor.offset
    record_type = cursor.read_int32()
    if record_type != VARIABLE_RECORD_TAG:
        raise UnexpectedRecordType(VARIABLE_RECORD_TAG, record_type, tag_offset)

    type_code = cursor.read_int32()

    has_label_flag = cursor.read_int32()
    if has_label_flag not in (0, 1):
        warnings.warn(
            f"Has-label flag {has_label_flag} at offset {tag_offset + 8} treated as false",
            UserWarning,
        )
    has_label = has_label_flag == 1

    missing_format = cursor.read_int32()
    print_format = cursor.read_int32()
    write_format = cursor.read_int32()

    raw_name = trim_text(cursor.read_bytes(VARIABLE_NAME_SIZE)).replace(b"\x00", b"")
    name = raw_name.decode(options.encoding, options.errors)

    label = None
    if has_label:
        length_offset = cursor.offset
        label_length = cursor.read_int32()
        if label_length < 0:
            raise InvalidCount("label length", label_length, length_offset)
        block = cursor.read_bytes(padded_label_length(label_length))
        label = trim_text(block[:label_length]).decode(options.encoding, options.errors)

    return VariableDefinition(
        name=name,
        type=VariableType.from_type_code(type_code),
        width=type_code,
        has_label=has_label,
        missing_format=missing_format,
        print_format=print_format,
        write_format=write_format,
        label=label,
    )


def _read_variable_records(
    cursor: ByteCursor, count: int, options: DecodeOptions
) -> List[VariableDefinition]:
    variables = []
    for index in range(count):
        variable = _read_variable(cursor, options)
        logger.debug(
            "Variable %d: %s (%s, width %d)",
            index, variable.name, variable.type.value, variable.width,
        )
        variables.append(variable)
    return variables


def _scan_records(cursor: ByteCursor) -> Tuple[List[StreamRecord], bool]:
    """
    Walk the record-type tags that follow the dictionary.

    Stops on the terminator tag, or when fewer than 4 bytes are left.
    Running out of data is a normal end of stream, not an error.

    Returns:
        (records seen, whether the terminator was reached)
    """
    records = []
    while cursor.remaining >= 4:
        offset = cursor.offset
        tag = cursor.read_int32()
        kind = classify_tag(tag)
        records.append(StreamRecord(kind=kind, tag=tag, offset=offset))

        if kind is RecordKind.TERMINATOR:
            return records, True
        if kind is RecordKind.UNKNOWN:
            logger.debug("Skipping record type %d at offset %d", tag, offset)
        # VARIABLE and UNKNOWN tags carry no decoded payload yet; skip the tag only.

    if cursor.remaining:
        logger.debug("Ignoring %d trailing bytes at offset %d", cursor.remaining, cursor.offset)
    return records, False


def decode(data: bytes, options: Optional[DecodeOptions] = None) -> DecodedFile:
    """
    Decode a data file held in memory.

    Args:
        data: Complete file contents
        options: Text decoding options (defaults to DecodeOptions())

    Returns:
        DecodedFile with metadata, variable dictionary and rows

    Raises:
        EmptyInput: If data is empty
        BadMagic: If data does not start with "$FL2"
        UnexpectedRecordType: If a dictionary record has the wrong tag
        TruncatedStream: If the header or dictionary is cut short
        InvalidCount: If a declared count or label length is negative
    """
    if options is None:
        options = DecodeOptions()
    if len(data) == 0:
        raise EmptyInput()

    cursor = ByteCursor(data)
    _read_magic(cursor)

    metadata = _read_header(cursor, options)
    logger.debug(
        "Header: layout %d, %d variables, %d cases",
        metadata.layout_code, metadata.variable_count, metadata.case_count,
    )

    variables = _read_variable_records(cursor, metadata.variable_count, options)
    records, terminated = _scan_records(cursor)
    logger.debug(
        "Scanned %d stream records (terminated=%s)", len(records), terminated
    )

    # Case data is not decoded; rows are never fabricated.
    return DecodedFile(
        metadata=metadata,
        variables=tuple(variables),
        data=(),
        records=tuple(records),
        terminated=terminated,
    )


def parse_sav_file(filepath: str, options: Optional[DecodeOptions] = None) -> DecodedFile:
    """
    Decode a data file from disk.

    Args:
        filepath: Path to a .sav file
        options: Text decoding options

    Returns:
        DecodedFile

    Raises:
        InvalidExtension: If the file name does not end in .sav
        FileNotFoundError: If the file doesn't exist
        FormatError: If decoding fails
    """
    filepath = os.fspath(filepath)
    if not filepath.lower().endswith(SAV_EXTENSION):
        raise InvalidExtension(os.path.basename(filepath))

    try:
        with open(filepath, "rb") as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Data file not found: {filepath}")

    logger.info("Decoding %s (%d bytes)", os.path.basename(filepath), len(content))
    return decode(content, options)


__all__ = [
    "BadMagic",
    "EmptyInput",
    "FormatError",
    "InvalidCount",
    "InvalidExtension",
    "TruncatedStream",
    "UnexpectedRecordType",
    "decode",
    "padded_label_length",
    "parse_sav_file",
]
