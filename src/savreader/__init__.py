"""
savreader Package

Decodes "$FL2" statistical-package data files into a plain,
immutable in-memory representation.

ARCHITECTURAL GUARANTEE:
------------------------
The decoded model contains ZERO knowledge of:
    - Upload endpoints or HTTP envelopes
    - Output formats (JSON, YAML, CSV)
    - The byte layout it was read from

This package exposes FILE STRUCTURE only.

Decoding happens in sav_parser.
Every output format is derived from the model in serialization.
"""

from savreader.errors import (
    BadMagic,
    EmptyInput,
    FormatError,
    InvalidCount,
    InvalidExtension,
    TruncatedStream,
    UnexpectedRecordType,
)
from savreader.model import DecodedFile, FileMetadata, VariableDefinition, VariableType
from savreader.records import RecordKind, StreamRecord
from savreader.sav_parser import decode, parse_sav_file
from savreader.serialization import decoded_to_dict, decoded_to_json

__version__ = "0.1.0"

__all__ = [
    "BadMagic",
    "DecodedFile",
    "EmptyInput",
    "FileMetadata",
    "FormatError",
    "InvalidCount",
    "InvalidExtension",
    "RecordKind",
    "StreamRecord",
    "TruncatedStream",
    "UnexpectedRecordType",
    "VariableDefinition",
    "VariableType",
    "decode",
    "decoded_to_dict",
    "decoded_to_json",
    "parse_sav_file",
]
