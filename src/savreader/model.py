"""
Core Data File Model Objects

Defines the fundamental data structures produced by decoding a data file.

These are pure data classes representing:
    - File metadata (the header prologue)
    - Variables (the column dictionary)
    - Decoded files (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about byte layouts or output formats
        - Are immutable (frozen=True)
        - Are fully serializable
        - Represent structure, not behavior
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from savreader.records import RecordKind, StreamRecord


class VariableType(Enum):
    """Storage class of a variable, derived from its type code."""

    NUMERIC = "numeric"
    STRING = "string"

    @classmethod
    def from_type_code(cls, type_code: int) -> "VariableType":
        """0 (or below) is numeric; a positive code is a string of that width."""
        return cls.STRING if type_code > 0 else cls.NUMERIC


Cell = Union[float, str]
Row = Tuple[Cell, ...]


@dataclass(frozen=True)
class FileMetadata:
    """
    Header prologue of a data file.

    Properties:
        layout_code: File layout code (2 or 3 in files seen in practice)
        variable_count: Declared number of variable records
        compression: Compression flag
        weight_index: Case weight variable index (0 when unweighted)
        case_count: Declared number of cases
        bias: Compression bias
        creation_date: Creation timestamp text, trimmed
        file_label: File label text, trimmed

    IMPORTANT:
        Counts are the file's own declarations. They are trusted as loop
        bounds while decoding and never recomputed.
    """

    layout_code: int
    variable_count: int
    compression: int
    weight_index: int
    case_count: int
    bias: float
    creation_date: str = ""
    file_label: str = ""


@dataclass(frozen=True)
class VariableDefinition:
    """
    Declares one column of the data matrix.

    Properties:
        name: Variable name (e.g., "AGE"); not required to be unique
        type: NUMERIC or STRING
        width: 0 for numeric, declared width for string variables
        has_label: Whether the record carried a variable label
        missing_format: Missing-value format code (opaque)
        print_format: Print format code (opaque)
        write_format: Write format code (opaque)
        label: Variable label, present iff has_label
    """

    name: str
    type: VariableType = VariableType.NUMERIC
    width: int = 0
    has_label: bool = False
    missing_format: int = 0
    print_format: int = 0
    write_format: int = 0
    label: Optional[str] = None

    @property
    def is_numeric(self) -> bool:
        return self.type is VariableType.NUMERIC


@dataclass(frozen=True)
class DecodedFile:
    """
    Root container for everything decoded from one data file.

    Properties:
        metadata:
            FileMetadata from the header

        variables:
            Variable dictionary. Position is the column index and stays
            stable from decoding through serialization.

        data:
            Row matrix. Each row is aligned by column index to variables.

        records:
            Record tags skipped by the stream scanner after the dictionary

        terminated:
            True when the scanner stopped on the terminator record,
            False when the stream simply ran out

    INVARIANTS (checked on construction):
        - len(variables) == metadata.variable_count
        - every row has len(variables) cells
        - numeric columns hold floats, string columns hold str
    """

    metadata: FileMetadata
    variables: Tuple[VariableDefinition, ...] = ()
    data: Tuple[Row, ...] = ()
    records: Tuple[StreamRecord, ...] = field(default=(), compare=False)
    terminated: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", tuple(self.variables))
        object.__setattr__(self, "data", tuple(tuple(row) for row in self.data))
        object.__setattr__(self, "records", tuple(self.records))

        if len(self.variables) != self.metadata.variable_count:
            raise ValueError(
                f"Dictionary has {len(self.variables)} variables, "
                f"header declares {self.metadata.variable_count}"
            )
        for row_num, row in enumerate(self.data):
            if len(row) != len(self.variables):
                raise ValueError(
                    f"Row {row_num} has {len(row)} cells, expected {len(self.variables)}"
                )
            for var, cell in zip(self.variables, row):
                if not _cell_matches(var, cell):
                    raise ValueError(
                        f"Row {row_num}: {var.type.value} variable {var.name!r} "
                        f"cannot hold {cell!r}"
                    )

    @property
    def case_count(self) -> int:
        return self.metadata.case_count

    @property
    def variable_count(self) -> int:
        return self.metadata.variable_count

    @property
    def skipped_records(self) -> Tuple[StreamRecord, ...]:
        return tuple(r for r in self.records if r.kind is not RecordKind.TERMINATOR)

    def get_variable(self, name: str) -> Optional[VariableDefinition]:
        """
        Retrieve the first variable with the given name.

        Args:
            name: Variable name

        Returns:
            VariableDefinition or None if not found
        """
        for var in self.variables:
            if var.name == name:
                return var
        return None

    def column_index(self, name: str) -> Optional[int]:
        """Column index of the first variable with the given name, or None."""
        for index, var in enumerate(self.variables):
            if var.name == name:
                return index
        return None


def _cell_matches(var: VariableDefinition, cell: object) -> bool:
    if var.is_numeric:
        return isinstance(cell, (int, float)) and not isinstance(cell, bool)
    return isinstance(cell, str)
