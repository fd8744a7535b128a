"""
Serialization helpers for decoded data files.

Projects a DecodedFile into a plain dict tree with the top-level keys
"metadata", "variables" and "data", then renders that tree as JSON, YAML
or CSV. Every function here is pure: no shared builder, no global state.

Key names match what the upload front end consumes (camelCase).
"""
from __future__ import annotations

import csv
import io
import json
import math
from typing import Any, Dict, List

import yaml

from savreader.model import DecodedFile, FileMetadata, VariableDefinition, VariableType

# JSON has no NaN or Infinity; these are written as text, the way Jackson does.
_NON_FINITE_TEXT = ("NaN", "Infinity", "-Infinity")


def _number_to_tree(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    return value


def _number_from_tree(value: Any) -> Any:
    if isinstance(value, str) and value in _NON_FINITE_TEXT:
        return float(value)
    return value


def metadata_to_dict(m: FileMetadata) -> Dict[str, Any]:
    return {
        "layoutCode": m.layout_code,
        "variableCount": m.variable_count,
        "compression": m.compression,
        "weightIndex": m.weight_index,
        "caseCount": m.case_count,
        "bias": _number_to_tree(m.bias),
        "creationDate": m.creation_date,
        "fileLabel": m.file_label,
    }


def metadata_from_dict(d: Dict[str, Any]) -> FileMetadata:
    return FileMetadata(
        layout_code=d["layoutCode"],
        variable_count=d["variableCount"],
        compression=d.get("compression", 0),
        weight_index=d.get("weightIndex", 0),
        case_count=d.get("caseCount", 0),
        bias=float(_number_from_tree(d.get("bias", 0.0))),
        creation_date=d.get("creationDate", ""),
        file_label=d.get("fileLabel", ""),
    )


def variable_to_dict(v: VariableDefinition) -> Dict[str, Any]:
    d = {
        "name": v.name,
        "type": v.type.value,
        "width": v.width,
        "hasLabel": v.has_label,
        "missingFormat": v.missing_format,
        "printFormat": v.print_format,
        "writeFormat": v.write_format,
    }
    if v.label is not None:
        d["label"] = v.label
    return d


def variable_from_dict(d: Dict[str, Any]) -> VariableDefinition:
    return VariableDefinition(
        name=d["name"],
        type=VariableType(d.get("type", VariableType.NUMERIC.value)),
        width=d.get("width", 0),
        has_label=d.get("hasLabel", False),
        missing_format=d.get("missingFormat", 0),
        print_format=d.get("printFormat", 0),
        write_format=d.get("writeFormat", 0),
        label=d.get("label"),
    )


def decoded_to_dict(f: DecodedFile) -> Dict[str, Any]:
    return {
        "metadata": metadata_to_dict(f.metadata),
        "variables": [variable_to_dict(v) for v in f.variables],
        "data": [[_number_to_tree(cell) for cell in row] for row in f.data],
    }


def _row_from_tree(variables: tuple, row: List[Any]) -> tuple:
    # Length mismatches are left for DecodedFile to reject.
    if len(row) != len(variables):
        return tuple(row)
    return tuple(
        _number_from_tree(cell) if var.is_numeric else cell
        for var, cell in zip(variables, row)
    )


def decoded_from_dict(d: Dict[str, Any]) -> DecodedFile:
    variables = tuple(variable_from_dict(v) for v in d.get("variables", []))
    return DecodedFile(
        metadata=metadata_from_dict(d["metadata"]),
        variables=variables,
        data=tuple(_row_from_tree(variables, row) for row in d.get("data", [])),
    )


def decoded_to_json(f: DecodedFile, indent: int = 2) -> str:
    return json.dumps(decoded_to_dict(f), indent=indent, ensure_ascii=False, allow_nan=False)


def decoded_from_json(s: str) -> DecodedFile:
    return decoded_from_dict(json.loads(s))


def decoded_to_yaml(f: DecodedFile) -> str:
    return yaml.safe_dump(decoded_to_dict(f), sort_keys=False, allow_unicode=True)


def decoded_from_yaml(s: str) -> DecodedFile:
    return decoded_from_dict(yaml.safe_load(s))


def decoded_to_csv(f: DecodedFile) -> str:
    """Header row of variable names, then one line per case; every cell quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([v.name for v in f.variables])
    rows: List[List[Any]] = [list(row) for row in f.data]
    writer.writerows(rows)
    return buf.getvalue()
