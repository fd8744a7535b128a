"""
File Analyzer: early diagnostics and inventory of decoded data files.

This module provides lightweight analysis of DecodedFile objects:
    - Variable type inventory
    - Label coverage
    - Duplicate names
    - Declared vs decoded counts
    - Warning flags for downstream consumers

IMPORTANT: This is an analysis layer. It does NOT modify the file.
It only produces read-only reports.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List

from savreader.model import DecodedFile


@dataclass
class FileReport:
    """Analysis report for a decoded file."""

    file_label: str
    variable_count: int = 0
    numeric_variables: int = 0
    string_variables: int = 0
    labelled_variables: int = 0
    max_string_width: int = 0

    declared_cases: int = 0
    decoded_cases: int = 0

    # Name usage
    duplicate_names: Dict[str, int] = field(default_factory=dict)

    # Stream
    terminated: bool = False
    skipped_records: int = 0

    label_coverage_percent: float = 0.0

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_file(decoded: DecodedFile) -> FileReport:
    """
    Summarize a DecodedFile.

    Checks for:
    - Variable types and string widths
    - Label coverage
    - Duplicate variable names
    - Case rows not decoded
    - Missing terminator record

    Returns a FileReport with metrics and warnings.
    """
    report = FileReport(file_label=decoded.metadata.file_label)

    report.variable_count = len(decoded.variables)
    report.declared_cases = decoded.case_count
    report.decoded_cases = len(decoded.data)
    report.terminated = decoded.terminated
    report.skipped_records = len(decoded.skipped_records)

    for var in decoded.variables:
        if var.is_numeric:
            report.numeric_variables += 1
        else:
            report.string_variables += 1
            report.max_string_width = max(report.max_string_width, var.width)
        if var.has_label:
            report.labelled_variables += 1

    if report.variable_count:
        report.label_coverage_percent = 100.0 * report.labelled_variables / report.variable_count

    name_counts = Counter(var.name for var in decoded.variables)
    report.duplicate_names = {name: n for name, n in name_counts.items() if n > 1}
    for name, n in sorted(report.duplicate_names.items()):
        report.add_warning(f"Variable name {name!r} is used {n} times")

    for index, var in enumerate(decoded.variables):
        if not var.name:
            report.add_warning(f"Variable at column {index} has an empty name")

    if report.declared_cases > report.decoded_cases:
        report.add_warning(
            f"Header declares {report.declared_cases} cases; "
            f"{report.decoded_cases} decoded"
        )

    if not report.terminated:
        report.add_warning("Stream ended without a terminator record")

    return report


def format_report(report: FileReport) -> str:
    """Render a FileReport as plain text lines."""
    lines = [
        f"File label:        {report.file_label or '(none)'}",
        f"Variables:         {report.variable_count} "
        f"({report.numeric_variables} numeric, {report.string_variables} string)",
        f"Labelled:          {report.labelled_variables} ({report.label_coverage_percent:.1f}%)",
        f"Max string width:  {report.max_string_width}",
        f"Cases:             {report.decoded_cases} decoded of {report.declared_cases} declared",
        f"Skipped records:   {report.skipped_records}",
        f"Terminator seen:   {'yes' if report.terminated else 'no'}",
    ]
    if report.warnings:
        lines.append(f"Warnings ({len(report.warnings)}):")
        lines.extend(f"  - {w}" for w in report.warnings)
    return "\n".join(lines)
