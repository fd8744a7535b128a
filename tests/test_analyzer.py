"""
Tests for the File Analyzer.

Tests verify that the analyzer correctly:
    - Counts variable types and string widths
    - Measures label coverage
    - Detects duplicate names
    - Flags undecoded cases and a missing terminator
"""

from savreader.analyzer import analyze_file, format_report
from savreader.examples import build_example_sav, build_example_survey_file
from savreader.model import DecodedFile, FileMetadata
from savreader.sav_parser import decode


def test_survey_file_inventory():
    """Analyze the example survey file."""
    report = analyze_file(decode(build_example_survey_file()))

    assert report.file_label == "Household survey wave 2204"
    assert report.variable_count == 5
    assert report.numeric_variables == 4
    assert report.string_variables == 1
    assert report.max_string_width == 12
    assert report.labelled_variables == 4
    assert report.label_coverage_percent == 80.0
    assert report.terminated
    assert report.skipped_records == 2
    assert report.duplicate_names == {}


def test_duplicate_names():
    """Duplicate names are legal but reported."""
    report = analyze_file(decode(build_example_sav([{"name": "Q1"}, {"name": "Q2"}, {"name": "Q1"}])))
    assert report.duplicate_names == {"Q1": 2}
    assert any("'Q1' is used 2 times" in w for w in report.warnings)


def test_undecoded_cases_warning():
    report = analyze_file(decode(build_example_sav([{"name": "A"}], case_count=10)))
    assert report.declared_cases == 10
    assert report.decoded_cases == 0
    assert any("declares 10 cases" in w for w in report.warnings)


def test_missing_terminator_warning():
    report = analyze_file(decode(build_example_sav([{"name": "A"}], tags=[7])))
    assert not report.terminated
    assert "Stream ended without a terminator record" in report.warnings


def test_empty_name_warning():
    report = analyze_file(decode(build_example_sav([{"name": ""}])))
    assert any("column 0 has an empty name" in w for w in report.warnings)


def test_empty_dictionary():
    metadata = FileMetadata(
        layout_code=2, variable_count=0, compression=0, weight_index=0, case_count=0, bias=100.0,
    )
    report = analyze_file(DecodedFile(metadata=metadata))
    assert report.variable_count == 0
    assert report.label_coverage_percent == 0.0
    assert report.warnings == ["Stream ended without a terminator record"]


def test_warnings_are_not_duplicated():
    report = analyze_file(decode(build_example_sav([{"name": "A"}])))
    report.add_warning("x")
    report.add_warning("x")
    assert report.warnings.count("x") == 1


def test_format_report():
    text = format_report(analyze_file(decode(build_example_survey_file())))
    assert "Household survey wave 2204" in text
    assert "5 (4 numeric, 1 string)" in text
    assert "Terminator seen:   yes" in text
    assert "Warnings (1):" in text
