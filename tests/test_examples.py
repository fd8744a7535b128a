"""
Test the example file builder.

Validates that build_example_survey_file produces the expected
dictionary, labels and stream when decoded.
"""

from savreader.examples import build_example_survey_file, pack_header, pack_variable
from savreader.model import VariableType
from savreader.sav_parser import decode


def test_example_survey_file_structure():
    decoded = decode(build_example_survey_file())

    assert decoded.metadata.file_label == "Household survey wave 2204"
    assert decoded.case_count == 250
    assert [v.name for v in decoded.variables] == ["RESPID", "AGE", "SEX", "REGION", "INCOME"]

    region = decoded.get_variable("REGION")
    assert region is not None
    assert region.type is VariableType.STRING
    assert region.width == 12
    assert region.label == "Region of residence"

    income = decoded.get_variable("INCOME")
    assert income.has_label is False
    assert income.label is None

    assert decoded.terminated
    assert [r.tag for r in decoded.skipped_records] == [7, 7]


def test_packed_sizes():
    assert len(pack_header(variable_count=0)) == 108
    assert len(pack_variable("AGE")) == 32
    # 3-byte label: length word plus one aligned 4-byte block
    assert len(pack_variable("SEX", label="Sex")) == 32 + 4 + 4


def test_long_names_are_cut_to_eight_bytes():
    data = pack_header(variable_count=1) + pack_variable("LONGNAME99")
    assert decode(data).variables[0].name == "LONGNAME"
