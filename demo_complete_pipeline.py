#!/usr/bin/env python3
"""
Complete Pipeline Demo: Bytes → DecodedFile → Analysis → Documents

Shows the full workflow:
1. Build an example .sav file
2. Decode it
3. Analyze the dictionary
4. Serialize to JSON, YAML and CSV
"""

import sys
import tempfile
from pathlib import Path

from savreader.analyzer import analyze_file, format_report
from savreader.examples import build_example_survey_file
from savreader.sav_parser import parse_sav_file
from savreader.serialization import decoded_to_csv, decoded_to_json, decoded_to_yaml


def main():
    if len(sys.argv) > 1:
        sav_path = Path(sys.argv[1])
    else:
        sav_path = Path(tempfile.mkdtemp()) / "example_survey.sav"
        sav_path.write_bytes(build_example_survey_file())

    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: .sav → DecodedFile → Analysis → Documents")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Decode
    # =========================================================================
    print("\n1. DECODING FILE...")
    decoded = parse_sav_file(str(sav_path))
    print(f"   ✓ Loaded: {sav_path.name} ({sav_path.stat().st_size} bytes)")
    print(f"   ✓ File label: {decoded.metadata.file_label}")
    print(f"   ✓ Variables: {len(decoded.variables)}")
    print(f"   ✓ Declared cases: {decoded.case_count}")

    # =========================================================================
    # STEP 2: Analyze
    # =========================================================================
    print("\n2. ANALYZING DICTIONARY...")
    for line in format_report(analyze_file(decoded)).splitlines():
        print(f"   {line}")

    # =========================================================================
    # STEP 3: Serialize
    # =========================================================================
    print("\n3. JSON DOCUMENT:")
    print("-" * 80)
    lines = decoded_to_json(decoded).split("\n")
    for line in lines[:20]:
        print(f"   {line}")
    if len(lines) > 20:
        print(f"   ... ({len(lines) - 20} more lines)")

    print("\n4. YAML VARIABLES:")
    print("-" * 80)
    yaml_lines = decoded_to_yaml(decoded).split("\n")
    start = yaml_lines.index("variables:")
    for line in yaml_lines[start:start + 10]:
        print(f"   {line}")

    print("\n5. CSV HEADER:")
    print("-" * 80)
    print(f"   {decoded_to_csv(decoded).strip()}")

    print("\n" + "=" * 80)
    print("PIPELINE COMPLETE!")
    print("=" * 80)


if __name__ == "__main__":
    main()
