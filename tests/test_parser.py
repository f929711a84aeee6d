"""
Unit tests for the flat file parser

Covers section routing, key/value splitting and the parse → convert path.
"""
import xml.etree.ElementTree as ET

import pytest

from irrs_bridge.parser import FlatFileParser
from irrs_bridge.fhir.converter import EncounterConverter

SAMPLE_FLAT_FILE = """
; exported by Clarity
ignored=before any section

[ADMIN]
fhirPatID=pat-001
fhirEncID = enc-001
patOper=USE
encOper=UPDATE
asmType=Return Assessment

[patient]
A2A=F
A3=1940-03-02

[Encounter]
B2=2024-01-05
A12=2024-02-01
OrgID=ORG77
iA7a=1
iA7c=
note=a=b

[SECTION A]
A1=Yes
malformed line
"""


@pytest.fixture
def parser():
    return FlatFileParser()


def test_sections_routed(parser):
    """Test ADMIN/PATIENT/ENCOUNTER headers are matched case-insensitively"""
    record = parser.parse_text(SAMPLE_FLAT_FILE)

    assert record.admin["fhirPatID"] == "pat-001"
    assert record.patient == {"A2A": "F", "A3": "1940-03-02"}
    assert record.encounter["B2"] == "2024-01-05"
    assert record.assessment_sections == {"SECTION A": {"A1": "Yes"}}

def test_keys_and_values_trimmed(parser):
    record = parser.parse_text(SAMPLE_FLAT_FILE)

    assert record.admin["fhirEncID"] == "enc-001"

def test_value_keeps_later_equals(parser):
    record = parser.parse_text(SAMPLE_FLAT_FILE)

    assert record.encounter["note"] == "a=b"

def test_lines_outside_sections_ignored(parser):
    record = parser.parse_text(SAMPLE_FLAT_FILE)

    assert "ignored" not in record.admin
    assert "; exported by Clarity" not in record.admin

def test_blank_value_kept_as_empty(parser):
    """Blank values are parsed; the converter treats them as absent"""
    record = parser.parse_text(SAMPLE_FLAT_FILE)

    assert record.encounter["iA7c"] == ""
    assert record.encounter_value("iA7c") is None

def test_empty_text(parser):
    record = parser.parse_text("")

    assert record.admin == {}
    assert record.encounter == {}

def test_parse_file(parser, tmp_path):
    path = tmp_path / "submission.dat"
    path.write_text(SAMPLE_FLAT_FILE, encoding="utf-8")

    record = parser.parse_file(path)

    assert record.encounter["OrgID"] == "ORG77"

def test_parse_missing_file(parser, tmp_path):
    with pytest.raises(FileNotFoundError):
        parser.parse_file(tmp_path / "missing.dat")

def test_parsed_file_to_bundle(parser):
    """Test a parsed return assessment flows through the converter"""
    record = parser.parse_text(SAMPLE_FLAT_FILE)
    bundle = EncounterConverter().build_bundle(record, bundle_id="bundle-001")
    entry = bundle["entry"][0]
    encounter = entry["resource"]

    assert entry["request"]["url"] == "/Encounter/enc-001/$update"
    assert encounter["subject"] == {"reference": "Patient/pat-001"}
    assert encounter["period"] == {"start": "2024-02-01"}
    assert [c["id"] for c in encounter["contained"]] == ["paymentSource", "iA7a"]
    assert "hospitalization" not in encounter

def test_control_characters_from_flat_file(parser):
    """Test control characters inside a value still yield well-formed XML"""
    record = parser.parse_text("[ENCOUNTER]\nOrgID=O\x01RG\nR2=LIV\x02ING\nR4=5678\n")
    document = EncounterConverter().build_document(record, bundle_id="bundle-001")

    root = ET.fromstring(document.encode("utf-8"))
    ns = "{http://hl7.org/fhir}"
    encounter = root.find(f"{ns}entry/{ns}resource/{ns}Encounter")
    assert encounter.find(f"{ns}serviceProvider/{ns}identifier/{ns}value").get("value") == "ORG"
    assert encounter.find(f"{ns}contained/{ns}Location/{ns}type/{ns}coding/{ns}code").get("value") == "LIVING"
