"""
API tests for the encounter bundle endpoints

Uses FastAPI's TestClient; no external services are involved.
"""
import xml.etree.ElementTree as ET

import pytest
from fastapi.testclient import TestClient

from irrs_bridge.main import app

NS = "{http://hl7.org/fhir}"

client = TestClient(app)

SAMPLE_REQUEST = {
    "admin": {"fhirPatID": "pat-001", "fhirEncID": "enc-001", "patOper": "USE"},
    "encounter": {
        "B2": "2024-01-05",
        "iA7a": "1",
        "OrgID": "ORG77",
        "R2": "LIVING",
        "R4": "5678",
    },
    "bundle_id": "bundle-001",
}

SAMPLE_FLAT_FILE = """[ADMIN]
fhirEncID=enc-002
encOper=UPDATE
[ENCOUNTER]
B5A=HOSP
B5B=1234
"""

# ============================================================================
# HEALTH CHECK TESTS
# ============================================================================

def test_health_check():
    """Test health check returns {\"status\": \"ok\"}"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}

# ============================================================================
# ENCOUNTER BUNDLE TESTS
# ============================================================================

class TestEncounterBundleEndpoint:
    """Test /encounter_bundle endpoint"""

    def test_xml_by_default(self):
        response = client.post("/encounter_bundle", json=SAMPLE_REQUEST)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/fhir+xml")
        assert response.text.startswith('<?xml version="1.0" encoding="UTF-8" standalone="yes"?>')

        root = ET.fromstring(response.content)
        assert root.find(f"{NS}id").get("value") == "bundle-001"

    def test_json_format(self):
        response = client.post("/encounter_bundle?format=json", json=SAMPLE_REQUEST)

        assert response.status_code == 200
        data = response.json()
        encounter = data["bundle"]["entry"][0]["resource"]
        assert data["contained_count"] == 3
        assert data["bundle"]["type"] == "transaction"
        assert encounter["subject"] == {"reference": "Patient/pat-001"}
        assert encounter["hospitalization"] == {"destination": "#dischargedTo"}

    def test_empty_record(self):
        response = client.post("/encounter_bundle?format=json", json={})

        assert response.status_code == 200
        assert response.json()["contained_count"] == 0

    def test_invalid_format(self):
        response = client.post("/encounter_bundle?format=yaml", json=SAMPLE_REQUEST)
        assert response.status_code == 422


class TestFlatFileEndpoint:
    """Test /encounter_bundle/flat_file endpoint"""

    def test_flat_file_to_json(self):
        response = client.post(
            "/encounter_bundle/flat_file?format=json",
            json={"content": SAMPLE_FLAT_FILE}
        )

        assert response.status_code == 200
        entry = response.json()["bundle"]["entry"][0]
        assert entry["request"]["url"] == "/Encounter/enc-002/$update"
        assert entry["resource"]["hospitalization"] == {"origin": {"reference": "#admittedFrom"}}

    def test_flat_file_to_xml(self):
        response = client.post(
            "/encounter_bundle/flat_file",
            json={"content": SAMPLE_FLAT_FILE, "bundle_id": "bundle-002"}
        )

        assert response.status_code == 200
        root = ET.fromstring(response.content)
        location = root.find(f"{NS}entry/{NS}resource/{NS}Encounter/{NS}contained/{NS}Location")
        assert location.find(f"{NS}id").get("value") == "admittedFrom"

    @pytest.mark.parametrize("content", ["", "   \n  "])
    def test_empty_content_rejected(self, content):
        response = client.post("/encounter_bundle/flat_file", json={"content": content})
        assert response.status_code == 400

    def test_missing_content(self):
        response = client.post("/encounter_bundle/flat_file", json={})
        assert response.status_code == 422
