"""
IRRS Literal Table

Profile URLs, naming systems, fixed codes and contained-resource local ids
used when rendering an Encounter bundle. Downstream conformance checks match
these strings verbatim, so every builder reads them from here.
"""
from typing import Dict, Tuple

FHIR_NAMESPACE = "http://hl7.org/fhir"

BUNDLE_TYPE = "transaction"

_STRUCTURE_DEFINITION_BASE = "http://cihi.ca/fhir/irrs/StructureDefinition"

PROFILES: Dict[str, str] = {
    "Encounter": f"{_STRUCTURE_DEFINITION_BASE}/irrs-encounter",
    "Account": f"{_STRUCTURE_DEFINITION_BASE}/irrs-account",
    "Coverage": f"{_STRUCTURE_DEFINITION_BASE}/irrs-coverage",
    "admission": f"{_STRUCTURE_DEFINITION_BASE}/irrs-location-admission",
    "discharge": f"{_STRUCTURE_DEFINITION_BASE}/irrs-location-discharge",
}

SUBMISSION_IDENTIFIER_SYSTEM = (
    "http://cihi.ca/fhir/NamingSystem/"
    "on-ministry-of-health-and-long-term-care-submission-identifier"
)

ENCOUNTER_STATUS = "planned"

# Provincial billing account
ACCOUNT_TYPE_CODE = "PBILLACCT"

# Local ids of contained resources
ACCOUNT_LOCAL_ID = "paymentSource"
ADMISSION_LOCATION_LOCAL_ID = "admittedFrom"
DISCHARGE_LOCATION_LOCAL_ID = "dischargedTo"

# Payment source fields, in emission order
COVERAGE_CODES: Tuple[str, ...] = (
    "iA7a", "iA7b", "iA7c", "iA7d", "iA7e", "iA7f",
    "iA7g", "iA7h", "iA7i", "iA7j", "iA7k",
)

DEFAULT_COVERAGE_TYPE = "pay"

COVERAGE_TYPE_CODES: Dict[str, str] = {
    code: DEFAULT_COVERAGE_TYPE for code in COVERAGE_CODES
}
COVERAGE_TYPE_CODES["iA7a"] = "INPUBLICPOL"

REQUEST_METHOD = "POST"
UPDATE_URL_TEMPLATE = "/Encounter/{encounter_id}/$update"


def local_reference(local_id: str) -> str:
    """Reference to a resource contained in the same Encounter."""
    return f"#{local_id}"


def bundle_reference(resource_id: str) -> str:
    """Reference to a resource by its bundle-local fullUrl."""
    return f"urn:uuid:{resource_id}"
