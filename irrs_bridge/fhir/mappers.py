"""
IRRS Sub-Tree Mappers

Maps flat-file encounter fields to the pieces of an IRRS Encounter:

- Start date → resolved once per record, shared by coverage and period
- iA7a..iA7k → contained Coverage resources
- Coverages → contained Account (payment source)
- B5A/B5B → contained Location (admitted from)
- OrgID/R2/R4 → contained Location (discharged to)
- Admin flags → subject reference and entry request directive

Every mapper is a pure function of its arguments and returns a plain
dictionary in FHIR JSON shape, or None when the sub-tree is omitted.
"""
from typing import Optional, List, Dict, Any
import logging
import uuid

from ..models import (
    AssessmentKind,
    EncounterOperation,
    FlatFileRecord,
    PatientOperation,
    clean,
)
from . import constants

logger = logging.getLogger(__name__)


def generate_id() -> str:
    """Generate a unique resource ID."""
    return str(uuid.uuid4())


def resolve_start_date(
    assessment_kind: AssessmentKind,
    stay_start_date: Optional[str],
    return_date: Optional[str]
) -> Optional[str]:
    """
    Pick the authoritative stay-start date.

    Return assessments use A12; every other assessment uses B2. There is no
    fallback to the other field when the chosen one is blank.

    Args:
        assessment_kind: Kind resolved from the admin assessment type
        stay_start_date: B2 value
        return_date: A12 value

    Returns:
        Date string, or None when the chosen field is blank
    """
    if assessment_kind is AssessmentKind.RETURN:
        candidate = return_date
    else:
        candidate = stay_start_date
    return clean(candidate)


def _coding(code: str) -> List[Dict[str, Any]]:
    return [{"coding": [{"code": code}]}]


class CoverageMapper:
    """Maps payment source fields to contained Coverage resources."""

    @staticmethod
    def map(
        record: FlatFileRecord,
        start_date: Optional[str]
    ) -> List[Dict[str, Any]]:
        """
        Build one Coverage per populated payment source code.

        Args:
            record: Parsed flat file
            start_date: Resolved stay-start date (may be None)

        Returns:
            Coverage dictionaries in fixed code order (may be empty)
        """
        coverages = []

        for code in constants.COVERAGE_CODES:
            if record.encounter_value(code) is None:
                continue

            coverage_dict = {
                "resourceType": "Coverage",
                "id": code,
                "meta": {"profile": [constants.PROFILES["Coverage"]]},
                "type": {"coding": [{"code": constants.COVERAGE_TYPE_CODES[code]}]},
            }
            if start_date:
                coverage_dict["period"] = {"start": start_date}

            coverages.append(coverage_dict)

        return coverages


class AccountMapper:
    """Maps emitted coverages to the contained payment-source Account."""

    @staticmethod
    def map(coverages: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if not coverages:
            logger.debug("No payment source codes; account omitted")
            return None

        return {
            "resourceType": "Account",
            "id": constants.ACCOUNT_LOCAL_ID,
            "meta": {"profile": [constants.PROFILES["Account"]]},
            "type": {"coding": [{"code": constants.ACCOUNT_TYPE_CODE}]},
            "coverage": [
                {"coverage": {"reference": constants.local_reference(coverage["id"])}}
                for coverage in coverages
            ],
        }


class LocationMapper:
    """Maps admission and discharge fields to contained Location resources."""

    @staticmethod
    def map_admission(record: FlatFileRecord) -> Optional[Dict[str, Any]]:
        """
        Convert B5A/B5B to the "admitted from" Location.

        B5A is used verbatim as the location type code; no terminology
        lookup is applied.

        Args:
            record: Parsed flat file

        Returns:
            Location dictionary, or None when B5A is blank
        """
        admitted_from = record.encounter_value("B5A")
        if admitted_from is None:
            logger.debug("B5A blank; admission location omitted")
            return None

        location_dict = {
            "resourceType": "Location",
            "id": constants.ADMISSION_LOCATION_LOCAL_ID,
            "meta": {"profile": [constants.PROFILES["admission"]]},
            "type": _coding(admitted_from),
        }

        facility_number = record.encounter_value("B5B")
        if facility_number is not None:
            location_dict["managingOrganization"] = {
                "identifier": {"value": facility_number}
            }

        return location_dict

    @staticmethod
    def map_discharge(record: FlatFileRecord) -> Optional[Dict[str, Any]]:
        """
        Convert R2/R4 to the "discharged to" Location.

        Requires OrgID, R2 and R4 together; any one missing omits the
        Location, unlike the admission side which only needs B5A.

        Args:
            record: Parsed flat file

        Returns:
            Location dictionary, or None
        """
        org_id = record.encounter_value("OrgID")
        living_status = record.encounter_value("R2")
        facility_number = record.encounter_value("R4")
        if org_id is None or living_status is None or facility_number is None:
            logger.debug(
                "Discharge location omitted (OrgID=%r, R2=%r, R4=%r)",
                org_id, living_status, facility_number
            )
            return None

        return {
            "resourceType": "Location",
            "id": constants.DISCHARGE_LOCATION_LOCAL_ID,
            "meta": {"profile": [constants.PROFILES["discharge"]]},
            "type": _coding(living_status),
            "managingOrganization": {
                "identifier": {"value": facility_number}
            },
        }


def resolve_subject_reference(
    operation: PatientOperation,
    patient_id: Optional[str]
) -> Optional[Dict[str, str]]:
    """Subject reference for the Encounter, or None without a patient id."""
    if not patient_id:
        return None
    if operation is PatientOperation.USE:
        return {"reference": f"Patient/{patient_id}"}
    return {"reference": constants.bundle_reference(patient_id)}


def resolve_request(
    operation: EncounterOperation,
    encounter_id: str
) -> Dict[str, str]:
    """Bundle entry request: $update on an existing Encounter, else create."""
    if operation is EncounterOperation.UPDATE:
        url = constants.UPDATE_URL_TEMPLATE.format(encounter_id=encounter_id)
    else:
        url = constants.bundle_reference(encounter_id)
    return {"method": constants.REQUEST_METHOD, "url": url}
