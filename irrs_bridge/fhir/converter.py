"""
Encounter Converter Service

Main service for converting a parsed flat-file record into an IRRS
Encounter transaction Bundle.

Orchestrates:
1. Admin flag resolution (patient/encounter operation, assessment kind)
2. Stay-start date resolution
3. Contained resources (Account, Coverage, admission/discharge Location)
4. Encounter assembly
5. Bundle assembly and serialization
"""
from typing import Dict, Any, Optional, List
import logging

from ..models import AdminMetadata, FlatFileRecord
from . import constants
from .bundler import BundleIds, FHIRBundler, allocate_ids
from .mappers import (
    AccountMapper,
    CoverageMapper,
    LocationMapper,
    resolve_request,
    resolve_start_date,
    resolve_subject_reference,
)
from .serializer import to_xml

logger = logging.getLogger(__name__)


class EncounterConverter:
    """
    Converts flat-file records to IRRS Encounter bundles.

    Holds no per-record state, so one instance can serve any number of
    records, including from several threads.

    Usage:
        converter = EncounterConverter()
        document = converter.build_document(record)
    """

    def __init__(self, pretty_print: bool = False):
        """
        Initialize the converter.

        Args:
            pretty_print: Indent the XML produced by build_document
        """
        self.pretty_print = pretty_print

    def build_document(
        self,
        record: Optional[FlatFileRecord],
        bundle_id: Optional[str] = None
    ) -> str:
        """
        Convert a record to a FHIR XML transaction Bundle document.

        Args:
            record: Parsed flat file
            bundle_id: Optional bundle ID (generated if not provided)

        Returns:
            XML document text

        Raises:
            ValueError: If record is None
        """
        bundle = self.build_bundle(record, bundle_id=bundle_id)
        return to_xml(bundle, pretty_print=self.pretty_print)

    def build_bundle(
        self,
        record: Optional[FlatFileRecord],
        bundle_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Convert a record to a transaction Bundle dictionary.

        Args:
            record: Parsed flat file
            bundle_id: Optional bundle ID (generated if not provided)

        Returns:
            Bundle dictionary with a single Encounter entry

        Raises:
            ValueError: If record is None
        """
        if record is None:
            raise ValueError("Parsed flat file cannot be None.")

        admin = AdminMetadata.from_record(record)
        ids = allocate_ids(
            bundle_id=bundle_id,
            patient_id=admin.fhir_pat_id,
            encounter_id=admin.fhir_enc_id,
        )

        encounter = self.build_encounter(record, admin, ids)

        bundler = FHIRBundler()
        bundler.add_resource(
            encounter,
            resolve_request(admin.encounter_operation, ids.encounter_id)
        )
        bundle = bundler.build(ids.bundle_id)

        logger.info(
            "Built encounter bundle %s (encounter=%s, contained=%d, operation=%s)",
            ids.bundle_id,
            ids.encounter_id,
            len(encounter.get("contained", [])),
            admin.encounter_operation.value,
        )
        return bundle

    def build_encounter(
        self,
        record: FlatFileRecord,
        admin: AdminMetadata,
        ids: BundleIds
    ) -> Dict[str, Any]:
        """
        Assemble the Encounter resource with its contained resources.

        Args:
            record: Parsed flat file
            admin: Admin metadata of the same record
            ids: Allocated identifiers

        Returns:
            Encounter dictionary
        """
        start_date = resolve_start_date(
            admin.assessment_kind,
            record.encounter.get("B2"),
            record.encounter.get("A12"),
        )
        end_date = record.encounter_value("R1")
        org_id = record.encounter_value("OrgID")

        coverages = CoverageMapper.map(record, start_date)
        account = AccountMapper.map(coverages)
        admitted_from = LocationMapper.map_admission(record)
        discharged_to = LocationMapper.map_discharge(record)

        contained: List[Dict[str, Any]] = []
        if account:
            contained.append(account)
        contained.extend(coverages)
        if admitted_from:
            contained.append(admitted_from)
        if discharged_to:
            contained.append(discharged_to)

        encounter_dict: Dict[str, Any] = {
            "resourceType": "Encounter",
            "id": ids.encounter_id,
            "meta": {"profile": [constants.PROFILES["Encounter"]]},
        }
        if contained:
            encounter_dict["contained"] = contained

        encounter_dict["status"] = constants.ENCOUNTER_STATUS

        subject = resolve_subject_reference(admin.patient_operation, ids.patient_id)
        if subject:
            encounter_dict["subject"] = subject

        period = {}
        if start_date:
            period["start"] = start_date
        if end_date:
            period["end"] = end_date
        if period:
            encounter_dict["period"] = period
        else:
            logger.debug("No stay dates for encounter %s; period omitted", ids.encounter_id)

        if account:
            encounter_dict["account"] = [
                {"reference": constants.local_reference(account["id"])}
            ]

        hospitalization = self._hospitalization(admitted_from, discharged_to)
        if hospitalization:
            encounter_dict["hospitalization"] = hospitalization

        if org_id:
            encounter_dict["serviceProvider"] = {
                "identifier": {
                    "system": constants.SUBMISSION_IDENTIFIER_SYSTEM,
                    "value": org_id,
                }
            }

        return encounter_dict

    @staticmethod
    def _hospitalization(
        admitted_from: Optional[Dict[str, Any]],
        discharged_to: Optional[Dict[str, Any]]
    ) -> Optional[Dict[str, Any]]:
        # origin is a Reference, destination is carried as a bare value
        hospitalization = {}
        if admitted_from:
            hospitalization["origin"] = {
                "reference": constants.local_reference(admitted_from["id"])
            }
        if discharged_to:
            hospitalization["destination"] = constants.local_reference(discharged_to["id"])
        return hospitalization or None
