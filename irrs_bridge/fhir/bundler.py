"""
FHIR Bundle Assembler

Allocates the bundle, patient and encounter identifiers for one record and
wraps entries in a transaction-type Bundle.
"""
from typing import List, Dict, Any, Optional
from dataclasses import dataclass

from ..models import clean
from . import constants
from .mappers import generate_id


@dataclass(frozen=True)
class BundleIds:
    """Identifiers allocated for a single bundle."""
    bundle_id: str
    patient_id: str
    encounter_id: str


def _supplied_or_new(value: Optional[str]) -> str:
    return clean(value) or generate_id()


def allocate_ids(
    bundle_id: Optional[str] = None,
    patient_id: Optional[str] = None,
    encounter_id: Optional[str] = None
) -> BundleIds:
    """
    Use each caller-supplied identifier when non-blank, else a fresh UUID.

    Args:
        bundle_id: Optional bundle ID
        patient_id: Optional FHIR patient ID (admin fhirPatID)
        encounter_id: Optional FHIR encounter ID (admin fhirEncID)

    Returns:
        BundleIds with every identifier populated
    """
    return BundleIds(
        bundle_id=_supplied_or_new(bundle_id),
        patient_id=_supplied_or_new(patient_id),
        encounter_id=_supplied_or_new(encounter_id),
    )


class FHIRBundler:
    """
    Assembles resources into a transaction Bundle.

    A bundler collects entries for one Bundle; create a new one per record.
    """

    def __init__(self):
        """Initialize the bundler."""
        self.entries: List[Dict[str, Any]] = []

    def add_resource(
        self,
        resource: Dict[str, Any],
        request: Dict[str, str]
    ) -> None:
        """
        Add a resource entry to the bundle.

        Args:
            resource: Resource dictionary (must carry an id)
            request: Transaction request directive for the entry
        """
        entry = {
            "fullUrl": constants.bundle_reference(resource["id"]),
            "resource": resource,
            "request": request,
        }
        self.entries.append(entry)

    def build(self, bundle_id: str) -> Dict[str, Any]:
        """
        Build the final FHIR Bundle.

        Args:
            bundle_id: Bundle ID

        Returns:
            Bundle dictionary in FHIR JSON shape
        """
        return {
            "resourceType": "Bundle",
            "id": bundle_id,
            "type": constants.BUNDLE_TYPE,
            "entry": list(self.entries),
        }

    @property
    def resource_count(self) -> int:
        """Number of resources in the bundle."""
        return len(self.entries)

    def get_resource_types(self) -> List[str]:
        """Get list of resource types in the bundle."""
        return [entry["resource"]["resourceType"] for entry in self.entries]
