"""
Flat-File Record Models

Pydantic views of a parsed Clarity LTCF flat file and of its [ADMIN]
section, plus the operation modes the admin flags resolve to.
"""
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class PatientOperation(str, Enum):
    """How the Encounter addresses its patient."""
    USE = "USE"  # patient already exists on the server
    CREATE = "CREATE"

    @classmethod
    def from_flag(cls, flag: Optional[str]) -> "PatientOperation":
        return cls.USE if flag == "USE" else cls.CREATE


class EncounterOperation(str, Enum):
    """Submission directive for the Encounter entry."""
    UPDATE = "UPDATE"
    CREATE = "CREATE"

    @classmethod
    def from_flag(cls, flag: Optional[str]) -> "EncounterOperation":
        return cls.UPDATE if flag == "UPDATE" else cls.CREATE


class AssessmentKind(str, Enum):
    """Assessment category, derived from the free-text assessment type."""
    RETURN = "return"
    STANDARD = "standard"

    @classmethod
    def from_text(cls, assessment_type: Optional[str]) -> "AssessmentKind":
        if assessment_type and "return" in assessment_type.lower():
            return cls.RETURN
        return cls.STANDARD


def clean(value: Optional[str]) -> Optional[str]:
    """Return the value, or None when it is missing or whitespace only."""
    if value is None or not value.strip():
        return None
    return value


class FlatFileRecord(BaseModel):
    """
    Parsed sections of a flat file.

    Only ``admin`` and ``encounter`` feed the Encounter bundle; the
    remaining sections are kept so a single parse serves every consumer.
    """
    model_config = ConfigDict(frozen=True)

    admin: Dict[str, str] = Field(default_factory=dict)
    patient: Dict[str, str] = Field(default_factory=dict)
    encounter: Dict[str, str] = Field(default_factory=dict)
    assessment_sections: Dict[str, Dict[str, str]] = Field(default_factory=dict)

    def encounter_value(self, key: str) -> Optional[str]:
        """Non-blank encounter field value, or None."""
        return clean(self.encounter.get(key))


class AdminMetadata(BaseModel):
    """
    Strongly typed view of the [ADMIN] section.

    Keys are matched case-insensitively. Missing keys give None.
    """
    model_config = ConfigDict(frozen=True)

    # Patient
    fhir_pat_id: Optional[str] = None
    fhir_pat_key: Optional[str] = None
    pat_oper: Optional[str] = None

    # Encounter
    fhir_enc_id: Optional[str] = None
    fhir_enc_key: Optional[str] = None
    enc_oper: Optional[str] = None

    # Assessment
    fhir_asm_id: Optional[str] = None
    rec_id: Optional[str] = None
    asm_oper: Optional[str] = None
    asm_type: Optional[str] = None

    # Routing
    fiscal: Optional[str] = None
    quarter: Optional[str] = None

    @classmethod
    def from_record(cls, record: FlatFileRecord) -> "AdminMetadata":
        admin = {key.lower(): value for key, value in record.admin.items()}
        return cls(
            fhir_pat_id=admin.get("fhirpatid"),
            fhir_pat_key=admin.get("fhirpatkey"),
            pat_oper=admin.get("patoper"),
            fhir_enc_id=admin.get("fhirencid"),
            fhir_enc_key=admin.get("fhirenckey"),
            enc_oper=admin.get("encoper"),
            fhir_asm_id=admin.get("fhirasmid"),
            rec_id=admin.get("rec_id") or admin.get("recid"),
            asm_oper=admin.get("asmoper"),
            asm_type=admin.get("asmtype"),
            fiscal=admin.get("fiscal"),
            quarter=admin.get("quarter"),
        )

    @property
    def patient_operation(self) -> PatientOperation:
        return PatientOperation.from_flag(self.pat_oper)

    @property
    def encounter_operation(self) -> EncounterOperation:
        return EncounterOperation.from_flag(self.enc_oper)

    @property
    def assessment_kind(self) -> AssessmentKind:
        return AssessmentKind.from_text(self.asm_type)
