from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response
from typing import Optional
import logging

from .config import settings
from .fhir import EncounterConverter
from .logging_config import configure_logging
from .models import FlatFileRecord
from .parser import FlatFileParser
from .schemas import (
    EncounterBundleResponse,
    FlatFileConvertRequest,
    HealthResponse,
    OutputFormat,
    RecordConvertRequest,
)

from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)

FHIR_XML_MEDIA_TYPE = "application/fhir+xml"

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup"""
    configure_logging()
    logger.info("%s started", settings.app_name)
    yield

# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Converts Clarity LTCF flat files into IRRS Encounter bundles",
    version="1.0.0",
    lifespan=lifespan
)

converter = EncounterConverter(pretty_print=settings.xml_pretty_print)
parser = FlatFileParser()

@app.get("/health", response_model=HealthResponse)
def health_check():
    """
    Health check endpoint - returns {"status": "ok"}
    """
    return {"status": "ok"}

def _render(record: FlatFileRecord, bundle_id: Optional[str], output_format: OutputFormat):
    """Build the bundle for a record in the requested format"""
    try:
        if output_format is OutputFormat.JSON:
            bundle = converter.build_bundle(record, bundle_id=bundle_id)
            encounter = bundle["entry"][0]["resource"]
            return EncounterBundleResponse(
                bundle=bundle,
                contained_count=len(encounter.get("contained", []))
            )
        document = converter.build_document(record, bundle_id=bundle_id)
        return Response(content=document, media_type=FHIR_XML_MEDIA_TYPE)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Encounter bundle conversion failed")
        raise HTTPException(
            status_code=500,
            detail=f"Encounter bundle conversion failed: {str(e)}"
        )

@app.post("/encounter_bundle")
def encounter_bundle(
    request: RecordConvertRequest,
    output_format: OutputFormat = Query(OutputFormat.XML, alias="format")
):
    """
    Convert a parsed flat file to an IRRS Encounter transaction Bundle.

    Accepts:
    - admin: [ADMIN] key/value pairs (fhirPatID, fhirEncID, patOper, encOper, asmType)
    - encounter: [ENCOUNTER] key/value pairs (B2, A12, R1, B5A, B5B, OrgID, R2, R4, iA7a..iA7k)
    - bundle_id: Optional bundle ID

    Returns FHIR XML by default, or the bundle as JSON with ?format=json.
    """
    record = FlatFileRecord(
        admin=request.admin,
        patient=request.patient,
        encounter=request.encounter,
    )
    return _render(record, request.bundle_id, output_format)

@app.post("/encounter_bundle/flat_file")
def encounter_bundle_from_flat_file(
    request: FlatFileConvertRequest,
    output_format: OutputFormat = Query(OutputFormat.XML, alias="format")
):
    """
    Parse raw flat-file text and convert it to an IRRS Encounter Bundle.

    Returns 400 when the content is empty.
    """
    if not request.content.strip():
        raise HTTPException(status_code=400, detail="Flat file content must not be empty")

    record = parser.parse_text(request.content)
    return _render(record, request.bundle_id, output_format)
