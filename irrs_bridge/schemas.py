from pydantic import BaseModel, Field
from enum import Enum
from typing import Any, Optional, Dict

# Health check schema
class HealthResponse(BaseModel):
    """Health check response"""
    status: str

class OutputFormat(str, Enum):
    """Serialization of a returned bundle"""
    XML = "xml"
    JSON = "json"

# Conversion schemas
class RecordConvertRequest(BaseModel):
    """Request schema for converting an already-parsed flat file"""
    admin: Dict[str, str] = Field(default_factory=dict)
    patient: Dict[str, str] = Field(default_factory=dict)
    encounter: Dict[str, str] = Field(default_factory=dict)
    bundle_id: Optional[str] = None

class FlatFileConvertRequest(BaseModel):
    """Request schema for converting raw flat-file text"""
    content: str
    bundle_id: Optional[str] = None

class EncounterBundleResponse(BaseModel):
    """Response schema for a JSON encounter bundle"""
    bundle: Dict[str, Any]
    contained_count: int
