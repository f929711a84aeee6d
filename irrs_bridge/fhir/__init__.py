"""
FHIR Conversion Module

Converts parsed Clarity LTCF flat files into IRRS Encounter transaction
Bundles.

Components:
- constants: IRRS profile URLs, codes and local ids
- mappers: Contained resource mappers and admin flag resolvers
- bundler: Transaction Bundle assembler
- converter: Main conversion service
- serializer: FHIR XML / JSON rendering
"""
from .converter import EncounterConverter
from .bundler import FHIRBundler

__all__ = [
    "EncounterConverter",
    "FHIRBundler",
]
