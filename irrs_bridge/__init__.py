"""IRRS Encounter Bridge: Clarity LTCF flat files to IRRS FHIR Encounter bundles."""
