"""
Flat File Parser

Reads Clarity LTCF flat files: ``[SECTION]`` headers followed by
``key=value`` lines. ADMIN, PATIENT and ENCOUNTER sections map to their
own groups; any other section is kept as an assessment section.
"""
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from .models import FlatFileRecord


class FlatFileParser:
    """Parses flat-file text into a FlatFileRecord."""

    def parse_text(self, content: str) -> FlatFileRecord:
        """
        Parse flat-file content.

        Blank lines, lines before the first section header and lines
        without '=' are skipped. Values may themselves contain '='.

        Args:
            content: Flat-file text

        Returns:
            FlatFileRecord with every section populated
        """
        return self._parse_lines(content.splitlines())

    def parse_file(self, path: Union[str, Path]) -> FlatFileRecord:
        """Parse a flat file from disk."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Flat file not found: {path}")
        return self.parse_text(path.read_text(encoding="utf-8"))

    def _parse_lines(self, lines: Iterable[str]) -> FlatFileRecord:
        admin: Dict[str, str] = {}
        patient: Dict[str, str] = {}
        encounter: Dict[str, str] = {}
        assessment_sections: Dict[str, Dict[str, str]] = {}
        current_section: Optional[str] = None

        for raw_line in lines:
            line = raw_line.strip()
            if not line:
                continue

            if line.startswith("[") and line.endswith("]"):
                current_section = line.strip("[]")
                continue

            if current_section is None or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key, value = key.strip(), value.strip()

            section = current_section.upper()
            if section == "ADMIN":
                admin[key] = value
            elif section == "PATIENT":
                patient[key] = value
            elif section == "ENCOUNTER":
                encounter[key] = value
            else:
                assessment_sections.setdefault(current_section, {})[key] = value

        return FlatFileRecord(
            admin=admin,
            patient=patient,
            encounter=encounter,
            assessment_sections=assessment_sections,
        )
