"""
FHIR Document Serializer

Renders a Bundle dictionary (FHIR JSON shape) as a FHIR XML document:
primitives become ``value`` attributes, lists become repeated elements and
inline resources are wrapped in an element named after their resourceType.
"""
from typing import Any, Dict
import re
import xml.etree.ElementTree as ET

from .constants import FHIR_NAMESPACE

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'

ET.register_namespace("", FHIR_NAMESPACE)

# Characters outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile(
    r"[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)


def _tag(name: str) -> str:
    return f"{{{FHIR_NAMESPACE}}}{name}"


def _primitive(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return _INVALID_XML_CHARS.sub("", str(value))


def _append(parent: ET.Element, name: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, list):
        for item in value:
            _append(parent, name, item)
        return

    element = ET.SubElement(parent, _tag(name))
    if isinstance(value, dict):
        if "resourceType" in value:
            # contained / entry.resource hold a whole resource
            element.append(resource_to_element(value))
        else:
            _fill(element, value)
    else:
        element.set("value", _primitive(value))


def _fill(element: ET.Element, data: Dict[str, Any]) -> None:
    for name, value in data.items():
        if name == "resourceType":
            continue
        _append(element, name, value)


def resource_to_element(resource: Dict[str, Any]) -> ET.Element:
    """Convert a resource dictionary to an XML element."""
    element = ET.Element(_tag(resource["resourceType"]))
    _fill(element, resource)
    return element


def to_xml(resource: Dict[str, Any], pretty_print: bool = False) -> str:
    """
    Serialize a resource as a standalone FHIR XML document.

    Args:
        resource: Resource dictionary, usually a Bundle
        pretty_print: Indent nested elements

    Returns:
        XML text starting with the UTF-8 standalone declaration
    """
    root = resource_to_element(resource)
    if pretty_print:
        ET.indent(root)
    body = ET.tostring(root, encoding="unicode")
    return f"{XML_DECLARATION}\n{body}"
