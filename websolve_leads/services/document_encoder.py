# websolve_leads/services/document_encoder.py
from __future__ import annotations

import xml.etree.ElementTree as ET

from websolve_leads.services.field_validator import xml_text
from websolve_leads.services.payload_router import EncodedFieldSet
from websolve_leads.services.schema_index import WIRE_GROUPS

ROOT_TAG = "lead"


def build_tree(fields: EncodedFieldSet) -> ET.Element:
    root = ET.Element(ROOT_TAG)
    for group, values in fields.groups():
        branch = ET.SubElement(root, WIRE_GROUPS[group])
        for name, value in values.items():
            ET.SubElement(branch, name).text = xml_text(value)
    return root


def encode(fields: EncodedFieldSet) -> str:
    """Serialize validated fields into the setLead request document."""
    body = ET.tostring(build_tree(fields), encoding="unicode")
    # ElementTree writes carriage returns literally and parsers fold them
    # into newlines. The document has no attributes, so every \r is text.
    body = body.replace("\r", "&#13;")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"
