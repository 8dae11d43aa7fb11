# websolve_leads/schemas/formats.py
from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Union

from websolve_leads.core.exceptions import UnsupportedOutputFormatError


class OutputFormat(Enum):
    RAW = "xml"
    DECODED = "array"
    BOOLEAN = "bool"
    IDENTIFIER = "int"


_ALIASES = {
    "xml": OutputFormat.RAW,
    "raw": OutputFormat.RAW,
    "array": OutputFormat.DECODED,
    "dict": OutputFormat.DECODED,
    "decoded": OutputFormat.DECODED,
    "bool": OutputFormat.BOOLEAN,
    "boolean": OutputFormat.BOOLEAN,
    "int": OutputFormat.IDENTIFIER,
    "integer": OutputFormat.IDENTIFIER,
    "identifier": OutputFormat.IDENTIFIER,
}

DOCUMENT_FORMATS: FrozenSet[OutputFormat] = frozenset({OutputFormat.RAW, OutputFormat.DECODED})
SUBMISSION_FORMATS: FrozenSet[OutputFormat] = frozenset(OutputFormat)


def resolve_output_format(
    output_format: Union[str, OutputFormat],
    *,
    operation: str,
    allowed: FrozenSet[OutputFormat] = DOCUMENT_FORMATS,
) -> OutputFormat:
    if isinstance(output_format, OutputFormat):
        resolved = output_format
    else:
        resolved = _ALIASES.get(str(output_format).strip().lower())
    if resolved is None or resolved not in allowed:
        raise UnsupportedOutputFormatError(str(getattr(output_format, "value", output_format)), operation)
    return resolved
