# websolve_leads/services/response_interpreter.py
from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from websolve_leads.core.exceptions import MalformedResponseError
from websolve_leads.core.logging import get_structlog_logger
from websolve_leads.services.document_decoder import DecodedMapping, Document, decode

logger = get_structlog_logger(__name__)

STATUS_PROCESSED = "request processed"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _coerce_int(value: Any) -> int:
    """Leading integer of a value, 0 when there is none."""
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def _is_created(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return isinstance(value, str) and value.strip() == "1"


def _accepted(response: DecodedMapping) -> bool:
    return response.get("request_status") == STATUS_PROCESSED and _is_created(response.get("created"))


def _decode_quietly(document: Document) -> Optional[DecodedMapping]:
    try:
        return decode(document)
    except MalformedResponseError as exc:
        logger.warning("response.malformed", error=exc.message, details=exc.details)
        return None


def _raw_mapping(document: Document) -> Optional[DecodedMapping]:
    # Mappings keep their original leaf types so created=1 can be an int
    if isinstance(document, Mapping):
        return dict(document)
    return _decode_quietly(document)


def as_boolean(document: Document) -> bool:
    """True when the lead was processed, created and given a positive id."""
    response = _raw_mapping(document)
    if response is None or not _accepted(response):
        return False
    return_id = response.get("returnID")
    return return_id is not None and _coerce_int(return_id) > 0


def as_identifier(document: Document) -> Optional[str]:
    """The returnID of a processed and created lead, else None."""
    response = _raw_mapping(document)
    if response is None or not _accepted(response):
        return None
    return_id = response.get("returnID")
    if return_id is None or isinstance(return_id, Mapping):
        return None
    return str(return_id)
