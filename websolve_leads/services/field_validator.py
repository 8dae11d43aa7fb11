# websolve_leads/services/field_validator.py
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from websolve_leads.services.schema_index import FieldSpec

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Characters outside the XML 1.0 Char production
_XML_INVALID = re.compile("[^\u0009\u000a\u000d\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

# Accepted textual timestamps besides ISO 8601. Slashes read month first,
# dashes and dots read day first.
_TIMESTAMP_FORMATS = (
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
    "%d-%m-%Y %H:%M:%S",
    "%d-%m-%Y %H:%M",
    "%d-%m-%Y",
    "%d.%m.%Y %H:%M:%S",
    "%d.%m.%Y %H:%M",
    "%d.%m.%Y",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
)

_BOOLEAN_ENUM_PREFIX = "tpson"


def parse_timestamp(text: str) -> Optional[datetime]:
    text = text.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def xml_text(text: str) -> str:
    """Remove characters that cannot appear in an XML 1.0 document."""
    return _XML_INVALID.sub("", text)


def _validate_text(value: Any, spec: FieldSpec) -> Optional[str]:
    if isinstance(value, bool):
        value = "1" if value else ""
    text = xml_text(str(value)).strip()
    if spec.length is not None and len(text) > spec.length:
        text = text[:spec.length]
    return text or None


def _validate_timestamp(value: Any, fmt: str) -> Optional[str]:
    if isinstance(value, date):
        value = value.strftime(fmt)
    parsed = parse_timestamp(str(value))
    if parsed is None:
        return None
    return parsed.strftime(fmt)


def _validate_date(value: Any, spec: FieldSpec) -> Optional[str]:
    return _validate_timestamp(value, DATE_FORMAT)


def _validate_datetime(value: Any, spec: FieldSpec) -> Optional[str]:
    return _validate_timestamp(value, DATETIME_FORMAT)


def _validate_enum(value: Any, spec: FieldSpec) -> Optional[str]:
    if isinstance(value, bool) and spec.name.startswith(_BOOLEAN_ENUM_PREFIX):
        return "Y" if value else "N"
    text = xml_text(str(value)).strip()
    folded = text.casefold()
    if any(folded == allowed.casefold() for allowed in spec.allowed_values):
        return text
    return None


_RULES: Dict[str, Callable[[Any, FieldSpec], Optional[str]]] = {
    "INT": _validate_text,
    "TEXT": _validate_text,
    "VARCHAR": _validate_text,
    "DATE": _validate_date,
    "DATETIME": _validate_datetime,
    "ENUM": _validate_enum,
}


def validate(value: Any, spec: FieldSpec) -> Optional[str]:
    """
    Normalize a value for the field described by spec.

    Returns the string to submit, or None when the value cannot be used.
    """
    if value is None:
        return None
    rule = _RULES.get(spec.type_name)
    if rule is None:
        return None
    return rule(value, spec)
