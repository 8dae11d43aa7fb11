# websolve_leads/services/schema_index.py
from __future__ import annotations

import threading
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, FrozenSet, Mapping, Optional, Union

from websolve_leads.core.exceptions import SchemaUnavailableError
from websolve_leads.core.logging import get_structlog_logger
from websolve_leads.schemas.aliases import CUSTOMER, GROUPS, LEAD

logger = get_structlog_logger(__name__)

# Element names the service uses for each record group
WIRE_GROUPS: Mapping[str, str] = MappingProxyType({
    LEAD: "automotive_leads",
    CUSTOMER: "automotive_leads_info_customer",
})

FIELD_TYPES = frozenset({"INT", "TEXT", "VARCHAR", "DATE", "DATETIME", "ENUM"})


@dataclass(frozen=True)
class FieldSpec:
    group: str
    name: str
    type_name: str
    length: Optional[int] = None
    allowed_values: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class Schema:
    groups: Mapping[str, Mapping[str, FieldSpec]]

    def lookup(self, group: str, field_name: str) -> Optional[FieldSpec]:
        return self.groups.get(group, {}).get(field_name)

    def fields(self, group: str) -> Mapping[str, FieldSpec]:
        return self.groups.get(group, MappingProxyType({}))

    def is_complete(self) -> bool:
        return all(self.fields(group) for group in GROUPS)


@dataclass(frozen=True)
class SchemaEntry:
    raw: str
    schema: Schema


def _child_text(element: ET.Element, tag: str) -> Optional[str]:
    child = element.find(tag)
    if child is None or child.text is None:
        return None
    text = child.text.strip()
    return text or None


def _parse_length(text: Optional[str]) -> Optional[int]:
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def _parse_values(element: ET.Element) -> FrozenSet[str]:
    values = element.find("values")
    if values is None:
        return frozenset()
    children = list(values)
    if children:
        return frozenset((child.text or "").strip() for child in children if (child.text or "").strip())
    return frozenset(v.strip() for v in (values.text or "").split(",") if v.strip())


def _parse_field(group: str, element: ET.Element) -> FieldSpec:
    return FieldSpec(
        group=group,
        name=_child_text(element, "name") or element.tag,
        type_name=(_child_text(element, "type_name") or "").upper(),
        length=_parse_length(_child_text(element, "length")),
        allowed_values=_parse_values(element),
    )


def load_schema(raw: Union[str, bytes, ET.Element]) -> Schema:
    """
    Parse a lead headers document into a Schema.

    The document holds one element per record group, each containing one
    element per field with name, type_name, length and values children.
    """
    if isinstance(raw, ET.Element):
        root = raw
    elif not isinstance(raw, (str, bytes)) or not raw.strip():
        raise SchemaUnavailableError("Lead headers document is empty")
    else:
        try:
            root = ET.fromstring(raw)
        except ET.ParseError as exc:
            raise SchemaUnavailableError(
                "Lead headers document is not well-formed XML",
                details={"error": str(exc)},
            ) from exc

    groups: Dict[str, Mapping[str, FieldSpec]] = {}
    for group in GROUPS:
        element = root.find(WIRE_GROUPS[group])
        specs: Dict[str, FieldSpec] = {}
        if element is not None:
            for child in element:
                specs[child.tag] = _parse_field(group, child)
        groups[group] = MappingProxyType(specs)

    schema = Schema(groups=MappingProxyType(groups))
    if not schema.is_complete():
        raise SchemaUnavailableError(
            "Lead headers document has no fields for one or both record groups",
            details={group: len(schema.fields(group)) for group in GROUPS},
        )
    return schema


@dataclass
class SchemaIndex:
    """Lead headers cache keyed by provider code, one fetch in flight per key."""

    _entries: Dict[str, SchemaEntry] = field(default_factory=dict)
    _locks: Dict[str, threading.Lock] = field(default_factory=dict)
    _guard: threading.Lock = field(default_factory=threading.Lock)

    def _lock_for(self, provider_code: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(provider_code, threading.Lock())

    def cached(self, provider_code: str) -> Optional[SchemaEntry]:
        return self._entries.get(provider_code)

    def get(
        self,
        provider_code: str,
        fetch: Callable[[str], str],
        *,
        refresh: bool = False,
    ) -> SchemaEntry:
        entry = None if refresh else self._entries.get(provider_code)
        if entry is not None:
            return entry

        with self._lock_for(provider_code):
            # Another caller may have loaded it while we waited
            entry = None if refresh else self._entries.get(provider_code)
            if entry is not None:
                return entry

            logger.info("schema.fetch", provider_code=provider_code, refresh=refresh)
            try:
                raw = fetch(provider_code)
            except Exception as exc:
                logger.error("schema.fetch_failed", provider_code=provider_code, error=str(exc))
                raise SchemaUnavailableError(
                    "Lead headers could not be fetched",
                    details={"provider_code": provider_code, "error": str(exc)},
                ) from exc

            schema = load_schema(raw)
            entry = SchemaEntry(raw=raw, schema=schema)
            self._entries[provider_code] = entry
            logger.info(
                "schema.loaded",
                provider_code=provider_code,
                lead_fields=len(schema.fields(LEAD)),
                customer_fields=len(schema.fields(CUSTOMER)),
            )
            return entry

    def clear(self, provider_code: Optional[str] = None) -> None:
        with self._guard:
            if provider_code is None:
                self._entries.clear()
            else:
                self._entries.pop(provider_code, None)
