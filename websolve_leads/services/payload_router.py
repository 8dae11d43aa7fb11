# websolve_leads/services/payload_router.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from websolve_leads.core.exceptions import SchemaUnavailableError
from websolve_leads.core.logging import get_structlog_logger
from websolve_leads.schemas.aliases import CUSTOMER, GROUPS, LEAD, GroupAliases
from websolve_leads.services.field_validator import validate
from websolve_leads.services.schema_index import Schema

logger = get_structlog_logger(__name__)

DROP_UNKNOWN_FIELD = "unknown_field"
DROP_INVALID_VALUE = "invalid_value"
DROP_NOT_A_MAPPING = "group_not_a_mapping"


@dataclass(frozen=True)
class Routed:
    group: str
    field: str
    value: str


@dataclass(frozen=True)
class Dropped:
    key: str
    reason: str
    group: Optional[str] = None


Resolution = Union[Routed, Dropped]


@dataclass
class EncodedFieldSet:
    """Validated field values per record group, in insertion order."""

    lead: Dict[str, str] = field(default_factory=dict)
    customer: Dict[str, str] = field(default_factory=dict)
    dropped: List[Dropped] = field(default_factory=list)

    def group(self, name: str) -> Dict[str, str]:
        return self.lead if name == LEAD else self.customer

    def groups(self) -> Iterator[Tuple[str, Dict[str, str]]]:
        for name in GROUPS:
            yield name, self.group(name)

    def add(self, resolution: Resolution) -> None:
        if isinstance(resolution, Routed):
            self.group(resolution.group)[resolution.field] = resolution.value
        else:
            self.dropped.append(resolution)
            logger.debug(
                "routing.field_dropped",
                key=resolution.key,
                group=resolution.group,
                reason=resolution.reason,
            )


def resolve_tagged(group: str, field_name: str, value: Any, schema: Schema) -> Resolution:
    """Resolve a field found under a group wrapper key; only that group is searched."""
    spec = schema.lookup(group, field_name)
    if spec is None:
        return Dropped(key=field_name, reason=DROP_UNKNOWN_FIELD, group=group)
    validated = validate(value, spec)
    if validated is None:
        return Dropped(key=field_name, reason=DROP_INVALID_VALUE, group=group)
    return Routed(group=group, field=field_name, value=validated)


def resolve_untagged(field_name: str, value: Any, schema: Schema) -> Resolution:
    """Resolve a flat record key by searching the lead schema, then the customer schema."""
    for group in (LEAD, CUSTOMER):
        if schema.lookup(group, field_name) is not None:
            return resolve_tagged(group, field_name, value, schema)
    return Dropped(key=field_name, reason=DROP_UNKNOWN_FIELD)


def route(
    record: Mapping[str, Any],
    schema: Schema,
    aliases: Optional[GroupAliases] = None,
) -> EncodedFieldSet:
    """
    Split a lead record into validated lead and customer fields.

    Values under a group wrapper key (see GroupAliases) are validated against
    that group only. Any other key is looked up as a field name, lead first.
    Unknown or invalid fields are dropped and listed on the result.
    """
    if not schema.is_complete():
        raise SchemaUnavailableError("Cannot route a record against an empty lead schema")
    aliases = aliases or GroupAliases()

    fields = EncodedFieldSet()
    for key, value in record.items():
        group = aliases.group_for(key)
        if group is None:
            fields.add(resolve_untagged(key, value, schema))
            continue

        if not isinstance(value, Mapping):
            fields.add(Dropped(key=key, reason=DROP_NOT_A_MAPPING, group=group))
            continue
        for field_name, field_value in value.items():
            fields.add(resolve_tagged(group, field_name, field_value, schema))

    logger.debug(
        "routing.complete",
        lead_fields=len(fields.lead),
        customer_fields=len(fields.customer),
        dropped=len(fields.dropped),
    )
    return fields
