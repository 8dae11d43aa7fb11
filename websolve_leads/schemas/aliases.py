# websolve_leads/schemas/aliases.py
from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

LEAD = "lead"
CUSTOMER = "customer"
GROUPS: Tuple[str, str] = (LEAD, CUSTOMER)


class GroupAliases(BaseModel):
    """Input keys accepted as a wrapper for each record group."""

    model_config = ConfigDict(frozen=True)

    lead: Tuple[str, ...] = ("automotive_leads", "lead")
    customer: Tuple[str, ...] = ("automotive_leads_info_customer", "customer")

    @field_validator("lead", "customer", mode="before")
    @classmethod
    def normalize_aliases(cls, v):
        if isinstance(v, str):
            return (v,)
        return tuple(v)

    def for_group(self, group: str) -> Tuple[str, ...]:
        return self.lead if group == LEAD else self.customer

    def group_for(self, key: Any) -> Optional[str]:
        """Group a wrapper key belongs to; lead wins when both list it."""
        for group in GROUPS:
            if key in self.for_group(group):
                return group
        return None

    def merged(self, overrides: Mapping[str, Any]) -> "GroupAliases":
        """
        Deep-merge overrides onto these aliases.

        A sequence replaces aliases position by position and extends past the
        current ones; a single string replaces the whole group.
        """
        values = {group: self.for_group(group) for group in GROUPS}
        for group, override in overrides.items():
            if group not in values:
                raise ValueError(f"unknown record group {group!r}, expected one of {list(GROUPS)}")
            if isinstance(override, str):
                values[group] = (override,)
                continue
            replacement = tuple(override)
            current = values[group]
            values[group] = replacement + current[len(replacement):]
        return GroupAliases(**values)
