# websolve_leads/schemas/__init__.py
"""
Caller-facing models: record group aliases and response output formats.
"""

from websolve_leads.schemas.aliases import CUSTOMER, GROUPS, LEAD, GroupAliases
from websolve_leads.schemas.formats import OutputFormat, resolve_output_format

__all__ = [
    "CUSTOMER",
    "GROUPS",
    "LEAD",
    "GroupAliases",
    "OutputFormat",
    "resolve_output_format",
]
