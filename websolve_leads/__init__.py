"""
Client for the Websolve automotive lead service.

Fetches the accepted lead and customer fields, validates and routes
application records against them, submits leads and reads the responses.
"""

from websolve_leads.core.exceptions import (
    LeadsClientError,
    MalformedResponseError,
    MissingProviderCodeError,
    SchemaUnavailableError,
    TransportError,
    UnsupportedOutputFormatError,
)
from websolve_leads.schemas import GroupAliases, OutputFormat
from websolve_leads.services import HttpSoapTransport, LeadsClient, LeadSession

__version__ = "1.0.0"

__all__ = [
    "GroupAliases",
    "HttpSoapTransport",
    "LeadsClient",
    "LeadSession",
    "LeadsClientError",
    "MalformedResponseError",
    "MissingProviderCodeError",
    "OutputFormat",
    "SchemaUnavailableError",
    "TransportError",
    "UnsupportedOutputFormatError",
]
