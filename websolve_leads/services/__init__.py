# websolve_leads/services/__init__.py
"""
Lead schema handling, record routing, document codecs and the service client.
"""

# Import key service functions and classes for convenient access
from websolve_leads.services.client import LeadsClient, LeadSession
from websolve_leads.services.document_decoder import decode
from websolve_leads.services.document_encoder import encode
from websolve_leads.services.field_validator import validate
from websolve_leads.services.payload_router import Dropped, EncodedFieldSet, Routed, route
from websolve_leads.services.response_interpreter import as_boolean, as_identifier
from websolve_leads.services.schema_index import FieldSpec, Schema, SchemaIndex, load_schema
from websolve_leads.services.transport import HttpSoapTransport, LeadTransport

__all__ = [
    # Client
    "LeadsClient",
    "LeadSession",
    # Schema
    "FieldSpec",
    "Schema",
    "SchemaIndex",
    "load_schema",
    # Validation and routing
    "validate",
    "Dropped",
    "EncodedFieldSet",
    "Routed",
    "route",
    # Documents
    "decode",
    "encode",
    "as_boolean",
    "as_identifier",
    # Transport
    "HttpSoapTransport",
    "LeadTransport",
]
