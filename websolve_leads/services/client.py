# websolve_leads/services/client.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from websolve_leads.core.config import Settings, settings as default_settings
from websolve_leads.core.exceptions import MissingProviderCodeError
from websolve_leads.core.logging import bind_provider_code, get_structlog_logger
from websolve_leads.schemas.aliases import GroupAliases
from websolve_leads.schemas.formats import (
    DOCUMENT_FORMATS,
    SUBMISSION_FORMATS,
    OutputFormat,
    resolve_output_format,
)
from websolve_leads.services.document_decoder import decode
from websolve_leads.services.document_encoder import encode
from websolve_leads.services.payload_router import EncodedFieldSet, route
from websolve_leads.services.response_interpreter import as_boolean, as_identifier
from websolve_leads.services.schema_index import Schema, SchemaEntry, SchemaIndex
from websolve_leads.services.transport import LeadTransport

logger = get_structlog_logger(__name__)


@dataclass
class LeadSession:
    """Per-caller state: provider code, group aliases and the lead headers cache."""

    provider_code: Optional[str] = None
    aliases: GroupAliases = field(default_factory=GroupAliases)
    schemas: SchemaIndex = field(default_factory=SchemaIndex)


class LeadsClient:
    def __init__(self, transport: LeadTransport, config: Optional[Settings] = None) -> None:
        self.transport = transport
        self.config = config or default_settings

    def session(
        self,
        provider_code: Optional[str] = None,
        aliases: Optional[Mapping[str, Any]] = None,
    ) -> LeadSession:
        session = LeadSession(provider_code=provider_code)
        if aliases:
            self.set_data_keys(session, aliases)
        return session

    def set_provider_code(self, session: LeadSession, code: Optional[str]) -> LeadSession:
        session.provider_code = code
        return session

    def set_data_keys(self, session: LeadSession, keys: Mapping[str, Any]) -> LeadSession:
        """Merge custom group wrapper keys into the session aliases."""
        session.aliases = session.aliases.merged(keys)
        return session

    def _code(self, session: LeadSession, provider_code: Optional[str]) -> str:
        code = provider_code or session.provider_code or self.config.provider_code
        if not code:
            raise MissingProviderCodeError()
        bind_provider_code(code)
        return code

    def _schema_entry(
        self, session: LeadSession, provider_code: str, refresh: bool = False
    ) -> SchemaEntry:
        return session.schemas.get(provider_code, self.transport.fetch_schema, refresh=refresh)

    def load_schema(
        self,
        session: LeadSession,
        provider_code: Optional[str] = None,
        refresh: bool = False,
    ) -> Schema:
        code = self._code(session, provider_code)
        return self._schema_entry(session, code, refresh).schema

    def get_lead_headers(
        self,
        session: LeadSession,
        output_format: Union[str, OutputFormat] = OutputFormat.RAW,
        provider_code: Optional[str] = None,
        refresh: bool = False,
    ):
        fmt = resolve_output_format(output_format, operation="get_lead_headers", allowed=DOCUMENT_FORMATS)
        code = self._code(session, provider_code)
        entry = self._schema_entry(session, code, refresh)
        if fmt is OutputFormat.RAW:
            return entry.raw
        return decode(entry.raw)

    def get_lead_status(
        self,
        session: LeadSession,
        reference_id: Union[str, int],
        output_format: Union[str, OutputFormat] = OutputFormat.RAW,
        provider_code: Optional[str] = None,
    ):
        fmt = resolve_output_format(output_format, operation="get_lead_status", allowed=DOCUMENT_FORMATS)
        code = self._code(session, provider_code)
        logger.info("lead.status_requested", reference_id=str(reference_id))
        response = self.transport.fetch_lead_status(code, str(reference_id))
        if fmt is OutputFormat.RAW:
            return response
        return decode(response)

    def route_lead(
        self,
        session: LeadSession,
        data: Mapping[str, Any],
        provider_code: Optional[str] = None,
    ) -> EncodedFieldSet:
        code = self._code(session, provider_code)
        schema = self._schema_entry(session, code).schema
        return route(data, schema, session.aliases)

    def build_lead_document(
        self,
        session: LeadSession,
        data: Mapping[str, Any],
        provider_code: Optional[str] = None,
    ) -> str:
        """The setLead request document for data, without submitting it."""
        return encode(self.route_lead(session, data, provider_code))

    def set_lead(
        self,
        session: LeadSession,
        data: Mapping[str, Any],
        output_format: Union[str, OutputFormat] = OutputFormat.RAW,
        provider_code: Optional[str] = None,
    ):
        """
        Submit a new lead.

        Lead headers are loaded first so fields can be matched and validated.
        Depending on output_format returns the raw response XML, the decoded
        mapping, a success flag or the new lead id (None when not created).
        """
        fmt = resolve_output_format(output_format, operation="set_lead", allowed=SUBMISSION_FORMATS)
        code = self._code(session, provider_code)
        fields = self.route_lead(session, data, code)
        logger.info(
            "lead.submit",
            lead_fields=len(fields.lead),
            customer_fields=len(fields.customer),
            dropped=len(fields.dropped),
        )
        response = self.transport.submit(code, encode(fields))

        if fmt is OutputFormat.RAW:
            return response
        if fmt is OutputFormat.DECODED:
            return decode(response)
        if fmt is OutputFormat.BOOLEAN:
            return as_boolean(response)
        return as_identifier(response)
