# websolve_leads/core/exceptions.py
from __future__ import annotations

from typing import Any, Dict, Optional


class LeadsClientError(Exception):
    """Base exception for all lead service client errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class SchemaUnavailableError(LeadsClientError):
    """Lead headers could not be fetched or parsed."""
    def __init__(self, message: str = "Lead schema unavailable", **kwargs):
        super().__init__(message, code="schema_unavailable", **kwargs)


class MissingProviderCodeError(LeadsClientError):
    """No provider code set on the call, the session or the settings."""
    def __init__(
        self,
        message: str = (
            "Missing required provider code, set it on the session or pass it "
            "to the call as provider_code"
        ),
        **kwargs,
    ):
        super().__init__(message, code="missing_provider_code", **kwargs)


class UnsupportedOutputFormatError(LeadsClientError):
    """Requested response shape is not implemented for the operation."""
    def __init__(self, output_format: str, operation: str, **kwargs):
        super().__init__(
            f"Unsupported output format {output_format!r} for {operation}",
            code="unsupported_output_format",
            details={"output_format": output_format, "operation": operation},
            **kwargs,
        )
        self.output_format = output_format
        self.operation = operation


class MalformedResponseError(LeadsClientError):
    """Response document could not be parsed."""
    def __init__(self, message: str = "Malformed response document", **kwargs):
        super().__init__(message, code="malformed_response", **kwargs)


class TransportError(LeadsClientError):
    """Remote call failed at the HTTP or SOAP level."""
    def __init__(
        self,
        message: str = "Lead service call failed",
        status_code: Optional[int] = None,
        fault_code: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, code="transport_failure", **kwargs)
        self.status_code = status_code
        self.fault_code = fault_code
