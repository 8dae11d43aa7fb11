# websolve_leads/services/transport.py
from __future__ import annotations

import time
import xml.etree.ElementTree as ET
from typing import Any, Optional, Protocol

import httpx

from websolve_leads.core.config import Settings, settings as default_settings
from websolve_leads.core.exceptions import TransportError
from websolve_leads.core.logging import get_structlog_logger

logger = get_structlog_logger(__name__)

SOAP_ENV = "http://schemas.xmlsoap.org/soap/envelope/"


class LeadTransport(Protocol):
    """Remote lead service operations used by the client."""

    def fetch_schema(self, provider_code: str) -> str: ...

    def submit(self, provider_code: str, document: str) -> str: ...

    def fetch_lead_status(self, provider_code: str, reference_id: str) -> str: ...


def build_envelope(operation: str, namespace: str, *params: Any) -> bytes:
    """SOAP 1.1 RPC envelope with positional param0..paramN arguments."""
    envelope = ET.Element(f"{{{SOAP_ENV}}}Envelope")
    body = ET.SubElement(envelope, f"{{{SOAP_ENV}}}Body")
    call = ET.SubElement(body, f"{{{namespace}}}{operation}")
    for index, param in enumerate(params):
        ET.SubElement(call, f"param{index}").text = str(param)
    return ET.tostring(envelope, encoding="utf-8", xml_declaration=True)


def parse_envelope(content: bytes, operation: str) -> str:
    """Return value of an RPC response envelope; raises TransportError on faults."""
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise TransportError(
            f"{operation} returned an unreadable SOAP envelope",
            details={"error": str(exc)},
        ) from exc

    body = root.find(f"{{{SOAP_ENV}}}Body")
    if body is None:
        raise TransportError(f"{operation} response has no SOAP body")

    fault = body.find(f"{{{SOAP_ENV}}}Fault")
    if fault is not None:
        fault_code = (fault.findtext("faultcode") or "").strip() or None
        fault_string = (fault.findtext("faultstring") or "").strip() or "SOAP fault"
        raise TransportError(
            f"{operation} failed: {fault_string}",
            fault_code=fault_code,
            details={"faultcode": fault_code, "faultstring": fault_string},
        )

    response = next(iter(body), None)
    result = next(iter(response), None) if response is not None else None
    if result is None:
        raise TransportError(f"{operation} response carries no return value")
    return result.text or ""


class HttpSoapTransport:
    """Lead service SOAP client over httpx."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.config = config or default_settings
        self.endpoint = self.config.endpoint()
        self.namespace = self.config.soap_namespace
        self._client = client or self._build_client()

    def _build_client(self) -> httpx.Client:
        auth = None
        if self.config.login:
            auth = httpx.BasicAuth(self.config.login, self.config.password or "")
        return httpx.Client(
            timeout=self.config.request_timeout,
            headers={"User-Agent": self.config.user_agent},
            auth=auth,
            proxy=self.config.proxy_url,
            verify=self.config.verify_ssl,
        )

    def call(self, operation: str, *params: Any) -> str:
        headers = {
            "Content-Type": "text/xml; charset=utf-8",
            "SOAPAction": f'"{self.namespace}#{operation}"',
        }
        start = time.monotonic()
        try:
            response = self._client.post(
                self.endpoint,
                content=build_envelope(operation, self.namespace, *params),
                headers=headers,
            )
        except httpx.HTTPError as exc:
            logger.error("transport.request_failed", operation=operation, error=str(exc))
            raise TransportError(
                f"{operation} request failed: {exc}",
                details={"endpoint": self.endpoint},
            ) from exc

        logger.info(
            "transport.response",
            operation=operation,
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - start) * 1000, 1),
        )

        if response.status_code >= 400:
            # SOAP faults are delivered with HTTP 500
            try:
                parse_envelope(response.content, operation)
            except TransportError as exc:
                if exc.fault_code is not None:
                    exc.status_code = response.status_code
                    logger.warning("transport.fault", operation=operation, fault_code=exc.fault_code)
                    raise
            raise TransportError(
                f"{operation} returned HTTP {response.status_code}",
                status_code=response.status_code,
                details={"body": response.text[:200]},
            )

        return parse_envelope(response.content, operation)

    def fetch_schema(self, provider_code: str) -> str:
        return self.call("getLeadHeaders", provider_code)

    def submit(self, provider_code: str, document: str) -> str:
        return self.call("setLead", provider_code, document)

    def fetch_lead_status(self, provider_code: str, reference_id: str) -> str:
        return self.call("getLead", provider_code, reference_id)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpSoapTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
