from typing import List, Optional, Tuple

import pytest

from websolve_leads.core.config import Settings
from websolve_leads.core.logging import configure_structlog
from websolve_leads.services.client import LeadsClient
from websolve_leads.services.schema_index import load_schema

SCHEMA_XML = """<?xml version="1.0" encoding="UTF-8"?>
<lead_headers>
  <automotive_leads>
    <email><name>email</name><type_name>VARCHAR</type_name><length>50</length></email>
    <source><name>source</name><type_name>VARCHAR</type_name><length>20</length></source>
    <mileage><name>mileage</name><type_name>INT</type_name><length>7</length></mileage>
    <remarks><name>remarks</name><type_name>TEXT</type_name></remarks>
    <lead_date><name>lead_date</name><type_name>DATE</type_name></lead_date>
    <appointment><name>appointment</name><type_name>DATETIME</type_name></appointment>
    <fuel>
      <name>fuel</name>
      <type_name>ENUM</type_name>
      <values><value>petrol</value><value>diesel</value><value>Electric</value></values>
    </fuel>
    <tpson_flag>
      <name>tpson_flag</name>
      <type_name>ENUM</type_name>
      <values><value>Y</value><value>N</value></values>
    </tpson_flag>
  </automotive_leads>
  <automotive_leads_info_customer>
    <phone><name>phone</name><type_name>VARCHAR</type_name><length>10</length></phone>
    <source><name>source</name><type_name>VARCHAR</type_name><length>20</length></source>
    <firstname><name>firstname</name><type_name>VARCHAR</type_name><length>30</length></firstname>
    <birthdate><name>birthdate</name><type_name>DATE</type_name></birthdate>
    <gender><name>gender</name><type_name>ENUM</type_name><values>M,F</values></gender>
  </automotive_leads_info_customer>
</lead_headers>
"""

CREATED_RESPONSE = """<?xml version="1.0" encoding="UTF-8"?>
<response>
  <request_status>request processed</request_status>
  <created>1</created>
  <returnID>42</returnID>
</response>
"""

REJECTED_RESPONSE = """<?xml version="1.0" encoding="UTF-8"?>
<response>
  <request_status>request processed</request_status>
  <created>0</created>
  <returnID>0</returnID>
</response>
"""

STATUS_RESPONSE = """<?xml version="1.0" encoding="UTF-8"?>
<lead>
  <refID>42</refID>
  <status>
    <code>3</code>
    <description>In progress</description>
  </status>
</lead>
"""


class FakeTransport:
    """In-memory lead service recording every call."""

    def __init__(
        self,
        schema: str = SCHEMA_XML,
        response: str = CREATED_RESPONSE,
        status: str = STATUS_RESPONSE,
        error: Optional[Exception] = None,
    ) -> None:
        self.schema = schema
        self.response = response
        self.status = status
        self.error = error
        self.schema_calls: List[str] = []
        self.submissions: List[Tuple[str, str]] = []
        self.status_calls: List[Tuple[str, str]] = []

    def fetch_schema(self, provider_code: str) -> str:
        self.schema_calls.append(provider_code)
        if self.error is not None:
            raise self.error
        return self.schema

    def submit(self, provider_code: str, document: str) -> str:
        self.submissions.append((provider_code, document))
        if self.error is not None:
            raise self.error
        return self.response

    def fetch_lead_status(self, provider_code: str, reference_id: str) -> str:
        self.status_calls.append((provider_code, reference_id))
        if self.error is not None:
            raise self.error
        return self.status


@pytest.fixture(autouse=True, scope="session")
def structlog_to_stderr():
    configure_structlog(level="DEBUG", log_format="console")


@pytest.fixture
def schema():
    return load_schema(SCHEMA_XML)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return LeadsClient(transport, Settings(_env_file=None, LEADS_PROVIDER_CODE=None))
