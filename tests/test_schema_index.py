import threading
import time

import pytest

from websolve_leads.core.exceptions import SchemaUnavailableError, TransportError
from websolve_leads.services.schema_index import SchemaIndex, load_schema

from tests.conftest import SCHEMA_XML


def test_load_schema_groups(schema):
    assert set(schema.fields("lead")) == {
        "email", "source", "mileage", "remarks", "lead_date", "appointment", "fuel", "tpson_flag",
    }
    assert set(schema.fields("customer")) == {"phone", "source", "firstname", "birthdate", "gender"}
    assert schema.is_complete()


def test_lookup_field_spec(schema):
    email = schema.lookup("lead", "email")
    assert email.group == "lead"
    assert email.type_name == "VARCHAR"
    assert email.length == 50

    remarks = schema.lookup("lead", "remarks")
    assert remarks.length is None

    fuel = schema.lookup("lead", "fuel")
    assert fuel.allowed_values == frozenset({"petrol", "diesel", "Electric"})

    gender = schema.lookup("customer", "gender")
    assert gender.allowed_values == frozenset({"M", "F"})


def test_lookup_absent(schema):
    assert schema.lookup("lead", "phone") is None
    assert schema.lookup("customer", "unknown") is None
    assert schema.lookup("vehicle", "email") is None


def test_field_spec_is_immutable(schema):
    with pytest.raises(AttributeError):
        schema.lookup("lead", "email").length = 10
    with pytest.raises(TypeError):
        schema.fields("lead")["email"] = None


def test_load_schema_malformed():
    with pytest.raises(SchemaUnavailableError) as exc_info:
        load_schema("<lead_headers><automotive_leads>")
    assert exc_info.value.code == "schema_unavailable"


def test_load_schema_empty_group():
    raw = """<lead_headers>
      <automotive_leads>
        <email><type_name>VARCHAR</type_name><length>50</length></email>
      </automotive_leads>
      <automotive_leads_info_customer/>
    </lead_headers>"""
    with pytest.raises(SchemaUnavailableError) as exc_info:
        load_schema(raw)
    assert exc_info.value.details == {"lead": 1, "customer": 0}


def test_load_schema_name_defaults_to_tag():
    raw = """<lead_headers>
      <automotive_leads><email><type_name>varchar</type_name><length>x</length></email></automotive_leads>
      <automotive_leads_info_customer><phone><type_name>VARCHAR</type_name></phone></automotive_leads_info_customer>
    </lead_headers>"""
    spec = load_schema(raw).lookup("lead", "email")
    assert spec.name == "email"
    assert spec.type_name == "VARCHAR"
    assert spec.length is None


def test_schema_index_caches_per_provider_code():
    calls = []

    def fetch(code):
        calls.append(code)
        return SCHEMA_XML

    index = SchemaIndex()
    first = index.get("ABC", fetch)
    second = index.get("ABC", fetch)
    assert first is second
    assert calls == ["ABC"]

    index.get("XYZ", fetch)
    assert calls == ["ABC", "XYZ"]
    assert index.cached("ABC") is first


def test_schema_index_refresh_and_clear():
    calls = []

    def fetch(code):
        calls.append(code)
        return SCHEMA_XML

    index = SchemaIndex()
    first = index.get("ABC", fetch)
    refreshed = index.get("ABC", fetch, refresh=True)
    assert refreshed is not first
    assert calls == ["ABC", "ABC"]

    index.clear("ABC")
    assert index.cached("ABC") is None
    index.get("ABC", fetch)
    assert len(calls) == 3

    index.clear()
    assert index.cached("ABC") is None


def test_schema_index_fetch_failure():
    def fetch(code):
        raise TransportError("connection refused")

    index = SchemaIndex()
    with pytest.raises(SchemaUnavailableError) as exc_info:
        index.get("ABC", fetch)
    assert isinstance(exc_info.value.__cause__, TransportError)
    assert index.cached("ABC") is None


def test_schema_index_coalesces_concurrent_loads():
    calls = []

    def fetch(code):
        calls.append(code)
        time.sleep(0.05)
        return SCHEMA_XML

    index = SchemaIndex()
    results = []
    threads = [threading.Thread(target=lambda: results.append(index.get("ABC", fetch))) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert calls == ["ABC"]
    assert len({id(entry) for entry in results}) == 1
