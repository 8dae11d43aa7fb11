from datetime import date, datetime

import pytest

from websolve_leads.services.field_validator import parse_timestamp, validate
from websolve_leads.services.schema_index import FieldSpec


def _spec(type_name, name="field", length=None, values=()):
    return FieldSpec(
        group="lead",
        name=name,
        type_name=type_name,
        length=length,
        allowed_values=frozenset(values),
    )


def test_validate_text_trims():
    spec = _spec("VARCHAR", length=50)
    assert validate(" a@b.com ", spec) == "a@b.com"
    assert validate("\tplain\n", _spec("TEXT")) == "plain"
    assert validate(12345, _spec("INT", length=7)) == "12345"


def test_validate_text_truncates_to_length():
    spec = _spec("VARCHAR", length=10)
    result = validate("  0031612345678901 ", spec)
    assert result == "0031612345"
    assert len(result) == spec.length
    assert "0031612345678901".startswith(result)


@pytest.mark.parametrize("type_name", ["INT", "TEXT", "VARCHAR"])
def test_validate_text_truncation_is_prefix(type_name):
    spec = _spec(type_name, length=4)
    for raw in ["abcdefgh", "  123456789  ", "x y z w v"]:
        result = validate(raw, spec)
        assert len(result) == 4
        assert raw.strip().startswith(result)


def test_validate_text_empty_is_invalid():
    spec = _spec("VARCHAR", length=10)
    assert validate("", spec) is None
    assert validate("    ", spec) is None
    assert validate(None, spec) is None


def test_validate_text_zero_is_kept():
    assert validate("0", _spec("INT", length=3)) == "0"


def test_validate_date():
    spec = _spec("DATE")
    assert validate("2024-01-15", spec) == "2024-01-15"
    assert validate("2024-01-15 13:45:00", spec) == "2024-01-15"
    assert validate("15-01-2024", spec) == "2024-01-15"
    assert validate("01/15/2024", spec) == "2024-01-15"
    assert validate(date(2023, 12, 31), spec) == "2023-12-31"
    assert validate(datetime(2023, 12, 31, 23, 59), spec) == "2023-12-31"


def test_validate_date_invalid():
    spec = _spec("DATE")
    assert validate("not a date", spec) is None
    assert validate("2024-13-45", spec) is None
    assert validate("", spec) is None


def test_validate_datetime():
    spec = _spec("DATETIME")
    assert validate("2024-01-15T09:30:00", spec) == "2024-01-15 09:30:00"
    assert validate("2024-01-15", spec) == "2024-01-15 00:00:00"
    assert validate("15-01-2024 09:30", spec) == "2024-01-15 09:30:00"
    assert validate(datetime(2024, 1, 15, 9, 30, 5), spec) == "2024-01-15 09:30:05"
    assert validate(date(2024, 1, 15), spec) == "2024-01-15 00:00:00"
    assert validate("yesterday-ish", spec) is None


@pytest.mark.parametrize("type_name", ["DATE", "DATETIME"])
def test_validate_timestamps_idempotent(type_name):
    spec = _spec(type_name)
    for raw in ["2024-02-29", "29.02.2024 18:00", "March 3, 2021", datetime(2020, 5, 17, 8, 0, 1)]:
        once = validate(raw, spec)
        assert once is not None
        assert validate(once, spec) == once


def test_validate_enum_keeps_original_case():
    spec = _spec("ENUM", values=["petrol", "diesel", "Electric"])
    assert validate("petrol", spec) == "petrol"
    assert validate(" PETROL ", spec) == "PETROL"
    assert validate("Diesel", spec) == "Diesel"
    assert validate("electric", spec) == "electric"
    assert validate("eLeCtRiC", spec) == "eLeCtRiC"
    assert validate("hydrogen", spec) is None


def test_validate_enum_boolean_tpson_field():
    spec = _spec("ENUM", name="tpson_flag", values=["Y", "N"])
    assert validate(True, spec) == "Y"
    assert validate(False, spec) == "N"


def test_validate_enum_boolean_ignores_allowed_values_for_tpson():
    spec = _spec("ENUM", name="tpson_mail", values=["yes", "no"])
    assert validate(True, spec) == "Y"


def test_validate_enum_boolean_other_field():
    spec = _spec("ENUM", name="newsletter", values=["Y", "N"])
    assert validate(True, spec) is None


def test_validate_unknown_type():
    assert validate("value", _spec("BLOB")) is None
    assert validate("value", _spec("")) is None


def test_parse_timestamp():
    assert parse_timestamp("2024-01-15") == datetime(2024, 1, 15)
    assert parse_timestamp("  ") is None
    assert parse_timestamp("31 December 2022") == datetime(2022, 12, 31)


def test_validate_removes_characters_xml_forbids():
    assert validate("pasted\x0ctext", _spec("TEXT")) == "pastedtext"
    assert validate("\x01\x02", _spec("VARCHAR", length=10)) is None
    assert validate("\x0b\x0c", _spec("TEXT")) is None
    assert validate("line\r\nbreak\tkept", _spec("TEXT")) == "line\r\nbreak\tkept"


def test_validate_enum_removes_characters_xml_forbids():
    spec = _spec("ENUM", values=["petrol", "diesel"])
    assert validate("diesel\x00", spec) == "diesel"
    assert validate("\x1b", spec) is None


def test_validate_text_booleans():
    assert validate(True, _spec("INT", length=1)) == "1"
    assert validate(True, _spec("VARCHAR", length=10)) == "1"
    assert validate(False, _spec("TEXT")) is None
