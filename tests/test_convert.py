from datetime import date

import pytest

from tourism_api.convert import age, get_role_int, parse_uint, string_to_int


@pytest.mark.parametrize(
    "text, expected",
    [("42", 42), ("-7", -7), ("+5", 5), ("0", 0)],
)
def test_string_to_int_valid(text, expected):
    assert string_to_int(text) == expected


@pytest.mark.parametrize(
    "text",
    ["", "abc", " 7", "7 ", "1.5", "1_000", "9223372036854775808", "\u0663"],
)
def test_string_to_int_invalid_is_zero(text):
    assert string_to_int(text) == 0


def test_string_to_int_upper_bound():
    assert string_to_int("9223372036854775807") == 9223372036854775807


def test_parse_uint_max_value():
    assert parse_uint("18446744073709551615") == 18446744073709551615


@pytest.mark.parametrize(
    "text", ["", "-1", "+1", "x", "18446744073709551616", "1e3"]
)
def test_parse_uint_invalid_is_zero(text):
    assert parse_uint(text) == 0


def test_parse_uint_plain_number():
    assert parse_uint("17") == 17


def test_get_role_int_reads_environment(monkeypatch):
    monkeypatch.setenv("ADMIN", "1")
    monkeypatch.setenv("TOURIS", "2")
    assert get_role_int("ADMIN") == 1
    assert get_role_int("TOURIS") == 2


def test_get_role_int_missing_or_invalid(monkeypatch):
    monkeypatch.delenv("ROLE_MISSING", raising=False)
    monkeypatch.setenv("ROLE_TEXT", "admin")
    assert get_role_int("ROLE_MISSING") == 0
    assert get_role_int("ROLE_TEXT") == 0


def test_get_role_int_clamps_overflow(monkeypatch):
    monkeypatch.setenv("ROLE_BIG", "99999999999999999999")
    assert get_role_int("ROLE_BIG") == 9223372036854775807


def test_age_counts_years():
    today = date.today()
    assert age(f"{today.year - 30:04d}-01-01") == 30


@pytest.mark.parametrize(
    "text", ["", "2020-1-05", "2020-13-01", "2020-02-30", "not a date"]
)
def test_age_invalid_date_counts_from_year_one(text):
    assert age(text) == date.today().year - 1