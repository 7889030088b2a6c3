"""Tests for rulecheck.cast module."""

from datetime import date, datetime, timedelta, timezone

import pytest

from rulecheck.cast import (
    comparable,
    is_integer,
    is_numeric,
    parse_date,
    parse_date_with_format,
    stringify,
    to_number,
    to_strptime_format,
)


def test_is_numeric():
    """Test numbers and numeric strings are numeric, booleans are not."""
    assert is_numeric(5)
    assert is_numeric(2.5)
    assert is_numeric("-3.5")
    assert is_numeric(" 1e3 ")
    assert not is_numeric("abc")
    assert not is_numeric("")
    assert not is_numeric(True)
    assert not is_numeric(None)


def test_is_integer():
    """Test integer detection."""
    assert is_integer(3)
    assert is_integer("-12")
    assert is_integer(4.0)
    assert not is_integer("12.5")
    assert not is_integer("012")
    assert not is_integer(False)


def test_to_number():
    """Test numeric casting keeps ints integral."""
    assert to_number("10") == 10
    assert isinstance(to_number("10"), int)
    assert to_number("2.5") == 2.5
    assert isinstance(to_number(3.0), float)


def test_to_number_invalid():
    """Test non-numeric values raise ValueError."""
    with pytest.raises(ValueError):
        to_number("ten")


def test_stringify():
    """Test scalars render the way parameters are compared."""
    assert stringify(True) == "1"
    assert stringify(False) == ""
    assert stringify(None) == ""
    assert stringify(5.0) == "5"
    assert stringify(5.5) == "5.5"
    assert stringify("x") == "x"


def test_parse_date():
    """Test free-form and relative dates."""
    assert parse_date("2024-01-15") == datetime(2024, 1, 15)
    assert parse_date(date(2024, 1, 15)) == datetime(2024, 1, 15)
    assert parse_date("tomorrow").date() == date.today() + timedelta(days=1)
    assert parse_date("not a date") is None
    assert parse_date(None) is None
    assert parse_date(20240115) is None


def test_to_strptime_format():
    """Test date-format tokens translate to strptime directives."""
    assert to_strptime_format("Y-m-d") == "%Y-%m-%d"
    assert to_strptime_format("d/m/Y H:i") == "%d/%m/%Y %H:%M"
    assert to_strptime_format("%Y") == "%Y"
    assert to_strptime_format("Y\\m") == "%Ym"


def test_parse_date_with_format():
    """Test formatted parsing is exact."""
    assert parse_date_with_format("15/01/2024", "d/m/Y") == datetime(2024, 1, 15)
    assert parse_date_with_format("2024-01-15", "d/m/Y") is None
    assert parse_date_with_format(15, "d/m/Y") is None


def test_comparable_mixed_awareness():
    """Test aware and naive datetimes become comparable."""
    aware = datetime(2024, 1, 1, 12, tzinfo=timezone(timedelta(hours=2)))
    naive = datetime(2024, 1, 1, 11)

    first, second = comparable(aware, naive)

    assert first == datetime(2024, 1, 1, 10)
    assert first < second
