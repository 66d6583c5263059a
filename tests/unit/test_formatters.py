"""Tests for display formatting helpers."""

from datetime import date

import pytest

from efecos.utils.formatters import (
    format_currency,
    format_date,
    format_distance,
    format_fuel_consumption,
    format_number,
    format_percentage,
    plain_number,
)


def test_format_currency():
    assert format_currency(1234.5) == "E1,234.50"
    assert format_currency(3, "R") == "R3.00"


def test_format_number():
    assert format_number(1234567) == "1,234,567"
    assert format_number(12.345, 1) == "12.3"


def test_format_percentage():
    assert format_percentage(1, 4) == "25.0%"
    assert format_percentage(5, 0) == "0%"


@pytest.mark.parametrize("km, text", [(0.25, "250m"), (12.34, "12.3km")])
def test_format_distance(km, text):
    assert format_distance(km) == text


def test_format_fuel_consumption():
    assert format_fuel_consumption(12, 100) == "12.0 L/100km"
    assert format_fuel_consumption(12, 0) == "0 L/100km"


def test_format_date():
    assert format_date(date(2026, 10, 9)) == "Oct 9, 2026"


@pytest.mark.parametrize(
    "value, text", [(12.0, "12"), (0, "0"), (18.5, "18.5"), (0.1 + 0.2, "0.30000000000000004")]
)
def test_plain_number(value, text):
    assert plain_number(value) == text
