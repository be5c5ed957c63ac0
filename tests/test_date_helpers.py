from datetime import date, datetime

import pytest

from utils.currency import format_currency, format_signed, parse_amount
from utils.date_helpers import (
    add_months, add_years, format_display_date, friendly_month, month_bounds,
    month_key, next_month, parse_date, prev_month, require_date, start_of_week,
)
from utils.errors import InvalidDateError, ValidationError


def test_month_key_ignores_day_and_time():
    assert month_key(date(2025, 6, 1)) == "2025-06"
    assert month_key(date(2025, 6, 30)) == "2025-06"
    assert month_key(datetime(2025, 6, 30, 23, 59)) == "2025-06"


def test_month_key_pads_month_and_year():
    assert month_key(date(987, 1, 5)) == "0987-01"


@pytest.mark.parametrize("start, n, expected", [
    (date(2025, 1, 31), 1, date(2025, 2, 28)),
    (date(2024, 1, 31), 1, date(2024, 2, 29)),
    (date(2025, 1, 31), 2, date(2025, 3, 31)),
    (date(2025, 11, 15), 3, date(2026, 2, 15)),
    (date(2025, 3, 31), -1, date(2025, 2, 28)),
])
def test_add_months_clamps_to_month_end(start, n, expected):
    assert add_months(start, n) == expected


def test_add_years_moves_leap_day_to_feb_28():
    assert add_years(date(2024, 2, 29), 1) == date(2025, 2, 28)
    assert add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)


def test_month_bounds_covers_whole_month():
    assert month_bounds("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds("2025-12") == (date(2025, 12, 1), date(2025, 12, 31))


def test_month_bounds_rejects_garbage():
    with pytest.raises(InvalidDateError):
        month_bounds("June")


def test_prev_and_next_month_cross_year_boundary():
    assert prev_month("2025-01") == "2024-12"
    assert next_month("2025-12") == "2026-01"


def test_require_date_accepts_date_datetime_and_iso_string():
    assert require_date(date(2025, 6, 9)) == date(2025, 6, 9)
    assert require_date(datetime(2025, 6, 9, 18, 30)) == date(2025, 6, 9)
    assert require_date("2025-06-09") == date(2025, 6, 9)


@pytest.mark.parametrize("bad", ["", "2025-13-01", "2025-02-30", "tomorrow", None, 20250609])
def test_require_date_raises_instead_of_defaulting(bad):
    with pytest.raises(InvalidDateError) as exc:
        require_date(bad, "start date")
    assert "start date" in str(exc.value)


def test_invalid_date_error_is_a_value_error():
    assert issubclass(InvalidDateError, ValidationError)
    assert issubclass(InvalidDateError, ValueError)


def test_parse_date_is_lenient():
    assert parse_date("2025/06/09") == date(2025, 6, 9)
    assert parse_date(" 2025-06-09 ") == date(2025, 6, 9)
    assert parse_date("garbage") is None
    assert parse_date("") is None


def test_start_of_week_is_monday():
    # Arrange: 2025-06-12 is a Thursday
    thursday = date(2025, 6, 12)

    # Act
    monday = start_of_week(thursday)

    # Assert
    assert monday == date(2025, 6, 9)
    assert start_of_week(monday) == monday


def test_display_helpers():
    assert format_display_date("2025-06-09") == "Jun 9, 2025"
    assert format_display_date("not a date") == "not a date"
    assert friendly_month("2026-02") == "February 2026"


def test_format_currency_uses_symbol_suffix():
    assert format_currency(1234.5) == "1,234.50 zł"
    assert format_currency(3, "$") == "3.00 $"
    assert format_signed(-12.5) == "-12.50 zł"
    assert format_signed(0) == "+0.00 zł"


@pytest.mark.parametrize("raw, expected", [
    ("1 234,50 zł", 1234.5),
    ("45.99", 45.99),
    (" 12 ", 12.0),
    (7, 7.0),
    (2.5, 2.5),
])
def test_parse_amount_accepts_typed_input(raw, expected):
    assert parse_amount(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["abc", "", None, True])
def test_parse_amount_rejects_non_numbers(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)


@pytest.mark.parametrize("raw", ["-50", "- 12,00 zł", float("nan"), float("inf"), float("-inf")])
def test_parse_amount_rejects_negative_text_and_non_finite(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)
