import logging
from datetime import date, datetime

import pytest

from utils.errors import InvalidDateError


def _dates(instances):
    return [i.instance_date for i in instances]


def test_monthly_window_yields_base_then_occurrence(recurring, make_tx):
    # Arrange
    tx = make_tx(id=36, date="2025-06-09", recurring_interval="monthly")

    # Act
    result = recurring.expand(tx, "2025-06-01", "2025-06-30")

    # Assert
    assert len(result) == 2, "Expected the base instance plus one June occurrence"
    base, occurrence = result
    assert base.is_recurring_instance is False
    assert base.instance_date == "2025-06-09"
    assert occurrence.is_recurring_instance is True
    assert occurrence.instance_date == "2025-06-09"
    assert occurrence.id == 36 and occurrence.title == tx.title


def test_include_base_false_leaves_only_occurrences(recurring, make_tx):
    tx = make_tx(date="2025-06-09")

    result = recurring.expand(tx, "2025-06-01", "2025-08-31", include_base=False)

    assert _dates(result) == ["2025-06-09", "2025-07-09", "2025-08-09"]
    assert all(i.is_recurring_instance for i in result)


def test_yearly_occurrence_on_last_day_of_window(recurring, make_tx):
    tx = make_tx(date="2024-12-31", recurring_interval="yearly")

    result = recurring.expand(tx, "2026-01-01", "2026-12-31")

    occurrences = [i for i in result if i.is_recurring_instance]
    assert _dates(occurrences) == ["2026-12-31"], "Window end must be inclusive"
    assert result[0].instance_date == "2024-12-31", "Base instance keeps the anchor date"


def test_window_start_is_inclusive(recurring, make_tx):
    tx = make_tx(date="2025-01-15")

    result = recurring.expand(tx, "2025-03-15", "2025-04-14", include_base=False)

    assert _dates(result) == ["2025-03-15"]


def test_end_date_before_anchor_yields_no_occurrences(recurring, make_tx):
    tx = make_tx(date="2025-06-09", recurring_end_date="2025-05-01")

    result = recurring.expand(tx, "2025-01-01", "2025-12-31")

    assert len(result) == 1
    assert result[0].is_recurring_instance is False


def test_end_date_stops_generation(recurring, make_tx):
    tx = make_tx(date="2025-06-01", recurring_interval="daily", recurring_end_date="2025-06-03")

    result = recurring.expand(tx, "2025-06-01", "2025-06-30", include_base=False)

    assert _dates(result) == ["2025-06-01", "2025-06-02", "2025-06-03"]


def test_monthly_on_31st_clamps_and_recovers(recurring, make_tx):
    tx = make_tx(date="2025-01-31")

    result = recurring.expand(tx, "2025-01-01", "2025-05-31", include_base=False)

    assert _dates(result) == [
        "2025-01-31", "2025-02-28", "2025-03-31", "2025-04-30", "2025-05-31",
    ]


def test_weekly_fast_forwards_to_window(recurring, make_tx):
    # Arrange: anchor is a Monday two weeks before the window
    tx = make_tx(date="2025-06-02", recurring_interval="weekly")

    # Act
    result = recurring.expand(tx, "2025-06-10", "2025-06-30", include_base=False)

    # Assert
    assert _dates(result) == ["2025-06-16", "2025-06-23", "2025-06-30"]


def test_window_before_anchor_yields_no_occurrences(recurring, make_tx):
    tx = make_tx(date="2025-06-09")

    result = recurring.expand(tx, "2025-01-01", "2025-05-31", include_base=False)

    assert result == []


def test_non_recurring_yields_one_instance_whatever_the_window(recurring, make_tx):
    tx = make_tx(is_recurring=False, recurring_interval=None, date="2025-01-01")

    result = recurring.expand(tx, "2025-06-01", "2025-06-30")

    assert len(result) == 1
    assert result[0].instance_date == "2025-01-01"
    assert result[0].is_recurring_instance is False


def test_unknown_interval_yields_anchor_once_and_warns(recurring, make_tx, caplog):
    caplog.set_level(logging.WARNING)
    tx = make_tx(recurring_interval="fortnightly")

    result = recurring.expand(tx, "2025-01-01", "2025-12-31", include_base=False)

    assert _dates(result) == ["2025-06-09"]
    assert "Unknown recurring interval" in caplog.text


def test_window_bounds_accept_date_and_datetime(recurring, make_tx):
    tx = make_tx()

    a = recurring.expand(tx, date(2025, 7, 1), date(2025, 7, 31))
    b = recurring.expand(tx, datetime(2025, 7, 1, 8), datetime(2025, 7, 31, 23, 59))

    assert _dates(a) == _dates(b) == ["2025-06-09", "2025-07-09"]


def test_invalid_inputs_raise(recurring, make_tx):
    with pytest.raises(InvalidDateError):
        recurring.expand(make_tx(), "not-a-date", "2025-06-30")
    with pytest.raises(InvalidDateError):
        recurring.expand(make_tx(date="2025-02-30"), "2025-06-01", "2025-06-30")


def test_instances_are_copies_of_the_template(recurring, make_tx):
    tx = make_tx()

    result = recurring.expand(tx, "2025-06-01", "2025-07-31")
    result[1].is_paid = True

    assert tx.is_paid is False, "Mutating an instance must not touch the template"
    assert result[2].is_paid is False


def test_expand_all_keeps_input_order(recurring, make_tx):
    first = make_tx(id=1, title="B", date="2025-06-20")
    second = make_tx(id=2, title="A", date="2025-06-01")

    result = recurring.expand_all([first, second], "2025-06-01", "2025-06-30", include_base=False)

    assert [i.id for i in result] == [1, 2]


def test_next_occurrence_is_strictly_after(recurring, make_tx):
    tx = make_tx(date="2025-06-09")

    assert recurring.next_occurrence(tx, date(2025, 6, 9)) == date(2025, 7, 9)
    assert recurring.next_occurrence(tx, date(2025, 6, 1)) == date(2025, 6, 9)
    assert recurring.next_occurrence(tx, date(2025, 12, 31)) == date(2026, 1, 9)


@pytest.mark.parametrize("interval, anchor, expected", [
    ("daily", "9999-12-30", ["9999-12-30", "9999-12-31"]),
    ("weekly", "9999-12-03", ["9999-12-03", "9999-12-10", "9999-12-17", "9999-12-24", "9999-12-31"]),
    ("monthly", "9999-12-01", ["9999-12-01"]),
    ("yearly", "9998-12-31", ["9999-12-31"]),
])
def test_expansion_stops_at_last_representable_date(recurring, make_tx, interval, anchor, expected):
    # Arrange
    tx = make_tx(date=anchor, recurring_interval=interval)

    # Act
    result = recurring.expand(tx, "9999-12-01", "9999-12-31", include_base=False)

    # Assert
    assert _dates(result) == expected, "Expansion must end cleanly at 9999-12-31"


def test_next_occurrence_near_last_representable_date(recurring, make_tx):
    monthly = make_tx(date="9999-11-15")
    daily = make_tx(date="9999-12-01", recurring_interval="daily")

    assert recurring.next_occurrence(monthly, date(9999, 11, 20)) == date(9999, 12, 15)
    assert recurring.next_occurrence(monthly, date(9999, 12, 20)) is None
    assert recurring.next_occurrence(daily, date(9999, 12, 31)) is None


def test_next_occurrence_none_when_finished_or_one_off(recurring, make_tx):
    ended = make_tx(date="2025-01-09", recurring_end_date="2025-03-09")
    one_off = make_tx(is_recurring=False, recurring_interval=None)

    assert recurring.next_occurrence(ended, date(2025, 3, 9)) is None
    assert recurring.next_occurrence(one_off, date(2025, 1, 1)) is None
