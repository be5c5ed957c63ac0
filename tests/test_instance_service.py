import logging
from datetime import date

import pytest


@pytest.fixture
def household(add_tx):
    """A monthly rent, a June grocery run and a July doctor visit."""
    rent = add_tx("Rent", 1500, "2025-06-09", is_recurring=True, recurring_interval="monthly")
    groceries = add_tx("Groceries", 300, "2025-06-15", category="Food")
    doctor = add_tx("Doctor", 120, "2025-07-03", category="Health")
    return rent, groceries, doctor


def _titles(items):
    return [i.title for i in items]


def test_for_month_lists_each_occurrence_once_in_date_order(instances, household):
    june = instances.for_month("2025-06")
    july = instances.for_month("2025-07")

    assert _titles(june) == ["Rent", "Groceries"], "Base instance must not double-count rent"
    assert _titles(july) == ["Doctor", "Rent"]
    assert [i.instance_date for i in july] == ["2025-07-03", "2025-07-09"]


def test_for_month_before_anything_starts_is_empty(instances, household):
    assert instances.for_month("2025-05") == []


def test_by_day_groups_on_day_of_month(instances, household):
    days = instances.by_day("2025-06")

    assert sorted(days) == [9, 15]
    assert _titles(days[9]) == ["Rent"]


def test_toggle_paid_on_recurring_affects_one_month(instances, tx_dao, household):
    # Arrange
    rent = household[0]
    june_rent = instances.for_month("2025-06")[0]

    # Act
    new_value = instances.toggle_paid(june_rent)

    # Assert
    assert new_value is True
    assert instances.for_month("2025-06")[0].is_paid is True
    july_rent = [i for i in instances.for_month("2025-07") if i.id == rent.id][0]
    assert july_rent.is_paid is False
    assert tx_dao.get_by_id(rent.id).is_paid is False, "Template must stay untouched"


def test_toggle_paid_twice_returns_to_unpaid(instances, household):
    june_rent = instances.for_month("2025-06")[0]
    instances.toggle_paid(june_rent)

    paid_rent = instances.for_month("2025-06")[0]
    assert instances.toggle_paid(paid_rent) is False
    assert instances.for_month("2025-06")[0].is_paid is False


def test_toggle_paid_on_one_off_updates_record(instances, tx_dao, household):
    groceries = household[1]
    inst = instances.for_month("2025-06")[1]

    instances.toggle_paid(inst)

    assert tx_dao.get_by_id(groceries.id).is_paid is True


def test_delete_occurrence_skips_one_month(instances, tx_dao, household):
    rent = household[0]
    june_rent = instances.for_month("2025-06")[0]

    instances.delete_occurrence(june_rent)

    assert _titles(instances.for_month("2025-06")) == ["Groceries"]
    assert "Rent" in _titles(instances.for_month("2025-07"))
    assert tx_dao.get_by_id(rent.id) is not None
    assert instances.skipped_count("2025-06") == 1
    assert instances.skipped_count("2025-07") == 0


def test_delete_occurrence_removes_one_off_record(instances, tx_dao, household):
    groceries = household[1]
    inst = instances.for_month("2025-06")[1]

    instances.delete_occurrence(inst)

    assert tx_dao.get_by_id(groceries.id) is None


def test_upcoming_is_bounded_both_ways(instances, household):
    result = instances.upcoming(date(2025, 6, 10), date(2025, 7, 5))

    assert [(i.title, i.instance_date) for i in result] == [
        ("Groceries", "2025-06-15"),
        ("Doctor", "2025-07-03"),
    ]


def test_weekly_occurrences_fill_the_month(instances, add_tx):
    add_tx("Cleaning", 80, "2025-06-02", is_recurring=True, recurring_interval="weekly")

    june = instances.for_month("2025-06")

    assert [i.instance_date[-2:] for i in june] == ["02", "09", "16", "23", "30"]


def test_broken_stored_date_is_skipped_not_misfiled(instances, db, household, caplog):
    # Arrange: a row written by something other than the service layer
    caplog.set_level(logging.WARNING)
    conn = db.get_connection()
    conn.execute(
        """INSERT INTO transactions(title, amount, date, is_expense, category_id, person_label,
                                    is_recurring, recurring_interval)
           VALUES ('Broken', 10, '2025-06-31', 1, 1, 'Together', 1, 'monthly')"""
    )
    conn.commit()

    # Act
    june = instances.for_month("2025-06")

    # Assert
    assert "Broken" not in _titles(june)
    assert "Skipping transaction" in caplog.text
