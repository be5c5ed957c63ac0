import logging

import pytest

from models.monthly_override import MonthlyOverride
from services.override_service import OverrideService, parse_bool
from utils.errors import InvalidDateError


@pytest.fixture
def svc(memory_store):
    return OverrideService(memory_store)


@pytest.mark.parametrize("raw, expected", [
    ("true", True), ("TRUE", True), ("1", True), ("yes", True),
    ("false", False), ("0", False), (" No ", False),
    (None, None), ("", None), ("maybe", None),
])
def test_parse_bool(raw, expected):
    assert parse_bool(raw) is expected


def test_deleted_month_hides_only_that_month(svc, memory_store, recurring, make_tx):
    # Arrange
    tx = make_tx(id=36, date="2025-06-09")
    memory_store.set("deleted_36_2025-06", "true")

    # Act
    june = svc.resolve(recurring.expand(tx, "2025-06-01", "2025-06-30"))
    july = svc.resolve(recurring.expand(tx, "2025-07-01", "2025-07-31"))

    # Assert
    assert june == [], "Both base and occurrence fall in the deleted month"
    assert [i.instance_date for i in july] == ["2025-07-09"]


def test_paid_override_applies_to_its_month_only(svc, memory_store, recurring, make_tx):
    tx = make_tx(id=36, is_paid=False)
    memory_store.set("paid_36_2025-06", "true")

    june = svc.resolve(recurring.expand(tx, "2025-06-01", "2025-06-30", include_base=False))
    july = svc.resolve(recurring.expand(tx, "2025-07-01", "2025-07-31", include_base=False))

    assert [i.is_paid for i in june] == [True]
    assert [i.is_paid for i in july] == [False]


def test_explicit_false_overrides_paid_template(svc, recurring, make_tx):
    tx = make_tx(is_paid=True)
    svc.set_paid_for_month(tx.id, "2025-07-09", False)

    july = svc.resolve(recurring.expand(tx, "2025-07-01", "2025-07-31", include_base=False))

    assert july[0].is_paid is False


def test_deletion_beats_paid(svc, memory_store, recurring, make_tx):
    tx = make_tx(id=36)
    memory_store.set("paid_36_2025-06", "true")
    memory_store.set("deleted_36_2025-06", "true")

    result = svc.resolve(recurring.expand(tx, "2025-06-01", "2025-06-30"))

    assert result == []


def test_resolve_is_idempotent_and_pure(svc, memory_store, recurring, make_tx):
    # Arrange
    tx = make_tx(id=36)
    memory_store.set("paid_36_2025-07", "true")
    memory_store.set("deleted_36_2025-08", "true")
    expanded = recurring.expand(tx, "2025-06-01", "2025-09-30")

    # Act
    once = svc.resolve(expanded)
    twice = svc.resolve(once)

    # Assert
    assert once == twice
    assert [i.instance_date for i in once] == ["2025-06-09", "2025-06-09", "2025-07-09", "2025-09-09"]
    assert all(not i.is_paid for i in expanded), "Input instances must not be modified"


def test_non_recurring_instances_pass_through(svc, memory_store, recurring, make_tx):
    tx = make_tx(id=36, is_recurring=False, recurring_interval=None)
    memory_store.set("deleted_36_2025-06", "true")
    memory_store.set("paid_36_2025-06", "true")

    result = svc.resolve(recurring.expand(tx, "2025-06-01", "2025-06-30"))

    assert len(result) == 1 and result[0].is_paid is False


def test_malformed_values_count_as_absent(svc, memory_store, recurring, make_tx, caplog):
    caplog.set_level(logging.WARNING)
    tx = make_tx(id=36)
    memory_store.set("paid_36_2025-06", "maybe")
    memory_store.set("deleted_36_2025-06", "garbage")

    result = svc.resolve(recurring.expand(tx, "2025-06-01", "2025-06-30", include_base=False))

    assert len(result) == 1
    assert result[0].is_paid is False
    assert "malformed override" in caplog.text


def test_set_and_clear_paid(svc, memory_store):
    svc.set_paid_for_month(36, "2025-06-09", True)
    assert memory_store.get("paid_36_2025-06") == "true"
    assert svc.get_paid_for_month(36, "2025-06") is True

    svc.set_paid_for_month(36, "2025-06-20", False)
    assert memory_store.get("paid_36_2025-06") == "false"
    assert svc.get_paid_for_month(36, "2025-06-01") is False

    svc.clear_paid_for_month(36, "2025-06")
    assert svc.get_paid_for_month(36, "2025-06") is None


def test_delete_and_restore_month(svc, memory_store):
    svc.delete_for_month(36, "2025-06")
    assert memory_store.get("deleted_36_2025-06") == "true"
    assert svc.is_deleted_for_month(36, "2025-06-30") is True

    svc.restore_for_month(36, "2025-06")
    assert svc.is_deleted_for_month(36, "2025-06") is False
    assert memory_store.list_keys() == []


def test_month_argument_must_be_a_date(svc):
    with pytest.raises(InvalidDateError):
        svc.set_paid_for_month(36, "June", True)


def test_deleted_occurrences_newest_first(svc, memory_store):
    memory_store.set("deleted_2_2025-03", "true")
    memory_store.set("deleted_1_2025-05", "true")
    memory_store.set("deleted_3_2025-04", "false")
    memory_store.set("deleted_x_2025-04", "true")

    result = svc.deleted_occurrences()

    assert result == [
        MonthlyOverride(1, "2025-05", "deleted", True),
        MonthlyOverride(2, "2025-03", "deleted", True),
    ]


def test_overrides_for_transaction(svc):
    svc.set_paid_for_month(36, "2025-07", True)
    svc.delete_for_month(36, "2025-06")
    svc.delete_for_month(360, "2025-06")

    result = svc.overrides_for_transaction(36)

    assert [(o.year_month, o.aspect) for o in result] == [("2025-06", "deleted"), ("2025-07", "paid")]


def test_purge_transaction_leaves_other_ids(svc, memory_store):
    svc.set_paid_for_month(36, "2025-06", True)
    svc.delete_for_month(36, "2025-07")
    svc.delete_for_month(360, "2025-07")

    removed = svc.purge_transaction(36)

    assert removed == 2
    assert memory_store.list_keys() == ["deleted_360_2025-07"]


def test_purge_transaction_removes_malformed_values(svc, memory_store):
    # Arrange: keys of the transaction whose values cannot be read as flags
    memory_store.set("deleted_7_2025-06", "garbage")
    memory_store.set("paid_7_2025-07", "")
    svc.set_paid_for_month(7, "2025-08", True)

    # Act
    removed = svc.purge_transaction(7)

    # Assert
    assert removed == 3
    assert memory_store.list_keys() == [], "No key of a purged transaction may survive"


def test_clear_all_keeps_foreign_keys(memory_store):
    memory_store.set("last_month", "2025-06")
    svc = OverrideService(memory_store)
    svc.set_paid_for_month(1, "2025-06", True)
    svc.delete_for_month(2, "2025-06")

    removed = svc.clear_all()

    assert removed == 2
    assert memory_store.list_keys() == ["last_month"]
