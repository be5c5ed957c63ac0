import pytest

from utils.errors import InvalidDateError, ValidationError


def test_create_normalises_input(tx_service, category_id):
    # Act
    tx = tx_service.create(
        title="  Rent ", amount="1 234,50", date="2025/06/09", is_expense=True,
        category_id=category_id("Bills"), person_label="Together", notes="   ",
    )

    # Assert
    assert tx.id is not None
    assert tx.title == "Rent"
    assert tx.amount == pytest.approx(1234.5)
    assert tx.date == "2025-06-09"
    assert tx.notes is None
    assert tx.category_name == "Bills"
    assert tx.is_recurring is False


def test_create_recurring_keeps_interval_and_end(add_tx):
    tx = add_tx(is_recurring=True, recurring_interval="weekly", recurring_end_date="2025-12-31")

    assert tx.is_recurring is True
    assert tx.recurring_interval == "weekly"
    assert tx.recurring_end_date == "2025-12-31"


def test_one_off_drops_recurrence_fields(add_tx):
    tx = add_tx(is_recurring=False, recurring_interval="monthly", recurring_end_date="2025-12-31")

    assert tx.recurring_interval is None
    assert tx.recurring_end_date is None


@pytest.mark.parametrize("changes, message", [
    ({"title": "   "}, "Title"),
    ({"amount": 0}, "positive"),
    ({"amount": -5}, "positive"),
    ({"amount": "-50"}, "positive"),
    ({"amount": float("nan")}, "number"),
    ({"amount": "lots"}, "number"),
    ({"person_label": "Stranger"}, "Person"),
    ({"is_recurring": True, "recurring_interval": None}, "repeats"),
    ({"is_recurring": True, "recurring_interval": "hourly"}, "repeats"),
    ({"is_recurring": True, "recurring_interval": "monthly",
      "recurring_end_date": "2025-06-01"}, "before"),
])
def test_create_rejects_bad_input(tx_service, category_id, changes, message):
    values = dict(
        title="Rent", amount=100, date="2025-06-09", is_expense=True,
        category_id=category_id(), person_label="Together",
    )
    values.update(changes)

    with pytest.raises(ValidationError) as exc:
        tx_service.create(**values)

    assert message in str(exc.value)


def test_create_rejects_missing_or_unknown_category(tx_service):
    with pytest.raises(ValidationError):
        tx_service.create("Rent", 100, "2025-06-09", True, None, "Together")
    with pytest.raises(ValidationError):
        tx_service.create("Rent", 100, "2025-06-09", True, 9999, "Together")


def test_bad_date_raises_invalid_date_error(tx_service, category_id):
    with pytest.raises(InvalidDateError):
        tx_service.create("Rent", 100, "2025-02-30", True, category_id(), "Together")
    with pytest.raises(InvalidDateError):
        tx_service.create(
            "Rent", 100, "2025-02-01", True, category_id(), "Together",
            is_recurring=True, recurring_interval="monthly", recurring_end_date="soon",
        )


def test_nothing_is_stored_when_validation_fails(tx_service, category_id):
    with pytest.raises(ValidationError):
        tx_service.create("", 100, "2025-06-09", True, category_id(), "Together")

    assert tx_service.get_all() == []


def test_update_changes_record(tx_service, add_tx, category_id):
    tx = add_tx()

    updated = tx_service.update(
        tx.id, title="Rent (new flat)", amount=1800, date="2025-07-01", is_expense=True,
        category_id=category_id("Bills"), person_label="Person A",
        is_recurring=True, recurring_interval="monthly", is_paid=True,
    )

    assert updated.title == "Rent (new flat)"
    assert updated.amount == 1800
    assert updated.person_label == "Person A"
    assert updated.is_paid is True
    assert tx_service.get_by_id(tx.id) == updated


def test_update_unknown_id_raises(tx_service, category_id):
    with pytest.raises(ValidationError):
        tx_service.update(404, "Rent", 100, "2025-06-09", True, category_id(), "Together")


def test_delete_purges_monthly_overrides(tx_service, add_tx, overrides, store):
    # Arrange
    keep = add_tx("Netflix", 45, is_recurring=True, recurring_interval="monthly")
    tx = add_tx(is_recurring=True, recurring_interval="monthly")
    overrides.set_paid_for_month(tx.id, "2025-06", True)
    overrides.delete_for_month(tx.id, "2025-07")
    overrides.delete_for_month(keep.id, "2025-07")

    # Act
    tx_service.delete(tx.id)

    # Assert
    assert tx_service.get_by_id(tx.id) is None
    assert overrides.overrides_for_transaction(tx.id) == []
    assert store.list_keys() == [f"deleted_{keep.id}_2025-07"]


def test_set_paid_on_record(tx_service, add_tx):
    tx = add_tx()

    tx_service.set_paid(tx.id, True)

    assert tx_service.get_by_id(tx.id).is_paid is True


def test_get_recurring_only_returns_templates(tx_service, add_tx):
    add_tx("Groceries", category="Food")
    rent = add_tx(is_recurring=True, recurring_interval="monthly")

    assert [t.id for t in tx_service.get_recurring()] == [rent.id]


def test_unique_titles_sorted_and_filtered(tx_service, add_tx):
    add_tx("Rent")
    add_tx("Rent", date="2025-07-09")
    add_tx("Netflix", category="Subscription")

    assert tx_service.get_unique_titles() == ["Netflix", "Rent"]
    assert tx_service.get_unique_titles("NET") == ["Netflix"]
    assert tx_service.get_unique_titles("xyz") == []


def test_person_labels_returns_a_copy(tx_service):
    labels = tx_service.person_labels
    labels.append("Intruder")

    assert "Intruder" not in tx_service.person_labels
