import pytest

from utils.errors import InvalidDateError, ValidationError


@pytest.fixture
def deposits(savings_service):
    savings_service.create(200, "2025-06-01", "Person A", "emergency fund")
    savings_service.create("150,50", "2025-06-20", "Person B")
    savings_service.create(100, "2025-07-02", "Person A")


def test_totals(savings_service, deposits):
    assert savings_service.total() == pytest.approx(450.5)
    assert savings_service.total_for_month("2025-06") == pytest.approx(350.5)
    assert savings_service.total_for_month("2025-08") == 0.0
    assert savings_service.totals_by_person() == {
        "Person A": pytest.approx(300.0),
        "Person B": pytest.approx(150.5),
    }


def test_get_for_month_in_date_order(savings_service, deposits):
    june = savings_service.get_for_month("2025-06")

    assert [s.date for s in june] == ["2025-06-01", "2025-06-20"]
    assert june[0].notes == "emergency fund"
    assert june[1].notes is None


def test_update_and_delete(savings_service):
    entry = savings_service.create(50, "2025-06-01", "Together")

    updated = savings_service.update(entry.id, 75, "2025-06-02", "Person B", "moved")
    assert (updated.amount, updated.date, updated.person_label, updated.notes) == (
        75, "2025-06-02", "Person B", "moved",
    )

    savings_service.delete(entry.id)
    assert savings_service.get_all() == []


@pytest.mark.parametrize("amount, person", [
    (0, "Person A"),
    ("abc", "Person A"),
    ("-50", "Person A"),
    (float("nan"), "Person A"),
    (10, "Nobody"),
])
def test_create_rejects_bad_values(savings_service, amount, person):
    with pytest.raises(ValidationError):
        savings_service.create(amount, "2025-06-01", person)


def test_create_rejects_bad_date(savings_service):
    with pytest.raises(InvalidDateError):
        savings_service.create(10, "01.06.2025", "Person A")
