import pytest

from database.category_dao import CategoryDAO
from database.db_manager import DatabaseManager
from database.override_store import InMemoryKeyValueStore, SqliteKeyValueStore
from database.savings_dao import SavingsDAO
from database.transaction_dao import TransactionDAO
from models.transaction import Transaction
from services.category_service import CategoryService
from services.instance_service import InstanceService
from services.override_service import OverrideService
from services.recurring_service import RecurringService
from services.report_service import ReportService
from services.savings_service import SavingsService
from services.transaction_service import TransactionService
from utils.constants import DEFAULT_PERSON_LABELS


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.household_budget."""
    home = tmp_path / "config_home"
    monkeypatch.setenv("HOUSEHOLD_BUDGET_HOME", str(home))
    return home


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager(str(tmp_path / "budget.db"))
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def people():
    return list(DEFAULT_PERSON_LABELS)


@pytest.fixture
def tx_dao(db):
    return TransactionDAO(db)


@pytest.fixture
def category_dao(db):
    return CategoryDAO(db)


@pytest.fixture
def savings_dao(db):
    return SavingsDAO(db)


@pytest.fixture
def store(db):
    return SqliteKeyValueStore(db)


@pytest.fixture
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def overrides(store):
    return OverrideService(store)


@pytest.fixture
def recurring():
    return RecurringService()


@pytest.fixture
def tx_service(tx_dao, category_dao, overrides, people):
    return TransactionService(tx_dao, category_dao, overrides, people)


@pytest.fixture
def category_service(category_dao):
    return CategoryService(category_dao)


@pytest.fixture
def savings_service(savings_dao, people):
    return SavingsService(savings_dao, people)


@pytest.fixture
def instances(tx_dao, recurring, overrides):
    return InstanceService(tx_dao, recurring, overrides)


@pytest.fixture
def reports(instances, tx_dao, recurring, savings_service):
    return ReportService(instances, tx_dao, recurring, savings_service)


@pytest.fixture
def category_id(category_dao):
    """Look up a seeded category id by name."""
    def _lookup(name="Bills"):
        return category_dao.get_by_name(name).id
    return _lookup


@pytest.fixture
def add_tx(tx_service, category_id):
    """Create a stored transaction with sensible defaults."""
    def _add(title="Rent", amount=100.0, date="2025-06-09", category="Bills", **kwargs):
        kwargs.setdefault("is_expense", category not in ("Income", "Gift"))
        kwargs.setdefault("person_label", "Together")
        return tx_service.create(
            title=title, amount=amount, date=date,
            category_id=category_id(category), **kwargs,
        )
    return _add


def _make_tx(**overrides) -> Transaction:
    values = dict(
        id=36,
        title="Rent",
        amount=100.0,
        date="2025-06-09",
        is_expense=True,
        category_id=1,
        person_label="Together",
        is_recurring=True,
        recurring_interval="monthly",
        recurring_end_date=None,
        is_paid=False,
    )
    values.update(overrides)
    return Transaction(**values)


@pytest.fixture
def make_tx():
    """Unsaved Transaction for pure expansion and resolution tests."""
    return _make_tx
