import logging

from database.category_dao import CategoryDAO
from database.transaction_dao import TransactionDAO
from models.transaction import Transaction
from services.override_service import OverrideService
from utils.app_config import get_person_labels
from utils.constants import RECURRING_INTERVALS
from utils.currency import parse_amount
from utils.date_helpers import format_date, require_date
from utils.errors import ValidationError

log = logging.getLogger(__name__)


class TransactionService:
    def __init__(
        self,
        tx_dao: TransactionDAO,
        category_dao: CategoryDAO,
        override_service: OverrideService,
        person_labels: list[str] | None = None,
    ):
        self._dao = tx_dao
        self._category_dao = category_dao
        self._overrides = override_service
        self._person_labels = person_labels or get_person_labels()

    @property
    def person_labels(self) -> list[str]:
        return list(self._person_labels)

    def get_all(self) -> list[Transaction]:
        return self._dao.get_all()

    def get_by_id(self, tx_id: int) -> Transaction | None:
        return self._dao.get_by_id(tx_id)

    def get_recurring(self) -> list[Transaction]:
        return self._dao.get_recurring()

    def get_unique_titles(self, query: str = "") -> list[str]:
        """Distinct titles, alphabetical, optionally filtered by a substring."""
        titles = sorted(set(self._dao.get_titles()))
        if not query:
            return titles
        q = query.lower()
        return [t for t in titles if q in t.lower()]

    def create(
        self,
        title: str,
        amount,
        date,
        is_expense: bool,
        category_id: int | None,
        person_label: str,
        is_recurring: bool = False,
        recurring_interval: str | None = None,
        recurring_end_date=None,
        is_paid: bool = False,
        notes: str | None = None,
    ) -> Transaction:
        values = self._validate(
            title, amount, date, category_id, person_label,
            is_recurring, recurring_interval, recurring_end_date,
        )
        tx = self._dao.create(
            is_expense=is_expense, is_paid=is_paid,
            notes=(notes or "").strip() or None, **values,
        )
        log.info("Created transaction %s '%s'", tx.id, tx.title)
        return tx

    def update(
        self,
        tx_id: int,
        title: str,
        amount,
        date,
        is_expense: bool,
        category_id: int | None,
        person_label: str,
        is_recurring: bool = False,
        recurring_interval: str | None = None,
        recurring_end_date=None,
        is_paid: bool = False,
        notes: str | None = None,
    ) -> Transaction:
        if self._dao.get_by_id(tx_id) is None:
            raise ValidationError(f"Transaction {tx_id} does not exist.")
        values = self._validate(
            title, amount, date, category_id, person_label,
            is_recurring, recurring_interval, recurring_end_date,
        )
        return self._dao.update(
            tx_id, is_expense=is_expense, is_paid=is_paid,
            notes=(notes or "").strip() or None, **values,
        )

    def set_paid(self, tx_id: int, is_paid: bool):
        self._dao.set_paid(tx_id, is_paid)

    def delete(self, tx_id: int):
        self._dao.delete(tx_id)
        removed = self._overrides.purge_transaction(tx_id)
        log.info("Deleted transaction %s and %d override(s)", tx_id, removed)

    def _validate(
        self, title, amount, date, category_id, person_label,
        is_recurring, recurring_interval, recurring_end_date,
    ) -> dict:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required.")
        amount = parse_amount(amount)
        if amount <= 0:
            raise ValidationError("Amount must be positive.")
        anchor = require_date(date)
        if category_id is None or self._category_dao.get_by_id(category_id) is None:
            raise ValidationError("Category is required.")
        if person_label not in self._person_labels:
            raise ValidationError("Person must be selected.")

        end_str = None
        if is_recurring:
            if recurring_interval not in RECURRING_INTERVALS:
                raise ValidationError("Choose how often the transaction repeats.")
            if recurring_end_date:
                end = require_date(recurring_end_date, "recurring end date")
                if end < anchor:
                    raise ValidationError("End date cannot be before the start date.")
                end_str = format_date(end)
        else:
            recurring_interval = None

        return {
            "title": title,
            "amount": amount,
            "date": format_date(anchor),
            "category_id": category_id,
            "person_label": person_label,
            "is_recurring": bool(is_recurring),
            "recurring_interval": recurring_interval,
            "recurring_end_date": end_str,
        }
