import logging

from database.savings_dao import SavingsDAO
from models.savings import Savings
from utils.app_config import get_person_labels
from utils.currency import parse_amount
from utils.date_helpers import format_date, require_date
from utils.errors import ValidationError

log = logging.getLogger(__name__)


class SavingsService:
    """Manual savings contributions, independent of transactions."""

    def __init__(self, savings_dao: SavingsDAO, person_labels: list[str] | None = None):
        self._dao = savings_dao
        self._person_labels = person_labels or get_person_labels()

    def get_all(self) -> list[Savings]:
        return self._dao.get_all()

    def get_for_month(self, month: str) -> list[Savings]:
        return self._dao.get_by_month(month)

    def total(self) -> float:
        return self._dao.get_total()

    def total_for_month(self, month: str) -> float:
        return self._dao.get_total(month)

    def totals_by_person(self) -> dict[str, float]:
        return self._dao.get_totals_by_person()

    def create(self, amount, date, person_label: str, notes: str | None = None) -> Savings:
        amount, date_str = self._validate(amount, date, person_label)
        entry = self._dao.create(amount, date_str, person_label, (notes or "").strip() or None)
        log.info("Recorded savings %s of %.2f for %s", entry.id, amount, person_label)
        return entry

    def update(
        self, savings_id: int, amount, date, person_label: str, notes: str | None = None
    ) -> Savings:
        amount, date_str = self._validate(amount, date, person_label)
        return self._dao.update(
            savings_id, amount, date_str, person_label, (notes or "").strip() or None
        )

    def delete(self, savings_id: int):
        self._dao.delete(savings_id)

    def _validate(self, amount, date, person_label: str) -> tuple[float, str]:
        amount = parse_amount(amount)
        if amount <= 0:
            raise ValidationError("Amount must be positive.")
        if person_label not in self._person_labels:
            raise ValidationError("Person must be selected.")
        return amount, format_date(require_date(date))
