import logging
from collections import defaultdict
from datetime import date

from database.transaction_dao import TransactionDAO
from models.transaction import TransactionInstance
from services.override_service import OverrideService
from services.recurring_service import RecurringService
from utils.date_helpers import month_bounds, require_date
from utils.errors import InvalidDateError

log = logging.getLogger(__name__)


class InstanceService:
    """Stored transactions → expanded instances → overrides applied.

    This is the list every view renders from.
    """

    def __init__(
        self,
        tx_dao: TransactionDAO,
        recurring_service: RecurringService,
        override_service: OverrideService,
    ):
        self._tx_dao = tx_dao
        self._recurring = recurring_service
        self._overrides = override_service

    def for_window(
        self, window_start, window_end, include_base: bool = True
    ) -> list[TransactionInstance]:
        start = require_date(window_start, "window start")
        end = require_date(window_end, "window end")
        expanded: list[TransactionInstance] = []
        for tx in self._tx_dao.get_all():
            try:
                expanded.extend(self._recurring.expand(tx, start, end, include_base))
            except InvalidDateError as e:
                log.warning("Skipping transaction %s '%s': %s", tx.id, tx.title, e)
        return self._overrides.resolve(expanded)

    def for_month(self, month: str) -> list[TransactionInstance]:
        """Occurrences dated inside the calendar month, ordered by date.

        Base instances are left out, so each occurrence is counted once.
        """
        first, last = month_bounds(month)
        instances = [
            inst for inst in self.for_window(first, last, include_base=False)
            if first <= require_date(inst.instance_date) <= last
        ]
        return sorted(instances, key=lambda i: (i.instance_date, i.id))

    def by_day(self, month: str) -> dict[int, list[TransactionInstance]]:
        days: dict[int, list[TransactionInstance]] = defaultdict(list)
        for inst in self.for_month(month):
            days[require_date(inst.instance_date).day].append(inst)
        return dict(days)

    def skipped_count(self, month: str) -> int:
        """Occurrences in the month hidden by a deleted-for-month override."""
        first, last = month_bounds(month)
        count = 0
        for tx in self._tx_dao.get_recurring():
            try:
                occurrences = self._recurring.expand(tx, first, last, include_base=False)
            except InvalidDateError:
                continue
            if occurrences and self._overrides.is_deleted_for_month(tx.id, first):
                count += len(occurrences)
        return count

    def toggle_paid(self, inst: TransactionInstance) -> bool:
        """Flip the paid flag of one occurrence; returns the new value.

        Recurring transactions get a per-month override so other months keep
        their own state; one-off transactions are updated in place.
        """
        new_value = not inst.is_paid
        if inst.is_recurring:
            self._overrides.set_paid_for_month(inst.id, inst.instance_date, new_value)
        else:
            self._tx_dao.set_paid(inst.id, new_value)
        return new_value

    def delete_occurrence(self, inst: TransactionInstance):
        """Hide a recurring occurrence for its month, or delete a one-off record."""
        if inst.is_recurring:
            self._overrides.delete_for_month(inst.id, inst.instance_date)
        else:
            self._tx_dao.delete(inst.id)
            self._overrides.purge_transaction(inst.id)

    def upcoming(self, reference: date, until: date) -> list[TransactionInstance]:
        instances = self.for_window(reference, until, include_base=False)
        return sorted(
            (i for i in instances
             if reference <= require_date(i.instance_date) <= until),
            key=lambda i: (i.instance_date, i.id),
        )
