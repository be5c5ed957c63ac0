import logging
from datetime import date, timedelta
from typing import Iterable, Iterator

from models.transaction import Transaction, TransactionInstance
from utils.date_helpers import add_months, add_years, format_date, require_date

log = logging.getLogger(__name__)

_DAY_STEPS = {"daily": 1, "weekly": 7}


class RecurringService:
    """Turns stored transactions into dated instances for a window.

    Stateless: every call works only on its arguments.
    """

    def expand(
        self,
        tx: Transaction,
        window_start,
        window_end,
        include_base: bool = True,
    ) -> list[TransactionInstance]:
        """
        Return the instances of tx for [window_start, window_end] (inclusive).

        A non-recurring transaction always yields exactly one instance on its
        own date, whatever the window. A recurring one yields, in date order,
        the optional base instance followed by one instance per occurrence in
        the window, stopping at recurring_end_date.
        """
        start = require_date(window_start, "window start")
        end = require_date(window_end, "window end")
        anchor = require_date(tx.date)

        if not tx.is_recurring or not tx.recurring_interval:
            return [TransactionInstance.from_template(tx, format_date(anchor), False)]

        result: list[TransactionInstance] = []
        if include_base:
            result.append(TransactionInstance.from_template(tx, format_date(anchor), False))

        limit = end
        if tx.recurring_end_date:
            limit = min(limit, require_date(tx.recurring_end_date, "recurring end date"))

        for occurrence in self._occurrences(tx, anchor, start, limit):
            if start <= occurrence <= end:
                result.append(
                    TransactionInstance.from_template(tx, format_date(occurrence), True)
                )

        log.debug(
            "Expanded %s (id=%s, %s) into %d instance(s) for %s..%s",
            tx.title, tx.id, tx.recurring_interval, len(result), start, end,
        )
        return result

    def expand_all(
        self,
        transactions: Iterable[Transaction],
        window_start,
        window_end,
        include_base: bool = True,
    ) -> list[TransactionInstance]:
        """Expand each transaction in turn; input order is kept."""
        result: list[TransactionInstance] = []
        for tx in transactions:
            result.extend(self.expand(tx, window_start, window_end, include_base))
        return result

    def next_occurrence(self, tx: Transaction, after: date) -> date | None:
        """First occurrence strictly after `after`, or None once the rule has ended."""
        if not tx.is_recurring or not tx.recurring_interval:
            return None
        anchor = require_date(tx.date)
        end = require_date(tx.recurring_end_date) if tx.recurring_end_date else None
        if end is None:
            try:
                end = max(after, anchor) + timedelta(days=366 * 2)
            except OverflowError:
                end = date.max
        limit = end
        for occurrence in self._occurrences(tx, anchor, after, limit):
            if occurrence > after:
                return occurrence
        return None

    def _occurrences(
        self, tx: Transaction, anchor: date, from_date: date, limit: date
    ) -> Iterator[date]:
        """Yield anchor + n * interval for n = 0, 1, ... while <= limit.

        Monthly and yearly steps are counted from the anchor so a day clamped
        in a short month comes back in the next long one. Generation stops at
        the last representable date.
        """
        interval = tx.recurring_interval
        if interval in _DAY_STEPS:
            days = _DAY_STEPS[interval]
            n = max(0, (from_date - anchor).days // days)

            def step(k):
                return anchor + timedelta(days=k * days)

        elif interval in ("monthly", "yearly"):
            advance = add_months if interval == "monthly" else add_years
            n = 0

            def step(k):
                return advance(anchor, k)

        else:
            log.warning(
                "Unknown recurring interval %r on transaction %s; not repeating it",
                interval, tx.id,
            )
            if anchor <= limit:
                yield anchor
            return

        current = step(n)
        while current <= limit:
            yield current
            n += 1
            try:
                current = step(n)
            except (OverflowError, ValueError):
                return
