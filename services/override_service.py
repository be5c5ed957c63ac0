import dataclasses
import logging
from typing import Iterable, Optional

from database.override_store import KeyValueStore, override_key, parse_override_key
from models.monthly_override import MonthlyOverride
from models.transaction import TransactionInstance
from utils.constants import ASPECT_DELETED, ASPECT_PAID
from utils.date_helpers import month_key, require_date

log = logging.getLogger(__name__)

_TRUE = {"true", "1", "yes"}
_FALSE = {"false", "0", "no"}


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """Read a stored flag; anything unrecognised counts as no override."""
    if value is None:
        return None
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    return None


class OverrideService:
    """Per-month paid/deleted exceptions for recurring transactions."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    # ── Resolution ───────────────────────────────────────────────────────────
    def resolve(
        self, instances: Iterable[TransactionInstance]
    ) -> list[TransactionInstance]:
        """
        Apply stored overrides to expanded instances.

        Recurring instances take their month's paid flag when one is stored
        and are dropped when their month is marked deleted (deletion wins over
        paid). Non-recurring instances pass through untouched. Order is kept
        and the input objects are never modified.
        """
        result: list[TransactionInstance] = []
        dropped = 0
        for inst in instances:
            if not inst.is_recurring:
                result.append(inst)
                continue
            month = month_key(require_date(inst.instance_date or inst.date))
            if self._read(ASPECT_DELETED, inst.id, month):
                dropped += 1
                continue
            paid = self._read(ASPECT_PAID, inst.id, month)
            if paid is not None and paid != inst.is_paid:
                inst = dataclasses.replace(inst, is_paid=paid)
            result.append(inst)
        if dropped:
            log.debug("Dropped %d instance(s) deleted for their month", dropped)
        return result

    # ── Paid ─────────────────────────────────────────────────────────────────
    def get_paid_for_month(self, transaction_id: int, on) -> Optional[bool]:
        return self._read(ASPECT_PAID, transaction_id, self._month(on))

    def set_paid_for_month(self, transaction_id: int, on, is_paid: bool) -> None:
        month = self._month(on)
        self._store.set(override_key(ASPECT_PAID, transaction_id, month), _flag(is_paid))
        log.info("Transaction %s marked %s for %s",
                 transaction_id, "paid" if is_paid else "unpaid", month)

    def clear_paid_for_month(self, transaction_id: int, on) -> None:
        self._store.remove(override_key(ASPECT_PAID, transaction_id, self._month(on)))

    # ── Deleted ──────────────────────────────────────────────────────────────
    def is_deleted_for_month(self, transaction_id: int, on) -> bool:
        return bool(self._read(ASPECT_DELETED, transaction_id, self._month(on)))

    def delete_for_month(self, transaction_id: int, on) -> None:
        month = self._month(on)
        self._store.set(override_key(ASPECT_DELETED, transaction_id, month), _flag(True))
        log.info("Transaction %s hidden for %s", transaction_id, month)

    def restore_for_month(self, transaction_id: int, on) -> None:
        month = self._month(on)
        self._store.remove(override_key(ASPECT_DELETED, transaction_id, month))
        log.info("Transaction %s restored for %s", transaction_id, month)

    # ── Listing & housekeeping ──────────────────────────────────────────────
    def overrides_for_transaction(self, transaction_id: int) -> list[MonthlyOverride]:
        result = []
        for aspect in (ASPECT_PAID, ASPECT_DELETED):
            result.extend(self._list(f"{aspect}_{transaction_id}_"))
        return sorted(result, key=lambda o: (o.year_month, o.aspect))

    def deleted_occurrences(self) -> list[MonthlyOverride]:
        """Every month hidden for some transaction, newest month first."""
        found = [o for o in self._list(f"{ASPECT_DELETED}_") if o.value]
        return sorted(found, key=lambda o: (o.year_month, o.transaction_id), reverse=True)

    def purge_transaction(self, transaction_id: int) -> int:
        """Remove every override key of a transaction, whatever its value."""
        keys = [
            key
            for aspect in (ASPECT_PAID, ASPECT_DELETED)
            for key in self._store.list_keys(f"{aspect}_{transaction_id}_")
            if parse_override_key(key)
        ]
        for key in keys:
            self._store.remove(key)
        return len(keys)

    def clear_all(self) -> int:
        """Remove all paid and deleted overrides; returns how many keys went."""
        count = 0
        for aspect in (ASPECT_PAID, ASPECT_DELETED):
            for key in self._store.list_keys(f"{aspect}_"):
                if parse_override_key(key):
                    self._store.remove(key)
                    count += 1
        log.info("Cleared %d monthly override(s)", count)
        return count

    # ── Internals ────────────────────────────────────────────────────────────
    def _read(self, aspect: str, transaction_id: int, month: str) -> Optional[bool]:
        key = override_key(aspect, transaction_id, month)
        raw = self._store.get(key)
        value = parse_bool(raw)
        if raw is not None and value is None:
            log.warning("Ignoring malformed override %s=%r", key, raw)
        return value

    def _list(self, prefix: str) -> list[MonthlyOverride]:
        result = []
        for key in self._store.list_keys(prefix):
            parsed = parse_override_key(key)
            if not parsed:
                continue
            value = parse_bool(self._store.get(key))
            if value is None:
                continue
            aspect, tx_id, month = parsed
            result.append(MonthlyOverride(tx_id, month, aspect, value))
        return result

    @staticmethod
    def _month(on) -> str:
        """Accept a date, datetime, YYYY-MM-DD string or a YYYY-MM key."""
        if isinstance(on, str) and len(on.strip()) == 7:
            return month_key(require_date(on.strip() + "-01", "month"))
        return month_key(require_date(on))


def _flag(value: bool) -> str:
    return "true" if value else "false"
