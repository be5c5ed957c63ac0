"""Per-month overrides of recurring transactions, kept as plain string pairs.

Keys follow one scheme, ``{aspect}_{transaction_id}_{YYYY-MM}``, for example
``paid_36_2025-06`` or ``deleted_36_2025-06``. Values are ``"true"`` or
``"false"``. Writes are last-write-wins; nothing is versioned.
"""
import re
from typing import Optional, Protocol, runtime_checkable

from database.db_manager import DatabaseManager
from utils.constants import OVERRIDE_ASPECTS

_KEY_RE = re.compile(r"^(?P<aspect>[a-z]+)_(?P<tx_id>\d+)_(?P<month>\d{4}-\d{2})$")


def override_key(aspect: str, transaction_id: int, year_month: str) -> str:
    if aspect not in OVERRIDE_ASPECTS:
        raise ValueError(f"Unknown override aspect: {aspect}")
    return f"{aspect}_{transaction_id}_{year_month}"


def parse_override_key(key: str) -> Optional[tuple[str, int, str]]:
    """Split a key into (aspect, transaction_id, year_month); None if foreign."""
    m = _KEY_RE.match(key)
    if not m or m["aspect"] not in OVERRIDE_ASPECTS:
        return None
    return m["aspect"], int(m["tx_id"]), m["month"]


@runtime_checkable
class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...
    def list_keys(self, prefix: str = "") -> list[str]: ...


class InMemoryKeyValueStore:
    """Dict-backed store; contents vanish with the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def list_keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))


class SqliteKeyValueStore:
    """Durable store backed by the ``overrides`` table; each write commits."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def get(self, key: str) -> Optional[str]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT value FROM overrides WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        conn = self._db.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO overrides(key, value) VALUES (?, ?)",
            (key, str(value)),
        )
        conn.commit()

    def remove(self, key: str) -> None:
        conn = self._db.get_connection()
        conn.execute("DELETE FROM overrides WHERE key = ?", (key,))
        conn.commit()

    def list_keys(self, prefix: str = "") -> list[str]:
        # substr() instead of LIKE: '_' is a LIKE wildcard and appears in every key
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT key FROM overrides WHERE substr(key, 1, ?) = ? ORDER BY key",
            (len(prefix), prefix),
        ).fetchall()
        return [r["key"] for r in rows]
