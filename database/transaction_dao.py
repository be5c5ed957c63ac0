from typing import Optional
from database.db_manager import DatabaseManager
from models.transaction import Transaction


class TransactionDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Transaction:
        keys = row.keys()
        return Transaction(
            id=row["id"],
            title=row["title"],
            amount=row["amount"],
            date=row["date"],
            is_expense=bool(row["is_expense"]),
            category_id=row["category_id"],
            person_label=row["person_label"],
            is_recurring=bool(row["is_recurring"]),
            recurring_interval=row["recurring_interval"],
            recurring_end_date=row["recurring_end_date"],
            is_paid=bool(row["is_paid"]),
            notes=row["notes"],
            category_name=row["category_name"] if "category_name" in keys else "",
            category_color=row["category_color"] if "category_color" in keys else "#888888",
        )

    def _select(self) -> str:
        return """
            SELECT t.*,
                   COALESCE(c.name, '') AS category_name,
                   COALESCE(c.color_hex, '#888888') AS category_color
            FROM transactions t
            LEFT JOIN categories c ON t.category_id = c.id
        """

    def get_all(self) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " ORDER BY t.date ASC, t.id ASC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_recurring(self) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " WHERE t.is_recurring = 1 ORDER BY t.date ASC, t.id ASC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, tx_id: int) -> Optional[Transaction]:
        conn = self._db.get_connection()
        row = conn.execute(
            self._select() + " WHERE t.id = ?", (tx_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_titles(self) -> list[str]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT DISTINCT TRIM(title) AS title FROM transactions WHERE TRIM(title) <> ''"
        ).fetchall()
        return [r["title"] for r in rows]

    def create(
        self,
        title: str,
        amount: float,
        date: str,
        is_expense: bool,
        category_id: int | None,
        person_label: str,
        is_recurring: bool = False,
        recurring_interval: str | None = None,
        recurring_end_date: str | None = None,
        is_paid: bool = False,
        notes: str | None = None,
    ) -> Transaction:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO transactions
               (title, amount, date, notes, is_expense, category_id, person_label,
                is_recurring, recurring_interval, recurring_end_date, is_paid)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                title, amount, date, notes, 1 if is_expense else 0, category_id,
                person_label, 1 if is_recurring else 0, recurring_interval,
                recurring_end_date, 1 if is_paid else 0,
            ),
        )
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(
        self,
        tx_id: int,
        title: str,
        amount: float,
        date: str,
        is_expense: bool,
        category_id: int | None,
        person_label: str,
        is_recurring: bool = False,
        recurring_interval: str | None = None,
        recurring_end_date: str | None = None,
        is_paid: bool = False,
        notes: str | None = None,
    ) -> Transaction:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE transactions
               SET title=?, amount=?, date=?, notes=?, is_expense=?, category_id=?,
                   person_label=?, is_recurring=?, recurring_interval=?,
                   recurring_end_date=?, is_paid=?
               WHERE id=?""",
            (
                title, amount, date, notes, 1 if is_expense else 0, category_id,
                person_label, 1 if is_recurring else 0, recurring_interval,
                recurring_end_date, 1 if is_paid else 0, tx_id,
            ),
        )
        conn.commit()
        return self.get_by_id(tx_id)

    def set_paid(self, tx_id: int, is_paid: bool):
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE transactions SET is_paid=? WHERE id=?",
            (1 if is_paid else 0, tx_id),
        )
        conn.commit()

    def delete(self, tx_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM transactions WHERE id = ?", (tx_id,))
        conn.commit()
