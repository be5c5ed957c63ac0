from typing import Optional
from database.db_manager import DatabaseManager
from models.savings import Savings


class SavingsDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Savings:
        return Savings(
            id=row["id"],
            amount=row["amount"],
            date=row["date"],
            person_label=row["person_label"],
            notes=row["notes"],
        )

    def get_all(self) -> list[Savings]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM savings ORDER BY date DESC, id DESC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, savings_id: int) -> Optional[Savings]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM savings WHERE id = ?", (savings_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_month(self, month: str) -> list[Savings]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM savings WHERE strftime('%Y-%m', date) = ? ORDER BY date ASC, id ASC",
            (month,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_total(self, month: str | None = None) -> float:
        conn = self._db.get_connection()
        if month:
            row = conn.execute(
                "SELECT SUM(amount) AS total FROM savings WHERE strftime('%Y-%m', date) = ?",
                (month,),
            ).fetchone()
        else:
            row = conn.execute("SELECT SUM(amount) AS total FROM savings").fetchone()
        return row["total"] or 0.0

    def get_totals_by_person(self) -> dict[str, float]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT person_label, SUM(amount) AS total
               FROM savings
               GROUP BY person_label
               ORDER BY total DESC"""
        ).fetchall()
        return {r["person_label"]: r["total"] for r in rows}

    def create(
        self, amount: float, date: str, person_label: str, notes: str | None = None
    ) -> Savings:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "INSERT INTO savings(amount, date, notes, person_label) VALUES (?, ?, ?, ?)",
            (amount, date, notes, person_label),
        )
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(
        self, savings_id: int, amount: float, date: str,
        person_label: str, notes: str | None = None,
    ) -> Savings:
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE savings SET amount=?, date=?, notes=?, person_label=? WHERE id=?",
            (amount, date, notes, person_label, savings_id),
        )
        conn.commit()
        return self.get_by_id(savings_id)

    def delete(self, savings_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM savings WHERE id = ?", (savings_id,))
        conn.commit()
