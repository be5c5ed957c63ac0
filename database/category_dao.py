from typing import Optional
from database.db_manager import DatabaseManager
from models.category import Category


class CategoryDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db
        self._all_cache: list | None = None

    def _invalidate_cache(self):
        self._all_cache = None

    def _row_to_model(self, row) -> Category:
        return Category(
            id=row["id"],
            name=row["name"],
            color_hex=row["color_hex"],
            is_expense=bool(row["is_expense"]),
            emoji=row["emoji"],
        )

    def get_all(self) -> list[Category]:
        if self._all_cache is None:
            conn = self._db.get_connection()
            rows = conn.execute(
                "SELECT * FROM categories ORDER BY name"
            ).fetchall()
            self._all_cache = [self._row_to_model(r) for r in rows]
        return self._all_cache

    def get_by_id(self, category_id: int) -> Optional[Category]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_name(self, name: str) -> Optional[Category]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM categories WHERE name = ? COLLATE NOCASE", (name,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_for_kind(self, is_expense: bool) -> list[Category]:
        return [c for c in self.get_all() if c.is_expense == is_expense]

    def count_transactions(self, category_id: int) -> int:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT COUNT(*) AS n FROM transactions WHERE category_id = ?",
            (category_id,),
        ).fetchone()
        return row["n"]

    def create(
        self, name: str, color_hex: str = "#888888",
        is_expense: bool = True, emoji: str | None = None,
    ) -> Category:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "INSERT INTO categories(name, color_hex, is_expense, emoji) VALUES (?, ?, ?, ?)",
            (name, color_hex, 1 if is_expense else 0, emoji),
        )
        conn.commit()
        self._invalidate_cache()
        return self.get_by_id(cursor.lastrowid)

    def update(
        self, category_id: int, name: str, color_hex: str,
        is_expense: bool, emoji: str | None = None,
    ) -> Category:
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE categories SET name=?, color_hex=?, is_expense=?, emoji=? WHERE id=?",
            (name, color_hex, 1 if is_expense else 0, emoji, category_id),
        )
        conn.commit()
        self._invalidate_cache()
        return self.get_by_id(category_id)

    def delete(self, category_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
        conn.commit()
        self._invalidate_cache()
