import re

from database.category_dao import CategoryDAO
from models.category import Category
from utils.errors import ValidationError

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")


class CategoryService:
    def __init__(self, category_dao: CategoryDAO):
        self._dao = category_dao

    def get_all(self) -> list[Category]:
        return self._dao.get_all()

    def get_by_id(self, category_id: int) -> Category | None:
        return self._dao.get_by_id(category_id)

    def get_expense_categories(self) -> list[Category]:
        return self._dao.get_for_kind(True)

    def get_income_categories(self) -> list[Category]:
        return self._dao.get_for_kind(False)

    def create(
        self, name: str, color_hex: str, is_expense: bool = True, emoji: str | None = None
    ) -> Category:
        name, color_hex, emoji = self._clean(name, color_hex, emoji)
        existing = [c.name.lower() for c in self._dao.get_all()]
        if name.lower() in existing:
            raise ValidationError(f"A category named '{name}' already exists.")
        return self._dao.create(name, color_hex, is_expense, emoji)

    def update(
        self, category_id: int, name: str, color_hex: str,
        is_expense: bool = True, emoji: str | None = None,
    ) -> Category:
        name, color_hex, emoji = self._clean(name, color_hex, emoji)
        existing = [c for c in self._dao.get_all() if c.id != category_id]
        if any(c.name.lower() == name.lower() for c in existing):
            raise ValidationError(f"A category named '{name}' already exists.")
        return self._dao.update(category_id, name, color_hex, is_expense, emoji)

    def usage_count(self, category_id: int) -> int:
        return self._dao.count_transactions(category_id)

    def delete(self, category_id: int):
        used = self._dao.count_transactions(category_id)
        if used:
            raise ValidationError(
                f"Category is used by {used} transaction{'s' if used != 1 else ''}."
            )
        self._dao.delete(category_id)

    def _clean(self, name: str, color_hex: str, emoji: str | None):
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name cannot be empty.")
        color_hex = (color_hex or "").strip()
        if not color_hex.startswith("#"):
            color_hex = "#" + color_hex
        if not _HEX_COLOR.match(color_hex):
            raise ValidationError("Color must be a hex value such as #FF9800.")
        return name, color_hex, (emoji or "").strip() or None
