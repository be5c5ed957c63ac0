from dataclasses import dataclass
from typing import Optional


@dataclass
class Category:
    id: int
    name: str
    color_hex: str = "#888888"
    is_expense: bool = True
    emoji: Optional[str] = None

    @property
    def label(self) -> str:
        return f"{self.emoji} {self.name}" if self.emoji else self.name
