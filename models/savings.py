from dataclasses import dataclass
from typing import Optional


@dataclass
class Savings:
    id: int
    amount: float
    date: str               # 'YYYY-MM-DD'
    person_label: str
    notes: Optional[str] = None
