from dataclasses import dataclass


@dataclass(frozen=True)
class MonthlyOverride:
    transaction_id: int
    year_month: str         # 'YYYY-MM'
    aspect: str             # 'paid' | 'deleted'
    value: bool
