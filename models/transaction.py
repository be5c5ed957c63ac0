from dataclasses import dataclass, fields
from typing import Optional


@dataclass
class Transaction:
    """A stored transaction; for recurring ones, the template of every occurrence."""
    id: int
    title: str
    amount: float
    date: str                             # 'YYYY-MM-DD', anchor of the recurrence
    is_expense: bool
    category_id: Optional[int]
    person_label: str
    is_recurring: bool = False
    recurring_interval: Optional[str] = None   # 'daily' | 'weekly' | 'monthly' | 'yearly'
    recurring_end_date: Optional[str] = None
    is_paid: bool = False
    notes: Optional[str] = None
    category_name: str = ""
    category_color: str = "#888888"


@dataclass
class TransactionInstance(Transaction):
    """A dated occurrence of a Transaction, rebuilt on every expansion."""
    instance_date: str = ""
    is_recurring_instance: bool = False

    @classmethod
    def from_template(
        cls, tx: Transaction, instance_date: str, is_recurring_instance: bool
    ) -> "TransactionInstance":
        values = {f.name: getattr(tx, f.name) for f in fields(Transaction)}
        return cls(
            **values,
            instance_date=instance_date,
            is_recurring_instance=is_recurring_instance,
        )
