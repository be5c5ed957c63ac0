from collections import defaultdict
from datetime import date, timedelta

from database.transaction_dao import TransactionDAO
from services.instance_service import InstanceService
from services.recurring_service import RecurringService
from services.savings_service import SavingsService
from utils.constants import (
    CHART_MONTHS, MONTHLY_EQUIVALENT, SUBSCRIPTION_CATEGORY, UPCOMING_DUE_SOON_DAYS,
)
from utils.date_helpers import (
    add_months, current_month_str, format_month, month_bounds,
    require_date, start_of_week, today,
)


class ReportService:
    def __init__(
        self,
        instance_service: InstanceService,
        tx_dao: TransactionDAO,
        recurring_service: RecurringService,
        savings_service: SavingsService,
    ):
        self._instances = instance_service
        self._tx_dao = tx_dao
        self._recurring = recurring_service
        self._savings = savings_service

    def get_summary(self, month: str | None = None) -> dict:
        m = month or current_month_str()
        instances = self._instances.for_month(m)
        income = sum(i.amount for i in instances if not i.is_expense)
        expense = sum(i.amount for i in instances if i.is_expense)
        paid = sum(i.amount for i in instances if i.is_expense and i.is_paid)
        balance = income - expense
        return {
            "month": m,
            "income": income,
            "expense": expense,
            "balance": balance,
            "paid_expense": paid,
            "unpaid_expense": expense - paid,
            "savings_rate": (balance / income * 100) if income > 0 else 0.0,
            "saved": self._savings.total_for_month(m),
            "skipped": self._instances.skipped_count(m),
            "count": len(instances),
        }

    def get_category_breakdown(self, month: str | None = None) -> list[dict]:
        """Return [{category, color_hex, total}, ...] for pie chart, largest first."""
        m = month or current_month_str()
        totals: dict[str, dict] = {}
        for inst in self._instances.for_month(m):
            if not inst.is_expense:
                continue
            name = inst.category_name or "Uncategorized"
            entry = totals.setdefault(
                name, {"category": name, "color_hex": inst.category_color, "total": 0.0}
            )
            entry["total"] += inst.amount
        return sorted(totals.values(), key=lambda d: d["total"], reverse=True)

    def get_person_breakdown(self, month: str | None = None) -> list[dict]:
        """Return [{person, income, expense}, ...] ordered by person label."""
        m = month or current_month_str()
        totals: dict[str, dict] = defaultdict(lambda: {"income": 0.0, "expense": 0.0})
        for inst in self._instances.for_month(m):
            totals[inst.person_label]["expense" if inst.is_expense else "income"] += inst.amount
        return [{"person": p, **v} for p, v in sorted(totals.items())]

    def get_monthly_chart_data(
        self, end_month: str | None = None, months: int = CHART_MONTHS
    ) -> list[dict]:
        """Return list of {month, income, expense, net} for bar chart, oldest first."""
        last_first, _ = month_bounds(end_month or current_month_str())
        rows = []
        for offset in range(months - 1, -1, -1):
            m = format_month(add_months(last_first, -offset))
            s = self.get_summary(m)
            rows.append({
                "month": m,
                "income": s["income"],
                "expense": s["expense"],
                "net": s["balance"],
            })
        return rows

    def get_upcoming_expenses(self, reference_date: date | None = None) -> dict:
        """Unpaid expenses from the reference date to the end of its month."""
        ref = require_date(reference_date or today())
        _, month_end = month_bounds(format_month(ref))
        soon = ref + timedelta(days=UPCOMING_DUE_SOON_DAYS)
        items = []
        for inst in self._instances.upcoming(ref, month_end):
            if not inst.is_expense or inst.is_paid:
                continue
            due = require_date(inst.instance_date)
            items.append({
                "instance": inst,
                "due_today": due == ref,
                "due_soon": ref < due < soon,
            })
        return {"items": items, "total": sum(i["instance"].amount for i in items)}

    def get_recurring_expenses(self) -> dict:
        """Recurring expense templates outside the subscription category."""
        items = [
            tx for tx in self._tx_dao.get_recurring()
            if tx.is_expense and tx.category_name != SUBSCRIPTION_CATEGORY
        ]
        items.sort(key=lambda tx: tx.amount, reverse=True)
        return {"items": items, "total": sum(tx.amount for tx in items)}

    def get_subscriptions(self, reference_date: date | None = None) -> dict:
        """Subscriptions with their next payment date and monthly-equivalent cost."""
        ref = require_date(reference_date or today())
        items = []
        for tx in self._tx_dao.get_recurring():
            if tx.category_name != SUBSCRIPTION_CATEGORY:
                continue
            interval = tx.recurring_interval or "monthly"
            items.append({
                "transaction": tx,
                "next_payment": self._recurring.next_occurrence(tx, ref),
                "monthly_cost": tx.amount * MONTHLY_EQUIVALENT.get(interval, 1.0),
            })
        items.sort(key=lambda d: d["next_payment"] or date.max)
        return {"items": items, "monthly_total": sum(d["monthly_cost"] for d in items)}

    def get_period_totals(self, reference_date: date | None = None) -> dict:
        """Income and expense for this week, next week, this month and this year."""
        ref = require_date(reference_date or today())
        week_start = start_of_week(ref)
        periods = {
            "this_week": (week_start, week_start + timedelta(days=6)),
            "next_week": (week_start + timedelta(days=7), week_start + timedelta(days=13)),
            "this_month": month_bounds(format_month(ref)),
            "this_year": (date(ref.year, 1, 1), date(ref.year, 12, 31)),
        }
        result = {}
        for name, (start, end) in periods.items():
            income = expense = 0.0
            for inst in self._instances.for_window(start, end, include_base=False):
                if not start <= require_date(inst.instance_date) <= end:
                    continue
                if inst.is_expense:
                    expense += inst.amount
                else:
                    income += inst.amount
            result[name] = {"income": income, "expense": expense}
        return result

    def export_csv(self, month: str | None = None) -> list[list[str]]:
        """Return rows suitable for CSV export."""
        m = month or current_month_str()
        header = ["Date", "Title", "Type", "Category", "Person", "Amount", "Paid", "Recurring"]
        rows = [header]
        for inst in self._instances.for_month(m):
            rows.append([
                inst.instance_date,
                inst.title,
                "expense" if inst.is_expense else "income",
                inst.category_name or "",
                inst.person_label,
                f"{inst.amount:.2f}",
                "Yes" if inst.is_paid else "No",
                inst.recurring_interval or "",
            ])
        return rows
