import calendar
import logging

import customtkinter as ctk
from models.transaction import TransactionInstance
from services.category_service import CategoryService
from services.instance_service import InstanceService
from services.transaction_service import TransactionService
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.transaction_form import TransactionForm
from utils.currency import format_currency
from utils.date_helpers import (
    current_month_str, format_display_date, friendly_month, month_bounds,
    next_month, prev_month, today,
)

log = logging.getLogger(__name__)

_WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
_EXPENSE = "#F44336"
_INCOME = "#4CAF50"
_MAX_LINES = 3


class CalendarTab(ctk.CTkFrame):
    """Month grid of expanded occurrences with a list for the picked day."""

    def __init__(
        self,
        master,
        instance_service: InstanceService,
        tx_service: TransactionService,
        category_service: CategoryService,
        notify_refresh,
        on_month_changed=None,
        initial_month: str | None = None,
        currency: str = "zł",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._inst_svc = instance_service
        self._tx_svc = tx_service
        self._cat_svc = category_service
        self._notify_refresh = notify_refresh
        self._on_month_changed = on_month_changed
        self._currency = currency

        self._month_var = ctk.StringVar(value=initial_month or current_month_str())
        self._selected_day: int | None = None
        self._days: dict[int, list[TransactionInstance]] = {}

        self.grid_columnconfigure(0, weight=3)
        self.grid_columnconfigure(1, weight=2)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_grid()
        self._build_day_list()
        self._load()

    @property
    def month(self) -> str:
        return self._month_var.get()

    def refresh(self):
        self._load()

    # ── Layout ──────────────────────────────────────────────────────────────
    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, columnspan=2, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkButton(bar, text="◀", width=28, command=self._prev_month).pack(side="left", padx=(12, 0), pady=8)
        self._title_label = ctk.CTkLabel(
            bar, text="", width=160, anchor="center",
            font=ctk.CTkFont(size=14, weight="bold"),
        )
        self._title_label.pack(side="left", padx=4)
        ctk.CTkButton(bar, text="▶", width=28, command=self._next_month).pack(side="left")
        ctk.CTkButton(
            bar, text="Today", width=70,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._go_today,
        ).pack(side="left", padx=(8, 0))

        ctk.CTkButton(
            bar, text="+ Income", width=100,
            fg_color=_INCOME, hover_color="#388E3C",
            command=lambda: self._open_add(is_expense=False),
        ).pack(side="right", padx=(4, 12))
        ctk.CTkButton(
            bar, text="+ Expense", width=100,
            fg_color=_EXPENSE, hover_color="#D32F2F",
            command=lambda: self._open_add(is_expense=True),
        ).pack(side="right", padx=4)

        self._totals_label = ctk.CTkLabel(bar, text="", text_color="gray60")
        self._totals_label.pack(side="right", padx=12)

    def _build_grid(self):
        self._grid = ctk.CTkFrame(self, fg_color="transparent")
        self._grid.grid(row=1, column=0, sticky="nsew", padx=(8, 4), pady=8)
        for c in range(7):
            self._grid.grid_columnconfigure(c, weight=1, uniform="day")

    def _build_day_list(self):
        side = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=8)
        side.grid(row=1, column=1, sticky="nsew", padx=(4, 8), pady=8)
        side.grid_columnconfigure(0, weight=1)
        side.grid_rowconfigure(1, weight=1)

        self._day_title = ctk.CTkLabel(
            side, text="", anchor="w", font=ctk.CTkFont(size=13, weight="bold"),
        )
        self._day_title.grid(row=0, column=0, sticky="ew", padx=12, pady=(10, 4))
        self._list = ctk.CTkScrollableFrame(side, fg_color="transparent")
        self._list.grid(row=1, column=0, sticky="nsew", padx=4, pady=(0, 8))
        self._list.grid_columnconfigure(0, weight=1)

    # ── Navigation ──────────────────────────────────────────────────────────
    def _set_month(self, month: str):
        self._month_var.set(month)
        self._selected_day = None
        if self._on_month_changed:
            self._on_month_changed(month)
        self._load()

    def _prev_month(self):
        self._set_month(prev_month(self.month))

    def _next_month(self):
        self._set_month(next_month(self.month))

    def _go_today(self):
        self._set_month(current_month_str())
        self._select_day(today().day)

    # ── Loading ─────────────────────────────────────────────────────────────
    def _load(self):
        month = self.month
        self._title_label.configure(text=friendly_month(month))
        self._days = self._inst_svc.by_day(month)

        all_items = [i for items in self._days.values() for i in items]
        income = sum(i.amount for i in all_items if not i.is_expense)
        expense = sum(i.amount for i in all_items if i.is_expense)
        self._totals_label.configure(
            text=f"In {format_currency(income, self._currency)}   "
                 f"Out {format_currency(expense, self._currency)}"
        )

        self._draw_grid()
        self._draw_list()

    def _draw_grid(self):
        for w in self._grid.winfo_children():
            w.destroy()

        for c, name in enumerate(_WEEKDAYS):
            ctk.CTkLabel(
                self._grid, text=name, text_color="gray60", font=ctk.CTkFont(size=11),
            ).grid(row=0, column=c, pady=(0, 2))

        first, _ = month_bounds(self.month)
        now = today()
        weeks = calendar.monthcalendar(first.year, first.month)
        for r, week in enumerate(weeks, start=1):
            self._grid.grid_rowconfigure(r, weight=1, uniform="week")
            for c, day in enumerate(week):
                if day == 0:
                    continue
                is_today = (first.year, first.month, day) == (now.year, now.month, now.day)
                self._draw_cell(r, c, day, is_today)

    def _draw_cell(self, row, col, day, is_today):
        selected = day == self._selected_day
        cell = ctk.CTkFrame(
            self._grid,
            fg_color=("gray80", "gray28") if selected else ("gray90", "gray20"),
            border_width=2 if is_today else 0,
            border_color="#2196F3",
            corner_radius=6,
        )
        cell.grid(row=row, column=col, sticky="nsew", padx=2, pady=2)

        header = ctk.CTkLabel(
            cell, text=str(day), anchor="w",
            font=ctk.CTkFont(size=12, weight="bold"),
        )
        header.pack(fill="x", padx=6, pady=(2, 0))
        widgets = [cell, header]

        items = self._days.get(day, [])
        for inst in items[:_MAX_LINES]:
            mark = "✓ " if inst.is_paid else ""
            line = ctk.CTkLabel(
                cell, text=f"{mark}{inst.title}", anchor="w", height=14,
                text_color=_EXPENSE if inst.is_expense else _INCOME,
                font=ctk.CTkFont(size=10),
            )
            line.pack(fill="x", padx=6)
            widgets.append(line)
        if len(items) > _MAX_LINES:
            more = ctk.CTkLabel(
                cell, text=f"+{len(items) - _MAX_LINES} more", anchor="w", height=14,
                text_color="gray60", font=ctk.CTkFont(size=10),
            )
            more.pack(fill="x", padx=6)
            widgets.append(more)

        for w in widgets:
            w.bind("<Button-1>", lambda _e, d=day: self._select_day(d))
            w.bind("<Double-Button-1>", lambda _e, d=day: self._open_add(True, d))

    def _select_day(self, day: int):
        self._selected_day = None if day == self._selected_day else day
        self._draw_grid()
        self._draw_list()

    def _draw_list(self):
        for w in self._list.winfo_children():
            w.destroy()

        if self._selected_day:
            items = self._days.get(self._selected_day, [])
            first, _ = month_bounds(self.month)
            self._day_title.configure(
                text=format_display_date(first.replace(day=self._selected_day).isoformat())
            )
        else:
            items = [i for d in sorted(self._days) for i in self._days[d]]
            self._day_title.configure(text=f"All of {friendly_month(self.month)}")

        if not items:
            ctk.CTkLabel(
                self._list, text="Nothing scheduled.", text_color="gray60",
            ).grid(row=0, column=0, pady=30)
            return
        for idx, inst in enumerate(items):
            self._add_row(idx, inst)

    def _add_row(self, idx, inst: TransactionInstance):
        row = ctk.CTkFrame(self._list, fg_color=("gray85", "gray17"), corner_radius=8)
        row.grid(row=idx, column=0, sticky="ew", padx=4, pady=3)
        row.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(
            row, text="", width=6, height=36, corner_radius=3,
            fg_color=inst.category_color,
        ).grid(row=0, column=0, rowspan=2, padx=(8, 0), pady=6)

        title = inst.title + ("  ↻" if inst.is_recurring else "")
        ctk.CTkLabel(
            row, text=title, anchor="w", font=ctk.CTkFont(size=12, weight="bold"),
        ).grid(row=0, column=1, padx=8, pady=(6, 0), sticky="w")
        ctk.CTkLabel(
            row, text=f"{format_display_date(inst.instance_date)} · {inst.category_name} · {inst.person_label}",
            anchor="w", text_color="gray60", font=ctk.CTkFont(size=10),
        ).grid(row=1, column=1, padx=8, pady=(0, 6), sticky="w")

        sign = "-" if inst.is_expense else "+"
        ctk.CTkLabel(
            row, text=f"{sign}{format_currency(inst.amount, self._currency)}",
            text_color=_EXPENSE if inst.is_expense else _INCOME,
            font=ctk.CTkFont(size=12, weight="bold"),
        ).grid(row=0, column=2, padx=8, pady=(6, 0), sticky="e")

        btns = ctk.CTkFrame(row, fg_color="transparent")
        btns.grid(row=1, column=2, padx=(4, 8), pady=(0, 6), sticky="e")
        ctk.CTkButton(
            btns, text="✓ Paid" if inst.is_paid else "Mark paid", width=72, height=22,
            fg_color=_INCOME if inst.is_paid else "transparent",
            border_width=0 if inst.is_paid else 1,
            text_color=("gray10", "gray90"),
            command=lambda i=inst: self._toggle_paid(i),
        ).pack(side="left", padx=(0, 4))
        ctk.CTkButton(
            btns, text="Edit", width=44, height=22,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda i=inst: self._open_edit(i),
        ).pack(side="left", padx=(0, 4))
        ctk.CTkButton(
            btns, text="Skip" if inst.is_recurring else "Delete", width=52, height=22,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda i=inst: self._on_delete(i),
        ).pack(side="left")

    # ── Actions ─────────────────────────────────────────────────────────────
    def _toggle_paid(self, inst: TransactionInstance):
        self._inst_svc.toggle_paid(inst)
        self._notify_refresh("override" if inst.is_recurring else "transaction")

    def _open_add(self, is_expense: bool, day: int | None = None):
        initial = None
        if day:
            first, _ = month_bounds(self.month)
            initial = first.replace(day=day).isoformat()
        form = TransactionForm(
            self.winfo_toplevel(), self._tx_svc, self._cat_svc,
            is_expense=is_expense, initial_date=initial,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _open_edit(self, inst: TransactionInstance):
        tx = self._tx_svc.get_by_id(inst.id)
        if tx is None:
            log.warning("Transaction %s vanished before it could be edited", inst.id)
            self._load()
            return
        form = TransactionForm(self.winfo_toplevel(), self._tx_svc, self._cat_svc, transaction=tx)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _on_delete(self, inst: TransactionInstance):
        if inst.is_recurring:
            dlg = ConfirmDialog(
                self.winfo_toplevel(),
                title="Skip Occurrence",
                message=(
                    f"Hide '{inst.title}' for {friendly_month(inst.instance_date[:7])}? "
                    "Other months are not affected and it can be restored from the Skipped tab."
                ),
                confirm_text="Skip",
            )
            if dlg.result:
                self._inst_svc.delete_occurrence(inst)
                self._notify_refresh("override")
            return

        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            title="Delete Transaction",
            message=f"Delete '{inst.title}'? This cannot be undone.",
            confirm_text="Delete",
        )
        if dlg.result:
            self._inst_svc.delete_occurrence(inst)
            self._notify_refresh("transaction")
