import customtkinter as ctk
from services.category_service import CategoryService
from services.transaction_service import TransactionService
from models.transaction import Transaction
from ui.components.date_picker import DatePickerWidget
from utils.constants import RECURRING_INTERVALS
from utils.date_helpers import today_str


class TransactionForm(ctk.CTkToplevel):
    """Add or edit an income or expense, one-off or recurring."""

    _last_date: str = today_str()  # reset to today on each app launch

    def __init__(
        self,
        master,
        tx_service: TransactionService,
        category_service: CategoryService,
        is_expense: bool = True,
        transaction: Transaction | None = None,
        initial_date: str | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._tx_svc = tx_service
        self._cat_svc = category_service
        self._transaction = transaction
        self.saved = False

        if transaction:
            is_expense = transaction.is_expense
        kind = "Expense" if is_expense else "Income"
        self.title(f"{'Edit' if transaction else 'Add'} {kind}")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        tx = transaction
        r = 0

        # Type
        self._label("Type:", r)
        self._kind_var = ctk.StringVar(value="expense" if is_expense else "income")
        kind_frame = ctk.CTkFrame(self, fg_color="transparent")
        kind_frame.grid(row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="w")
        for k in ("expense", "income"):
            ctk.CTkRadioButton(
                kind_frame, text=k.title(), variable=self._kind_var, value=k,
                command=self._on_kind_change,
            ).pack(side="left", padx=4)
        r += 1

        # Title with suggestions from earlier transactions
        self._label("Title:", r)
        self._title_var = ctk.StringVar(value=tx.title if tx else "")
        self._title_combo = ctk.CTkComboBox(
            self, values=self._tx_svc.get_unique_titles()[:30],
            variable=self._title_var, width=220,
        )
        self._title_combo.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        self._title_combo.bind("<KeyRelease>", self._on_title_typed)
        r += 1

        # Amount
        self._label("Amount:", r)
        self._amount_var = ctk.StringVar(value=f"{tx.amount:.2f}" if tx else "")
        ctk.CTkEntry(self, textvariable=self._amount_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        # Date
        self._label("Date:", r)
        self._date_picker = DatePickerWidget(
            self, initial_date=tx.date if tx else (initial_date or TransactionForm._last_date),
        )
        self._date_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        # Category
        self._label("Category:", r)
        self._cat_var = ctk.StringVar()
        self._cat_combo = ctk.CTkComboBox(
            self, values=[], variable=self._cat_var, width=220, state="readonly",
        )
        self._cat_combo.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        self._load_categories(tx.category_name if tx else None)
        r += 1

        # Person
        self._label("Person:", r)
        people = self._tx_svc.person_labels
        self._person_var = ctk.StringVar(value=tx.person_label if tx else people[-1])
        ctk.CTkComboBox(
            self, values=people, variable=self._person_var, width=220, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        # Recurring
        self._label("Recurring:", r)
        rec_frame = ctk.CTkFrame(self, fg_color="transparent")
        rec_frame.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        self._recurring_var = ctk.BooleanVar(value=tx.is_recurring if tx else False)
        ctk.CTkCheckBox(
            rec_frame, text="", width=24, variable=self._recurring_var,
            command=self._on_recurring_toggle,
        ).pack(side="left")
        self._interval_var = ctk.StringVar(
            value=(tx.recurring_interval if tx and tx.recurring_interval else "monthly")
        )
        self._interval_combo = ctk.CTkComboBox(
            rec_frame, values=RECURRING_INTERVALS, variable=self._interval_var,
            width=120, state="readonly",
        )
        self._interval_combo.pack(side="left", padx=(4, 0))
        r += 1

        self._label("Ends on:", r)
        self._end_picker = DatePickerWidget(
            self, initial_date=tx.recurring_end_date if tx else None, optional=True,
        )
        self._end_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        # Paid
        self._label("Paid:", r)
        self._paid_var = ctk.BooleanVar(value=tx.is_paid if tx else False)
        ctk.CTkCheckBox(self, text="", variable=self._paid_var).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="w"
        )
        r += 1

        # Notes
        self._label("Notes:", r)
        self._notes_var = ctk.StringVar(value=(tx.notes or "") if tx else "")
        ctk.CTkEntry(self, textvariable=self._notes_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._build_footer(r)
        self._on_recurring_toggle()

        self.transient(master)
        self.grab_set()
        self._center()

    def _label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _build_footer(self, r):
        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=280, anchor="w"
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        if self._transaction:
            ctk.CTkButton(
                btn_frame, text="Delete", width=90,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_delete_click,
            ).pack(side="left", padx=8)
        ctk.CTkButton(
            btn_frame, text="Save", width=110, command=self._on_save,
        ).pack(side="right")

    def _load_categories(self, selected: str | None = None):
        is_expense = self._kind_var.get() == "expense"
        self._cats = (
            self._cat_svc.get_expense_categories() if is_expense
            else self._cat_svc.get_income_categories()
        )
        names = [c.name for c in self._cats]
        self._cat_combo.configure(values=names)
        value = selected if selected in names else (names[0] if names else "")
        self._cat_var.set(value)
        self._cat_combo.set(value)

    def _on_kind_change(self):
        self._load_categories()

    def _on_title_typed(self, _event=None):
        self._title_combo.configure(
            values=self._tx_svc.get_unique_titles(self._title_var.get())[:30]
        )

    def _on_recurring_toggle(self):
        state = "readonly" if self._recurring_var.get() else "disabled"
        self._interval_combo.configure(state=state)

    def _on_save(self):
        if not self._date_picker.is_valid():
            self._error_var.set("Invalid date.")
            return
        if not self._end_picker.is_valid():
            self._error_var.set("Invalid end date.")
            return

        cat = next((c for c in self._cats if c.name == self._cat_var.get()), None)
        is_recurring = self._recurring_var.get()
        values = dict(
            title=self._title_var.get(),
            amount=self._amount_var.get(),
            date=self._date_picker.get(),
            is_expense=self._kind_var.get() == "expense",
            category_id=cat.id if cat else None,
            person_label=self._person_var.get(),
            is_recurring=is_recurring,
            recurring_interval=self._interval_var.get() if is_recurring else None,
            recurring_end_date=(self._end_picker.get() or None) if is_recurring else None,
            is_paid=self._paid_var.get(),
            notes=self._notes_var.get(),
        )
        try:
            if self._transaction:
                self._tx_svc.update(self._transaction.id, **values)
            else:
                self._tx_svc.create(**values)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        TransactionForm._last_date = self._date_picker.get()
        self.saved = True
        self.destroy()

    def _on_delete_click(self):
        """Delete the whole record; recurring ones lose every occurrence."""
        self._tx_svc.delete(self._transaction.id)
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
