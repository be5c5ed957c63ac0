import customtkinter as ctk
from services.savings_service import SavingsService
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.savings_form import SavingsForm
from utils.currency import format_currency
from utils.date_helpers import current_month_str, format_display_date


class SavingsTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        savings_service: SavingsService,
        person_labels: list[str],
        notify_refresh,
        currency: str = "zł",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = savings_service
        self._people = person_labels
        self._notify_refresh = notify_refresh
        self._currency = currency

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_toolbar()
        self._totals_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._totals_frame.grid(row=1, column=0, sticky="ew", padx=16, pady=10)
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 8))
        self._scroll.grid_columnconfigure(0, weight=1)
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Savings", font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left", padx=(12, 16), pady=8)
        ctk.CTkButton(bar, text="+ Add Savings", command=self._open_add).pack(side="left", padx=4, pady=6)

    def _load(self):
        for w in self._totals_frame.winfo_children():
            w.destroy()
        by_person = self._svc.totals_by_person()
        cards = [
            ("Total", self._svc.total()),
            ("This month", self._svc.total_for_month(current_month_str())),
        ] + [
            (p, by_person.get(p, 0.0)) for p in self._people
        ]
        self._totals_frame.grid_columnconfigure(tuple(range(len(cards))), weight=1)
        for i, (label, value) in enumerate(cards):
            card = ctk.CTkFrame(self._totals_frame, fg_color=("gray90", "gray20"), corner_radius=10)
            card.grid(row=0, column=i, padx=6, sticky="ew")
            ctk.CTkLabel(card, text=label, text_color="gray60").pack(pady=(10, 0), padx=16)
            ctk.CTkLabel(
                card, text=format_currency(value, self._currency),
                font=ctk.CTkFont(size=18, weight="bold"), text_color="#9C27B0",
            ).pack(pady=(4, 10), padx=16)

        for w in self._scroll.winfo_children():
            w.destroy()
        entries = self._svc.get_all()
        if not entries:
            ctk.CTkLabel(
                self._scroll, text="No savings recorded yet.", text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return
        for idx, entry in enumerate(entries):
            row = ctk.CTkFrame(self._scroll, fg_color=("gray90", "gray20"), corner_radius=8)
            row.grid(row=idx, column=0, sticky="ew", padx=4, pady=3)
            row.grid_columnconfigure(2, weight=1)
            ctk.CTkLabel(row, text=format_display_date(entry.date), width=100, anchor="w").grid(
                row=0, column=0, padx=(12, 4), pady=8
            )
            ctk.CTkLabel(row, text=entry.person_label, width=100, anchor="w").grid(row=0, column=1, padx=4)
            ctk.CTkLabel(row, text=entry.notes or "", anchor="w", text_color="gray60").grid(
                row=0, column=2, padx=4, sticky="w"
            )
            ctk.CTkLabel(
                row, text=format_currency(entry.amount, self._currency),
                font=ctk.CTkFont(size=13, weight="bold"),
            ).grid(row=0, column=3, padx=8)
            ctk.CTkButton(
                row, text="Delete", width=65, height=26,
                fg_color="#F44336", hover_color="#D32F2F",
                command=lambda e=entry: self._on_delete(e),
            ).grid(row=0, column=4, padx=(4, 10))

    def _open_add(self):
        form = SavingsForm(self.winfo_toplevel(), self._svc, self._people)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("savings")

    def _on_delete(self, entry):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            title="Delete Savings",
            message=f"Delete the {format_currency(entry.amount, self._currency)} entry from {format_display_date(entry.date)}?",
        )
        if dlg.result:
            self._svc.delete(entry.id)
            self._notify_refresh("savings")
