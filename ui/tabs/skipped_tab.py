import customtkinter as ctk
from models.monthly_override import MonthlyOverride
from services.override_service import OverrideService
from services.transaction_service import TransactionService
from ui.components.confirm_dialog import ConfirmDialog
from utils.currency import format_currency
from utils.date_helpers import friendly_month


class SkippedTab(ctk.CTkFrame):
    """Recurring occurrences hidden for a single month, with a way back."""

    def __init__(
        self,
        master,
        override_service: OverrideService,
        tx_service: TransactionService,
        notify_refresh,
        currency: str = "zł",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._overrides = override_service
        self._tx_svc = tx_service
        self._notify_refresh = notify_refresh
        self._currency = currency

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Skipped Occurrences", font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left", padx=(12, 16), pady=8)
        ctk.CTkButton(
            bar, text="Reset all monthly changes", width=190,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._on_clear_all,
        ).pack(side="right", padx=8, pady=6)

        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)
        self._load()

    def refresh(self):
        self._load()

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()
        skipped = self._overrides.deleted_occurrences()
        if not skipped:
            ctk.CTkLabel(
                self._scroll, text="No skipped occurrences.", text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return
        for idx, ov in enumerate(skipped):
            self._add_row(idx, ov)

    def _add_row(self, idx, ov: MonthlyOverride):
        tx = self._tx_svc.get_by_id(ov.transaction_id)
        row = ctk.CTkFrame(self._scroll, fg_color=("gray90", "gray20"), corner_radius=8)
        row.grid(row=idx, column=0, sticky="ew", padx=4, pady=3)
        row.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(row, text=friendly_month(ov.year_month), width=130, anchor="w").grid(
            row=0, column=0, padx=(12, 4), pady=8
        )
        title = tx.title if tx else f"Deleted transaction #{ov.transaction_id}"
        ctk.CTkLabel(
            row, text=title, anchor="w", font=ctk.CTkFont(size=13, weight="bold"),
            text_color=("gray10", "gray90") if tx else "gray60",
        ).grid(row=0, column=1, padx=4, sticky="w")
        if tx:
            ctk.CTkLabel(
                row, text=format_currency(tx.amount, self._currency),
                text_color="#F44336" if tx.is_expense else "#4CAF50",
            ).grid(row=0, column=2, padx=8)
        ctk.CTkButton(
            row, text="Restore", width=70, height=26,
            command=lambda o=ov: self._on_restore(o),
        ).grid(row=0, column=3, padx=(4, 10))

    def _on_restore(self, ov: MonthlyOverride):
        self._overrides.restore_for_month(ov.transaction_id, ov.year_month)
        self._notify_refresh("override")

    def _on_clear_all(self):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            title="Reset Monthly Changes",
            message=(
                "Restore every skipped occurrence and forget all per-month paid "
                "marks on recurring transactions?"
            ),
            confirm_text="Reset",
        )
        if dlg.result:
            self._overrides.clear_all()
            self._notify_refresh("override")
