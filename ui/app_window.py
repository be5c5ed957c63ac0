import logging

import customtkinter as ctk
from database.db_manager import DatabaseManager
from services.category_service import CategoryService
from services.instance_service import InstanceService
from services.override_service import OverrideService
from services.report_service import ReportService
from services.savings_service import SavingsService
from services.transaction_service import TransactionService
from ui.tabs.calendar_tab import CalendarTab
from ui.tabs.summary_tab import SummaryTab
from ui.tabs.savings_tab import SavingsTab
from ui.tabs.categories_tab import CategoriesTab
from ui.tabs.skipped_tab import SkippedTab
from utils.constants import APP_NAME, APP_WIDTH, APP_HEIGHT, DEFAULT_CURRENCY_SYMBOL

log = logging.getLogger(__name__)

_REFRESH_SCOPES: dict[str, set[str]] = {
    "transaction": {"calendar", "summary", "skipped"},
    "override":    {"calendar", "summary", "skipped"},
    "category":    {"calendar", "summary", "categories"},
    "savings":     {"summary", "savings"},
    "full":        {"calendar", "summary", "savings", "categories", "skipped"},
}

_APPEARANCE_MODES = ["System", "Light", "Dark"]


class AppWindow(ctk.CTk):
    def __init__(
        self,
        db: DatabaseManager,
        tx_service: TransactionService,
        instance_service: InstanceService,
        override_service: OverrideService,
        report_service: ReportService,
        category_service: CategoryService,
        savings_service: SavingsService,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._db = db
        self._tx_svc = tx_service
        self._inst_svc = instance_service
        self._override_svc = override_service
        self._report_svc = report_service
        self._cat_svc = category_service
        self._savings_svc = savings_service
        self._currency = db.get_setting("currency_symbol", DEFAULT_CURRENCY_SYMBOL)
        self._initial_month = db.get_setting("last_month") or None

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_header()
        self._build_tabs()

    # ── Header ──────────────────────────────────────────────────────────────
    def _build_header(self):
        bar = ctk.CTkFrame(self, fg_color=("gray85", "gray15"), corner_radius=0, height=44)
        bar.grid(row=0, column=0, sticky="ew")
        bar.grid_propagate(False)

        ctk.CTkLabel(
            bar, text=APP_NAME, font=ctk.CTkFont(size=15, weight="bold"),
        ).pack(side="left", padx=12, pady=8)

        mode = self._db.get_setting("appearance_mode", "System")
        self._mode_var = ctk.StringVar(value=mode if mode in _APPEARANCE_MODES else "System")
        ctk.CTkSegmentedButton(
            bar, values=_APPEARANCE_MODES, variable=self._mode_var,
            command=self._on_appearance_changed,
        ).pack(side="right", padx=12, pady=8)
        ctk.CTkLabel(bar, text="Theme:", text_color="gray60").pack(side="right")

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=1, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in ["Calendar", "Summary", "Savings", "Categories", "Skipped"]:
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._calendar_tab = CalendarTab(
            self._tabview.tab("Calendar"),
            instance_service=self._inst_svc,
            tx_service=self._tx_svc,
            category_service=self._cat_svc,
            notify_refresh=self.notify_tabs_refresh,
            on_month_changed=self._on_month_changed,
            initial_month=self._initial_month,
            currency=self._currency,
        )
        self._calendar_tab.grid(row=0, column=0, sticky="nsew")

        self._summary_tab = SummaryTab(
            self._tabview.tab("Summary"),
            report_service=self._report_svc,
            initial_month=self._initial_month,
            currency=self._currency,
        )
        self._summary_tab.grid(row=0, column=0, sticky="nsew")

        self._savings_tab = SavingsTab(
            self._tabview.tab("Savings"),
            savings_service=self._savings_svc,
            person_labels=self._tx_svc.person_labels,
            notify_refresh=self.notify_tabs_refresh,
            currency=self._currency,
        )
        self._savings_tab.grid(row=0, column=0, sticky="nsew")

        self._categories_tab = CategoriesTab(
            self._tabview.tab("Categories"),
            category_service=self._cat_svc,
            notify_refresh=self.notify_tabs_refresh,
        )
        self._categories_tab.grid(row=0, column=0, sticky="nsew")

        self._skipped_tab = SkippedTab(
            self._tabview.tab("Skipped"),
            override_service=self._override_svc,
            tx_service=self._tx_svc,
            notify_refresh=self.notify_tabs_refresh,
            currency=self._currency,
        )
        self._skipped_tab.grid(row=0, column=0, sticky="nsew")

    # ── Settings ────────────────────────────────────────────────────────────
    def _on_appearance_changed(self, mode: str):
        ctk.set_appearance_mode(mode)
        self._db.set_setting("appearance_mode", mode)
        # charts pick their colors at draw time
        self._summary_tab.refresh()

    def _on_month_changed(self, month: str):
        self._db.set_setting("last_month", month)
        self._summary_tab.set_month(month)

    # ── Refresh ──────────────────────────────────────────────────────────────
    def notify_tabs_refresh(self, scope: str = "full"):
        tabs = _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"])
        log.debug("Refreshing %s after %s change", sorted(tabs), scope)
        if "calendar"   in tabs: self._calendar_tab.refresh()
        if "summary"    in tabs: self._summary_tab.refresh()
        if "savings"    in tabs: self._savings_tab.refresh()
        if "categories" in tabs: self._categories_tab.refresh()
        if "skipped"    in tabs: self._skipped_tab.refresh()
