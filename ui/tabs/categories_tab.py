import customtkinter as ctk
from models.category import Category
from services.category_service import CategoryService
from ui.components.category_form import CategoryForm
from ui.components.confirm_dialog import ConfirmDialog


class CategoriesTab(ctk.CTkFrame):
    """Expense and income categories side by side, with usage counts."""

    def __init__(
        self,
        master,
        category_service: CategoryService,
        notify_refresh,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = category_service
        self._notify_refresh = notify_refresh

        self.grid_columnconfigure((0, 1), weight=1, uniform="kind")
        self.grid_rowconfigure(1, weight=1)

        self._error_var = ctk.StringVar()
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, columnspan=2, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Categories", font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left", padx=(12, 16), pady=8)
        ctk.CTkLabel(bar, textvariable=self._error_var, text_color="#F44336").pack(side="right", padx=12)

        self._columns = {
            True: self._build_column(0, "Expenses", "#F44336"),
            False: self._build_column(1, "Income", "#4CAF50"),
        }
        self._load()

    def refresh(self):
        self._load()

    def _build_column(self, col, title, color):
        outer = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=8)
        outer.grid(row=1, column=col, sticky="nsew", padx=(8, 4) if col == 0 else (4, 8), pady=8)
        outer.grid_columnconfigure(0, weight=1)
        outer.grid_rowconfigure(1, weight=1)

        head = ctk.CTkFrame(outer, fg_color="transparent")
        head.grid(row=0, column=0, sticky="ew", padx=10, pady=(8, 4))
        ctk.CTkLabel(
            head, text=title, text_color=color, font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left")
        is_expense = col == 0
        ctk.CTkButton(
            head, text="+ Add", width=70, height=26,
            command=lambda: self._open_form(is_expense=is_expense),
        ).pack(side="right")

        body = ctk.CTkScrollableFrame(outer, fg_color="transparent")
        body.grid(row=1, column=0, sticky="nsew", padx=4, pady=(0, 8))
        body.grid_columnconfigure(0, weight=1)
        return body

    def _load(self):
        for body in self._columns.values():
            for w in body.winfo_children():
                w.destroy()

        grouped: dict[bool, list[Category]] = {True: [], False: []}
        for cat in self._svc.get_all():
            grouped[cat.is_expense].append(cat)

        for is_expense, cats in grouped.items():
            body = self._columns[is_expense]
            if not cats:
                ctk.CTkLabel(body, text="None yet.", text_color="gray60").grid(row=0, column=0, pady=30)
            for idx, cat in enumerate(cats):
                self._add_row(body, idx, cat)

    def _add_row(self, body, idx, cat: Category):
        used = self._svc.usage_count(cat.id)
        row = ctk.CTkFrame(body, fg_color=("gray85", "gray17"), corner_radius=8)
        row.grid(row=idx, column=0, sticky="ew", padx=2, pady=2)
        row.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(
            row, text="", width=10, height=28, corner_radius=3, fg_color=cat.color_hex,
        ).grid(row=0, column=0, padx=(8, 0), pady=6)
        ctk.CTkLabel(
            row, text=cat.label, anchor="w", font=ctk.CTkFont(size=13),
        ).grid(row=0, column=1, padx=8, sticky="w")
        ctk.CTkLabel(
            row, text=f"{used} used" if used else "unused",
            text_color="gray60", font=ctk.CTkFont(size=10),
        ).grid(row=0, column=2, padx=4)

        ctk.CTkButton(
            row, text="Edit", width=50, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda c=cat: self._open_form(category=c),
        ).grid(row=0, column=3, padx=(4, 2))
        ctk.CTkButton(
            row, text="✕", width=28, height=24,
            fg_color="gray50" if used else "#F44336", hover_color="#D32F2F",
            state="disabled" if used else "normal",
            command=lambda c=cat: self._on_delete(c),
        ).grid(row=0, column=4, padx=(2, 8))

    def _open_form(self, category: Category | None = None, is_expense: bool = True):
        self._error_var.set("")
        form = CategoryForm(
            self.winfo_toplevel(), self._svc, category=category, is_expense=is_expense,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("category")

    def _on_delete(self, cat: Category):
        self._error_var.set("")
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            title="Delete Category",
            message=f"Delete '{cat.name}'?",
        )
        if not dlg.result:
            return
        try:
            self._svc.delete(cat.id)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self._notify_refresh("category")
