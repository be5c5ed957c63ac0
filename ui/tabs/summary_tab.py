import csv
import logging
import tkinter as tk

import customtkinter as ctk
from matplotlib.figure import Figure
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from services.report_service import ReportService
from utils.currency import format_currency
from utils.date_helpers import (
    current_month_str, format_display_date, friendly_month, next_month, prev_month,
)

log = logging.getLogger(__name__)

_PERIOD_LABELS = {
    "this_week": "This week",
    "next_week": "Next week",
    "this_month": "This month",
    "this_year": "This year",
}


class SummaryTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        report_service: ReportService,
        initial_month: str | None = None,
        currency: str = "zł",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._report_svc = report_service
        self._currency = currency
        self._month_var = ctk.StringVar(value=initial_month or current_month_str())

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._body = ctk.CTkScrollableFrame(self, fg_color="transparent")
        self._body.grid(row=1, column=0, sticky="nsew", padx=4, pady=4)
        self._body.grid_columnconfigure(0, weight=1)

        self._build_summary()
        self._build_charts()
        self._build_lists()
        self._load()

    def refresh(self):
        self._load()

    def set_month(self, month: str):
        self._month_var.set(month)
        self._load()

    def _money(self, value: float) -> str:
        return format_currency(value, self._currency)

    # ── Layout ──────────────────────────────────────────────────────────────
    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkLabel(bar, text="Month:").pack(side="left", padx=(12, 4), pady=8)
        ctk.CTkButton(bar, text="◀", width=28, command=self._prev_month).pack(side="left")
        self._month_label = ctk.CTkLabel(bar, text="", width=130, anchor="center")
        self._month_label.pack(side="left", padx=4)
        ctk.CTkButton(bar, text="▶", width=28, command=self._next_month).pack(side="left", padx=(0, 12))

        ctk.CTkButton(bar, text="Export CSV", command=self._export_csv).pack(side="right", padx=8)

    def _prev_month(self):
        self.set_month(prev_month(self._month_var.get()))

    def _next_month(self):
        self.set_month(next_month(self._month_var.get()))

    def _build_summary(self):
        self._summary_frame = ctk.CTkFrame(self._body, fg_color="transparent")
        self._summary_frame.grid(row=0, column=0, sticky="ew", padx=12, pady=(6, 4))
        self._summary_frame.grid_columnconfigure(tuple(range(6)), weight=1)

        self._period_frame = ctk.CTkFrame(self._body, fg_color="transparent")
        self._period_frame.grid(row=1, column=0, sticky="ew", padx=12, pady=(0, 6))
        self._period_frame.grid_columnconfigure(tuple(range(4)), weight=1)

    def _build_charts(self):
        charts = ctk.CTkFrame(self._body, fg_color="transparent")
        charts.grid(row=2, column=0, sticky="ew", padx=12, pady=6)
        charts.grid_columnconfigure(0, weight=3)
        charts.grid_columnconfigure(1, weight=2)

        bar_outer = ctk.CTkFrame(charts, fg_color=("gray90", "gray20"), corner_radius=8)
        bar_outer.grid(row=0, column=0, sticky="nsew", padx=(0, 8))
        ctk.CTkLabel(
            bar_outer, text="Income vs Expenses",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(pady=(10, 0))
        self._bar_fig = Figure(figsize=(5, 2.8), dpi=80, tight_layout=True)
        self._bar_ax = self._bar_fig.add_subplot(111)
        self._bar_mpl = FigureCanvasTkAgg(self._bar_fig, master=bar_outer)
        self._bar_mpl.get_tk_widget().pack(fill="both", expand=True, padx=8, pady=(4, 10))

        pie_outer = ctk.CTkFrame(charts, fg_color=("gray90", "gray20"), corner_radius=8)
        pie_outer.grid(row=0, column=1, sticky="nsew")
        ctk.CTkLabel(
            pie_outer, text="Expenses by Category",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(pady=(10, 0))
        self._pie_fig = Figure(figsize=(3, 2.8), dpi=80, tight_layout=True)
        self._pie_ax = self._pie_fig.add_subplot(111)
        self._pie_mpl = FigureCanvasTkAgg(self._pie_fig, master=pie_outer)
        self._pie_mpl.get_tk_widget().pack(fill="both", expand=True, padx=8, pady=(4, 4))
        self._legend_frame = ctk.CTkFrame(pie_outer, fg_color="transparent")
        self._legend_frame.pack(fill="x", padx=8, pady=(0, 8))

    def _build_lists(self):
        lists = ctk.CTkFrame(self._body, fg_color="transparent")
        lists.grid(row=3, column=0, sticky="ew", padx=12, pady=(6, 12))
        lists.grid_columnconfigure(tuple(range(4)), weight=1, uniform="panel")

        self._upcoming_panel = self._panel(lists, 0, "Upcoming this month")
        self._recurring_panel = self._panel(lists, 1, "Recurring expenses")
        self._subs_panel = self._panel(lists, 2, "Subscriptions")
        self._people_panel = self._panel(lists, 3, "By person")

    def _panel(self, master, col, title):
        outer = ctk.CTkFrame(master, fg_color=("gray90", "gray20"), corner_radius=8)
        outer.grid(row=0, column=col, sticky="nsew", padx=4)
        ctk.CTkLabel(
            outer, text=title, anchor="w", font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(fill="x", padx=10, pady=(8, 2))
        inner = ctk.CTkFrame(outer, fg_color="transparent")
        inner.pack(fill="both", expand=True, padx=6, pady=(0, 8))
        return inner

    def _style_ax(self, ax, fig):
        is_dark = ctk.get_appearance_mode() == "Dark"
        bg = "#2b2b2b" if is_dark else "#e4e4e4"
        fg = "#aaaaaa" if is_dark else "#444444"
        fig.patch.set_facecolor(bg)
        ax.set_facecolor(bg)
        ax.tick_params(colors=fg, labelsize=8)
        for spine in ax.spines.values():
            spine.set_edgecolor(fg)

    # ── Loading ─────────────────────────────────────────────────────────────
    def _load(self):
        month = self._month_var.get()
        self._month_label.configure(text=friendly_month(month))

        self._load_cards(month)
        self._load_periods()

        self.after(50, lambda m=month: self._draw_bar_chart(m))
        breakdown = self._report_svc.get_category_breakdown(month)
        self.after(50, lambda b=breakdown: self._draw_pie_chart(b))
        self._load_legend(breakdown)

        self._load_upcoming()
        self._load_recurring()
        self._load_subscriptions()
        self._load_people(month)

    def _load_cards(self, month):
        for w in self._summary_frame.winfo_children():
            w.destroy()
        s = self._report_svc.get_summary(month)
        cards = [
            ("Income", self._money(s["income"]), "#4CAF50"),
            ("Expenses", self._money(s["expense"]), "#F44336"),
            ("Balance", self._money(s["balance"]), "#2196F3" if s["balance"] >= 0 else "#FF9800"),
            ("Still to pay", self._money(s["unpaid_expense"]), "#FF9800"),
            ("Saved", self._money(s["saved"]), "#9C27B0"),
            ("Savings rate", f"{s['savings_rate']:.0f}%", "#2196F3"),
        ]
        for i, (label, text, color) in enumerate(cards):
            card = ctk.CTkFrame(self._summary_frame, fg_color=("gray90", "gray20"), corner_radius=10)
            card.grid(row=0, column=i, padx=4, sticky="ew")
            ctk.CTkLabel(card, text=label, text_color="gray60").pack(pady=(10, 0), padx=12)
            ctk.CTkLabel(
                card, text=text,
                font=ctk.CTkFont(size=16, weight="bold"),
                text_color=color,
            ).pack(pady=(4, 10), padx=12)
        if s["skipped"]:
            ctk.CTkLabel(
                self._summary_frame,
                text=f"{s['skipped']} skipped occurrence{'s' if s['skipped'] != 1 else ''} not counted",
                text_color="gray60", font=ctk.CTkFont(size=11),
            ).grid(row=1, column=0, columnspan=6, sticky="w", padx=6, pady=(4, 0))

    def _load_periods(self):
        for w in self._period_frame.winfo_children():
            w.destroy()
        totals = self._report_svc.get_period_totals()
        for i, (key, label) in enumerate(_PERIOD_LABELS.items()):
            t = totals[key]
            ctk.CTkLabel(
                self._period_frame,
                text=f"{label}: +{self._money(t['income'])} / -{self._money(t['expense'])}",
                text_color="gray60", font=ctk.CTkFont(size=11),
            ).grid(row=0, column=i, padx=4, sticky="w")

    def _load_legend(self, breakdown):
        for w in self._legend_frame.winfo_children():
            w.destroy()
        for item in breakdown[:8]:
            row = ctk.CTkFrame(self._legend_frame, fg_color="transparent")
            row.pack(fill="x", pady=1)
            tk.Label(row, bg=item["color_hex"], width=2).pack(side="left", padx=(0, 4))
            ctk.CTkLabel(
                row, text=f"{item['category']}: {self._money(item['total'])}",
                anchor="w", font=ctk.CTkFont(size=11),
            ).pack(side="left")

    def _list_line(self, panel, left, right, color=None):
        row = ctk.CTkFrame(panel, fg_color="transparent")
        row.pack(fill="x", pady=1)
        ctk.CTkLabel(
            row, text=left, anchor="w", font=ctk.CTkFont(size=11),
            text_color=color or ("gray10", "gray90"),
        ).pack(side="left", padx=4)
        ctk.CTkLabel(row, text=right, anchor="e", font=ctk.CTkFont(size=11)).pack(side="right", padx=4)

    def _total_line(self, panel, text):
        ctk.CTkLabel(
            panel, text=text, anchor="e", font=ctk.CTkFont(size=12, weight="bold"),
        ).pack(fill="x", padx=4, pady=(4, 0))

    def _empty(self, panel, text):
        ctk.CTkLabel(panel, text=text, text_color="gray60").pack(pady=12)

    def _load_upcoming(self):
        panel = self._upcoming_panel
        for w in panel.winfo_children():
            w.destroy()
        data = self._report_svc.get_upcoming_expenses()
        if not data["items"]:
            self._empty(panel, "Nothing left to pay.")
            return
        for item in data["items"]:
            inst = item["instance"]
            color = "#F44336" if item["due_today"] else ("#FF9800" if item["due_soon"] else None)
            self._list_line(
                panel, f"{format_display_date(inst.instance_date)}  {inst.title}",
                self._money(inst.amount), color,
            )
        self._total_line(panel, self._money(data["total"]))

    def _load_recurring(self):
        panel = self._recurring_panel
        for w in panel.winfo_children():
            w.destroy()
        data = self._report_svc.get_recurring_expenses()
        if not data["items"]:
            self._empty(panel, "No recurring expenses.")
            return
        for tx in data["items"]:
            self._list_line(
                panel, f"{tx.title} ({tx.recurring_interval})", self._money(tx.amount),
            )
        self._total_line(panel, self._money(data["total"]))

    def _load_subscriptions(self):
        panel = self._subs_panel
        for w in panel.winfo_children():
            w.destroy()
        data = self._report_svc.get_subscriptions()
        if not data["items"]:
            self._empty(panel, "No subscriptions.")
            return
        for item in data["items"]:
            tx = item["transaction"]
            nxt = item["next_payment"]
            when = format_display_date(nxt.isoformat()) if nxt else "ended"
            self._list_line(panel, f"{tx.title} · next {when}", self._money(tx.amount))
        self._total_line(panel, f"{self._money(data['monthly_total'])} / month")

    def _load_people(self, month):
        panel = self._people_panel
        for w in panel.winfo_children():
            w.destroy()
        rows = self._report_svc.get_person_breakdown(month)
        if not rows:
            self._empty(panel, "No activity.")
            return
        for r in rows:
            self._list_line(
                panel, r["person"],
                f"+{self._money(r['income'])}  -{self._money(r['expense'])}",
            )

    # ── Charts ──────────────────────────────────────────────────────────────
    def _draw_bar_chart(self, month):
        ax = self._bar_ax
        ax.clear()
        self._style_ax(ax, self._bar_fig)

        data = self._report_svc.get_monthly_chart_data(month)
        if not any(d["income"] or d["expense"] for d in data):
            ax.text(0.5, 0.5, "No data", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            self._bar_mpl.draw_idle()
            return

        labels = [d["month"][5:] for d in data]
        x = list(range(len(labels)))
        w = 0.35
        ax.bar([i - w / 2 for i in x], [d["income"] for d in data], w, color="#4CAF50")
        ax.bar([i + w / 2 for i in x], [d["expense"] for d in data], w, color="#F44336")
        ax.plot(x, [d["net"] for d in data], color="#2196F3", marker="o", linewidth=1)
        ax.axhline(0, color="gray", linewidth=0.5)
        ax.set_xticks(x)
        ax.set_xticklabels(labels)
        ax.yaxis.set_major_formatter(
            lambda v, _: f"{v/1000:.0f}k" if abs(v) >= 1000 else f"{v:.0f}"
        )
        self._bar_mpl.draw_idle()

    def _draw_pie_chart(self, breakdown):
        ax = self._pie_ax
        ax.clear()
        self._style_ax(ax, self._pie_fig)

        total = sum(d["total"] for d in breakdown)
        if total == 0:
            ax.text(0.5, 0.5, "No expense data", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            self._pie_mpl.draw_idle()
            return

        ax.pie(
            [d["total"] for d in breakdown],
            colors=[d["color_hex"] for d in breakdown],
            startangle=90,
            wedgeprops={"width": 0.45},
        )
        ax.set_aspect("equal")
        self._pie_mpl.draw_idle()

    # ── Export ──────────────────────────────────────────────────────────────
    def _export_csv(self):
        from tkinter import filedialog, messagebox
        month = self._month_var.get()
        path = filedialog.asksaveasfilename(
            defaultextension=".csv",
            filetypes=[("CSV files", "*.csv")],
            initialfile=f"budget_{month}.csv",
        )
        if not path:
            return
        rows = self._report_svc.export_csv(month)
        try:
            with open(path, "w", newline="", encoding="utf-8") as f:
                csv.writer(f).writerows(rows)
        except OSError as e:
            log.error("CSV export to %s failed: %s", path, e)
            messagebox.showerror("Export failed", str(e), parent=self)
            return
        log.info("Exported %d row(s) for %s to %s", len(rows) - 1, month, path)
