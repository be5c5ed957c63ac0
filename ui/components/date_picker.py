import customtkinter as ctk
import tkinter as tk
from tkinter import ttk
from datetime import date
from tkcalendar import Calendar
from utils.date_helpers import format_date, parse_date


class DatePickerWidget(ctk.CTkFrame):
    """CTkEntry holding a YYYY-MM-DD date plus a calendar popup button.

    An empty entry is allowed when `optional` is set (used for end dates).
    """

    def __init__(
        self,
        master,
        initial_date: str | None = None,
        optional: bool = False,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self._optional = optional
        self._popup: ctk.CTkToplevel | None = None

        self._var = tk.StringVar(value=initial_date or "")
        self._entry = ctk.CTkEntry(
            self, textvariable=self._var, width=110,
            placeholder_text="YYYY-MM-DD" if optional else None,
        )
        self._entry.grid(row=0, column=0, sticky="ew")
        self._entry.bind("<FocusOut>", self._on_focus_out)
        self._entry.bind("<Return>", self._on_focus_out)

        ctk.CTkButton(
            self, text="📅", width=32, command=self._open_popup
        ).grid(row=0, column=1, padx=(4, 0))

    def get(self) -> str:
        """Return the normalised YYYY-MM-DD string, or the raw text if invalid."""
        raw = self._var.get().strip()
        d = parse_date(raw)
        return format_date(d) if d else raw

    def set(self, date_str: str | None):
        self._var.set(date_str or "")
        self._reset_border()

    def is_valid(self) -> bool:
        raw = self._var.get().strip()
        if not raw:
            return self._optional
        return parse_date(raw) is not None

    def _on_focus_out(self, _event=None):
        if self.is_valid():
            if self._var.get().strip():
                self._var.set(self.get())
            self._reset_border()
        else:
            self._entry.configure(border_color="#F44336")

    def _reset_border(self):
        self._entry.configure(border_color=("gray65", "gray35"))

    def _open_popup(self):
        if self._popup and self._popup.winfo_exists():
            self._popup.destroy()
            self._popup = None
            return

        popup = ctk.CTkToplevel(self)
        popup.overrideredirect(True)
        popup.resizable(False, False)
        self._popup = popup

        dark = ctk.get_appearance_mode() == "Dark"
        bg, fg = ("#2b2b2b", "#ffffff") if dark else ("#ffffff", "#000000")
        style = ttk.Style(popup)
        style.theme_use("default")

        current = parse_date(self._var.get().strip()) or date.today()
        cal = Calendar(
            popup,
            selectmode="day",
            year=current.year,
            month=current.month,
            day=current.day,
            date_pattern="yyyy-mm-dd",
            firstweekday="monday",
            background=bg,
            foreground=fg,
            headersbackground=bg,
            headersforeground=fg,
            selectbackground="#1f6aa5",
            weekendbackground=bg,
            weekendforeground=fg,
            othermonthforeground="gray60",
            bordercolor=bg,
        )
        cal.pack(padx=4, pady=4)
        cal.bind("<<CalendarSelected>>", lambda e: self._on_date_selected(cal, popup))

        self._entry.update_idletasks()
        x = self._entry.winfo_rootx()
        y = self._entry.winfo_rooty() + self._entry.winfo_height() + 2
        popup.geometry(f"+{x}+{y}")

    def _on_date_selected(self, cal, popup):
        self._var.set(cal.get_date())
        self._reset_border()
        popup.destroy()
        self._popup = None
