import customtkinter as ctk
from services.savings_service import SavingsService
from ui.components.date_picker import DatePickerWidget
from utils.date_helpers import today_str


class SavingsForm(ctk.CTkToplevel):
    """Record a manual savings contribution."""

    def __init__(self, master, savings_service: SavingsService, person_labels: list[str], **kwargs):
        super().__init__(master, **kwargs)
        self._svc = savings_service
        self.saved = False

        self.title("Add Savings")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(self, text="Amount:").grid(row=0, column=0, padx=(16, 8), pady=(16, 4), sticky="e")
        self._amount_var = ctk.StringVar()
        ctk.CTkEntry(self, textvariable=self._amount_var, width=200).grid(
            row=0, column=1, padx=(0, 16), pady=(16, 4), sticky="ew"
        )

        ctk.CTkLabel(self, text="Date:").grid(row=1, column=0, padx=(16, 8), pady=4, sticky="e")
        self._date_picker = DatePickerWidget(self, initial_date=today_str())
        self._date_picker.grid(row=1, column=1, padx=(0, 16), pady=4, sticky="w")

        ctk.CTkLabel(self, text="Person:").grid(row=2, column=0, padx=(16, 8), pady=4, sticky="e")
        self._person_var = ctk.StringVar(value=person_labels[-1])
        ctk.CTkComboBox(
            self, values=person_labels, variable=self._person_var, width=200, state="readonly",
        ).grid(row=2, column=1, padx=(0, 16), pady=4, sticky="ew")

        ctk.CTkLabel(self, text="Notes:").grid(row=3, column=0, padx=(16, 8), pady=4, sticky="e")
        self._notes_var = ctk.StringVar()
        ctk.CTkEntry(self, textvariable=self._notes_var, width=200).grid(
            row=3, column=1, padx=(0, 16), pady=4, sticky="ew"
        )

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var, text_color="#F44336", wraplength=280, anchor="w",
        ).grid(row=4, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=5, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()

    def _on_save(self):
        if not self._date_picker.is_valid():
            self._error_var.set("Invalid date.")
            return
        try:
            self._svc.create(
                self._amount_var.get(), self._date_picker.get(),
                self._person_var.get(), self._notes_var.get(),
            )
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()
