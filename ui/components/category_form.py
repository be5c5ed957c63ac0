import customtkinter as ctk
from tkinter import colorchooser
from services.category_service import CategoryService
from models.category import Category
from utils.constants import DEFAULT_CATEGORIES

_PALETTE = list(dict.fromkeys(c["color_hex"] for c in DEFAULT_CATEGORIES))
_KIND_LABELS = {"Expense": True, "Income": False}


class CategoryForm(ctk.CTkToplevel):
    """Name, emoji, kind and color of a category, with a live preview chip."""

    def __init__(
        self,
        master,
        category_service: CategoryService,
        category: Category | None = None,
        is_expense: bool = True,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = category_service
        self._category = category
        self.saved = False

        self.title("Edit Category" if category else "New Category")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        c = category
        self._name_var = ctk.StringVar(value=c.name if c else "")
        self._emoji_var = ctk.StringVar(value=(c.emoji or "") if c else "")
        self._color_var = ctk.StringVar(value=c.color_hex if c else _PALETTE[0])
        kind = c.is_expense if c else is_expense
        self._kind_var = ctk.StringVar(value="Expense" if kind else "Income")

        self._preview = ctk.CTkLabel(
            self, text="", height=30, corner_radius=14,
            font=ctk.CTkFont(size=13, weight="bold"), text_color="white",
        )
        self._preview.grid(row=0, column=0, columnspan=2, padx=16, pady=(16, 10))

        fields = [
            ("Name:", ctk.CTkEntry(self, textvariable=self._name_var, width=220)),
            ("Emoji:", ctk.CTkEntry(self, textvariable=self._emoji_var, width=60)),
            ("Kind:", ctk.CTkSegmentedButton(
                self, values=list(_KIND_LABELS), variable=self._kind_var,
            )),
            ("Color:", self._build_palette()),
        ]
        for r, (text, widget) in enumerate(fields, start=1):
            ctk.CTkLabel(self, text=text).grid(row=r, column=0, padx=(16, 8), pady=4, sticky="e")
            widget.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r = len(fields) + 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r + 1, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        for var in (self._name_var, self._emoji_var, self._color_var):
            var.trace_add("write", lambda *_: self._update_preview())
        self._update_preview()

        self.transient(master)
        self.grab_set()
        self._center()

    def _build_palette(self):
        frame = ctk.CTkFrame(self, fg_color="transparent")
        for i, color in enumerate(_PALETTE):
            ctk.CTkButton(
                frame, text="", width=22, height=22, corner_radius=11,
                fg_color=color, hover_color=color,
                command=lambda col=color: self._color_var.set(col),
            ).grid(row=i // 6, column=i % 6, padx=2, pady=2)
        ctk.CTkButton(
            frame, text="Custom…", width=70, height=22,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._pick_custom,
        ).grid(row=len(_PALETTE) // 6 + 1, column=0, columnspan=3, pady=(4, 0), sticky="w")
        return frame

    def _pick_custom(self):
        _, hex_color = colorchooser.askcolor(
            color=self._color_var.get(), parent=self, title="Category Color"
        )
        if hex_color:
            self._color_var.set(hex_color)

    def _update_preview(self):
        name = self._name_var.get().strip() or "New category"
        emoji = self._emoji_var.get().strip()
        self._preview.configure(
            text=f"  {emoji} {name}  " if emoji else f"  {name}  ",
            fg_color=self._color_var.get(),
        )

    def _on_save(self):
        values = dict(
            name=self._name_var.get(),
            color_hex=self._color_var.get(),
            is_expense=_KIND_LABELS[self._kind_var.get()],
            emoji=self._emoji_var.get(),
        )
        try:
            if self._category:
                self._svc.update(self._category.id, **values)
            else:
                self._svc.create(**values)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
