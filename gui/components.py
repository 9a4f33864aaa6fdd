"""
Reusable GUI Components
"""
import tkinter
from typing import Callable, Optional

import customtkinter as ctk

from models import Task


class TaskCard(ctk.CTkFrame):
    """Single task row: completion checkbox, ordinal, text, delete button"""

    def __init__(
        self,
        parent,
        task: Task,
        position: int,
        on_toggle: Callable[[int], None],
        on_delete: Callable[[int], None],
        **kwargs
    ):
        super().__init__(parent, **kwargs)

        self.task = task
        self.position = position
        self.on_toggle = on_toggle
        self.on_delete = on_delete

        self.configure(
            fg_color=("gray90", "gray20"),
            corner_radius=10
        )

        self._create_widgets()

    def _create_widgets(self):
        self.done_var = ctk.BooleanVar(value=self.task.is_complete)
        checkbox = ctk.CTkCheckBox(
            self,
            text="",
            width=24,
            variable=self.done_var,
            command=lambda: self.on_toggle(self.task.id)
        )
        checkbox.pack(side="left", padx=(12, 4), pady=10)

        font = ctk.CTkFont(size=14, overstrike=self.task.is_complete)
        text_color = ("gray50", "gray55") if self.task.is_complete else ("gray10", "gray90")

        label = ctk.CTkLabel(
            self,
            text=f"{self.position}. {self.task.text}",
            font=font,
            text_color=text_color,
            anchor="w",
            justify="left"
        )
        label.pack(side="left", fill="x", expand=True, padx=5, pady=10)

        delete_btn = ctk.CTkButton(
            self,
            text="✕",
            width=30,
            height=30,
            fg_color="transparent",
            hover_color=("#FFEBEE", "#3D1F1F"),
            text_color=("#E74C3C", "#E74C3C"),
            command=lambda: self.on_delete(self.task.id)
        )
        delete_btn.pack(side="right", padx=10, pady=10)


class ColorField(ctk.CTkFrame):
    """Labelled color entry with a swatch of the current value"""

    def __init__(self, parent, label: str, value: str, **kwargs):
        super().__init__(parent, **kwargs)
        self.configure(fg_color="transparent")

        ctk.CTkLabel(self, text=label, width=90, anchor="w").pack(side="left")

        self.swatch = ctk.CTkFrame(self, width=24, height=24, corner_radius=4, border_width=1)
        self.swatch.pack(side="right", padx=(6, 0))

        self.entry = ctk.CTkEntry(self, width=110, height=28)
        self.entry.pack(side="right")
        self.set(value)

    def get(self) -> Optional[str]:
        value = self.entry.get().strip()
        return value or None

    def set(self, value: str):
        self.entry.delete(0, "end")
        self.entry.insert(0, value)
        try:
            self.swatch.configure(fg_color=value)
        except (ValueError, tkinter.TclError):
            # Tk does not know this color; the wallpaper render will report it
            self.swatch.configure(fg_color="transparent")
