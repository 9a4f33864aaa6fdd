"""
Main Application GUI - task list, colors and wallpaper preview
"""
import logging

import customtkinter as ctk
from PIL import Image

from errors import NotFoundError, ValidationError
from facade import MutationResult, TaskWall
from gui.components import ColorField, TaskCard

logger = logging.getLogger(__name__)

ctk.set_appearance_mode("dark")
ctk.set_default_color_theme("blue")


class TaskWallApp(ctk.CTk):
    """Main window. Forwards every user action to the TaskWall facade."""

    def __init__(self, taskwall: TaskWall):
        super().__init__()

        self.taskwall = taskwall
        self.preview_img = None

        self.title("TaskWall")
        self.geometry("1200x800")
        self.minsize(900, 600)
        self.configure(fg_color="#1a1a2e")

        self._create_layout()
        self._create_sidebar()
        self._create_main_content()

        self._refresh_tasks()
        self._show_preview(str(self.taskwall.output_path))

    def _create_layout(self):
        self.grid_columnconfigure(1, weight=1)
        self.grid_rowconfigure(0, weight=1)

    def _create_sidebar(self):
        sidebar = ctk.CTkFrame(self, width=300, corner_radius=0)
        sidebar.grid(row=0, column=0, sticky="nswe")
        sidebar.grid_propagate(False)

        ctk.CTkLabel(sidebar, text="TaskWall",
                     font=ctk.CTkFont(size=22, weight="bold")).pack(pady=(15, 15))

        # Add Task
        task_frame = ctk.CTkFrame(sidebar, fg_color=("gray85", "gray20"))
        task_frame.pack(fill="x", padx=10, pady=5)

        ctk.CTkLabel(task_frame, text="Add Task",
                     font=ctk.CTkFont(size=13, weight="bold")).pack(anchor="w", padx=10, pady=(10, 5))

        self.task_entry = ctk.CTkEntry(task_frame, placeholder_text="What needs doing?", height=32)
        self.task_entry.pack(fill="x", padx=10, pady=3)
        self.task_entry.bind("<Return>", lambda _event: self._add_task())

        ctk.CTkButton(task_frame, text="Add Task", height=32,
                      command=self._add_task).pack(fill="x", padx=10, pady=10)

        # Colors
        colors = self.taskwall.colors()
        color_frame = ctk.CTkFrame(sidebar, fg_color=("gray85", "gray20"))
        color_frame.pack(fill="x", padx=10, pady=10)

        ctk.CTkLabel(color_frame, text="Colors",
                     font=ctk.CTkFont(size=13, weight="bold")).pack(anchor="w", padx=10, pady=(10, 5))

        self.bg_field = ColorField(color_frame, "Background", colors.background)
        self.bg_field.pack(fill="x", padx=10, pady=3)
        self.text_field = ColorField(color_frame, "Text", colors.text)
        self.text_field.pack(fill="x", padx=10, pady=3)

        ctk.CTkButton(color_frame, text="Apply Colors", height=30, fg_color="transparent",
                      border_width=1, command=self._update_colors).pack(fill="x", padx=10, pady=(6, 10))

        ctk.CTkButton(sidebar, text="Regenerate Wallpaper", height=40,
                      fg_color=("#27AE60", "#1E8449"), hover_color=("#2ECC71", "#27AE60"),
                      command=self._regenerate).pack(fill="x", padx=10, pady=10)

        self.status_label = ctk.CTkLabel(sidebar, text="", font=ctk.CTkFont(size=11),
                                         text_color=("gray50", "gray60"), wraplength=270)
        self.status_label.pack(side="bottom", pady=10)

    def _create_main_content(self):
        main = ctk.CTkFrame(self, corner_radius=0, fg_color="transparent")
        main.grid(row=0, column=1, sticky="nswe", padx=15, pady=15)
        main.grid_columnconfigure(0, weight=1)
        main.grid_rowconfigure(0, weight=1)

        self.tabview = ctk.CTkTabview(main, corner_radius=10)
        self.tabview.grid(row=0, column=0, sticky="nswe")

        self.tab_tasks = self.tabview.add("Tasks")
        self.tab_preview = self.tabview.add("Preview")

        self.tab_tasks.grid_columnconfigure(0, weight=1)
        self.tab_tasks.grid_rowconfigure(1, weight=1)
        ctk.CTkLabel(self.tab_tasks, text="Your Tasks",
                     font=ctk.CTkFont(size=18, weight="bold")).grid(row=0, column=0, sticky="w", pady=(0, 10))
        self.tasks_scroll = ctk.CTkScrollableFrame(self.tab_tasks, fg_color="transparent")
        self.tasks_scroll.grid(row=1, column=0, sticky="nswe")
        self.tasks_scroll.grid_columnconfigure(0, weight=1)

        self.tab_preview.grid_columnconfigure(0, weight=1)
        self.tab_preview.grid_rowconfigure(0, weight=1)
        self.preview_label = ctk.CTkLabel(self.tab_preview, text="No wallpaper generated yet",
                                          font=ctk.CTkFont(size=14), text_color=("gray50", "gray60"))
        self.preview_label.grid(row=0, column=0)

    def _refresh_tasks(self):
        for widget in self.tasks_scroll.winfo_children():
            widget.destroy()

        tasks = self.taskwall.tasks()
        if not tasks:
            ctk.CTkLabel(self.tasks_scroll, text="No tasks yet!", font=ctk.CTkFont(size=13),
                         text_color=("gray50", "gray60")).pack(pady=40)
            return

        for position, task in enumerate(tasks, start=1):
            card = TaskCard(self.tasks_scroll, task=task, position=position,
                            on_toggle=self._toggle_task, on_delete=self._delete_task)
            card.pack(fill="x", pady=4)

    # Actions

    def _add_task(self):
        text = self.task_entry.get()
        try:
            result = self.taskwall.add_task(text)
        except ValidationError as e:
            self._update_status(f"⚠️ {e}")
            return
        self.task_entry.delete(0, "end")
        self._after_mutation(result, f"✅ Added: {result.task.text}")

    def _delete_task(self, task_id: int):
        try:
            result = self.taskwall.delete_task(task_id)
        except NotFoundError as e:
            self._update_status(f"⚠️ {e}")
            self._refresh_tasks()
            return
        self._after_mutation(result, "🗑 Deleted")

    def _toggle_task(self, task_id: int):
        try:
            result = self.taskwall.toggle_task_status(task_id)
        except NotFoundError as e:
            self._update_status(f"⚠️ {e}")
            self._refresh_tasks()
            return
        state = "done" if result.updated_task.is_complete else "open"
        self._after_mutation(result, f"✅ Marked {state}")

    def _update_colors(self):
        try:
            result = self.taskwall.update_colors(background=self.bg_field.get(),
                                                 text=self.text_field.get())
        except ValidationError as e:
            self._update_status(f"⚠️ {e}")
            return
        colors = self.taskwall.colors()
        self.bg_field.set(colors.background)
        self.text_field.set(colors.text)
        self._after_mutation(result, "🎨 Colors applied")

    def _regenerate(self):
        self._update_status("⏳ Generating...")
        self.update()
        self._after_mutation(self.taskwall.refresh(), "✅ Wallpaper applied")

    def _after_mutation(self, result: MutationResult, message: str):
        self._refresh_tasks()
        self._show_preview(result.image_path)
        if result.warnings:
            self._update_status(f"{message}\n⚠️ {result.warnings[0]}")
        else:
            self._update_status(message)

    def _show_preview(self, path: str):
        try:
            with Image.open(path) as src:
                img = src.copy()
        except OSError as e:
            logger.debug("No preview available: %s", e)
            return

        ratio = min(820 / img.width, 470 / img.height)
        size = (int(img.width * ratio), int(img.height * ratio))
        img.thumbnail(size, Image.Resampling.LANCZOS)

        self.preview_img = ctk.CTkImage(light_image=img, dark_image=img, size=size)
        self.preview_label.configure(image=self.preview_img, text="")

    def _update_status(self, msg):
        self.status_label.configure(text=msg)


def run_app(taskwall: TaskWall):
    app = TaskWallApp(taskwall)
    app.mainloop()
