"""
Mutation facade - the operations the UI calls

Every mutation runs the same pipeline under one lock:

    mutate  ->  render wallpaper  ->  save snapshot  ->  result

A failed mutation (ValidationError, NotFoundError) aborts before anything is
rendered or saved. Render and save failures are best-effort: they are logged
and come back as warnings on the result.
"""
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from config import output_path as default_output_path
from errors import PersistenceError, RenderError
from models import Style, Task
from storage import SnapshotStorage
from style import StyleConfig
from task_store import TaskStore
from wallpaper_generator import RenderResult, generate_wallpaper

logger = logging.getLogger(__name__)

Renderer = Callable[[Sequence[Task], Style, Path], RenderResult]


@dataclass
class MutationResult:
    """Outcome of one facade call.

    Attributes:
        image_path: Target wallpaper path, set even when rendering failed
        task: Task created by add_task
        updated_task: Task after toggle_task_status
        warnings: Non-fatal render/persistence problems
    """

    image_path: str
    task: Optional[Task] = None
    updated_task: Optional[Task] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings

    def to_dict(self) -> Dict:
        data = {}
        if self.task is not None:
            data["task"] = self.task.to_dict()
        if self.updated_task is not None:
            data["updatedTask"] = self.updated_task.to_dict()
        data["imagePath"] = self.image_path
        if self.warnings:
            data["warnings"] = list(self.warnings)
        return data


class TaskWall:
    """Owns the task store and colors; sequences change, re-render and save."""

    def __init__(self, store: Optional[TaskStore] = None,
                 style: Optional[StyleConfig] = None,
                 storage: Optional[SnapshotStorage] = None,
                 render: Renderer = generate_wallpaper,
                 output_path=None):
        self.store = store or TaskStore()
        self.style = style or StyleConfig()
        self.storage = storage or SnapshotStorage()
        self.render = render
        self.output_path = Path(output_path) if output_path is not None else default_output_path()
        self._lock = threading.RLock()

        # Run in order after a successful mutation; each returns warnings
        self.stages = [self._render_stage, self._save_stage]

    @classmethod
    def open(cls, storage: Optional[SnapshotStorage] = None, **kwargs) -> "TaskWall":
        """
        Load saved state, or start from defaults when nothing is saved yet.

        Raises:
            PersistenceError: the data file exists but is corrupt
        """
        storage = storage or SnapshotStorage()
        snapshot = storage.load()

        if snapshot is None:
            app = cls(storage=storage, **kwargs)
            for warning in app._save_stage():
                logger.warning("Initial save failed: %s", warning)
            return app

        return cls(
            store=TaskStore.from_snapshot(snapshot),
            style=StyleConfig(snapshot.style),
            storage=storage,
            **kwargs
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_tasks(self) -> Dict:
        with self._lock:
            return {
                "tasks": [task.to_dict() for task in self.store.list()],
                "style": self.style.current().to_dict(),
            }

    def tasks(self) -> List[Task]:
        with self._lock:
            return self.store.list()

    def colors(self) -> Style:
        with self._lock:
            return self.style.current()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_task(self, text: str) -> MutationResult:
        task, image_path, warnings = self._mutate(lambda: self.store.add(text))
        logger.info("Added task %d", task.id)
        return MutationResult(image_path=image_path, task=task, warnings=warnings)

    def delete_task(self, task_id: int) -> MutationResult:
        _, image_path, warnings = self._mutate(lambda: self.store.delete(task_id))
        logger.info("Deleted task %d", task_id)
        return MutationResult(image_path=image_path, warnings=warnings)

    def toggle_task_status(self, task_id: int) -> MutationResult:
        task, image_path, warnings = self._mutate(lambda: self.store.toggle(task_id))
        logger.info("Task %d complete=%s", task.id, task.is_complete)
        return MutationResult(image_path=image_path, updated_task=task, warnings=warnings)

    def update_colors(self, background: Optional[str] = None,
                      text: Optional[str] = None) -> MutationResult:
        style, image_path, warnings = self._mutate(
            lambda: self.style.update(background=background, text=text)
        )
        logger.info("Colors now background=%s text=%s", style.background, style.text)
        return MutationResult(image_path=image_path, warnings=warnings)

    def refresh(self) -> MutationResult:
        """Regenerate the wallpaper from current state without saving."""
        with self._lock:
            warnings = self._render_stage()
            return MutationResult(image_path=str(self.output_path), warnings=warnings)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _mutate(self, change: Callable) -> Tuple[object, str, List[str]]:
        with self._lock:
            value = change()

            warnings = []
            for stage in self.stages:
                warnings.extend(stage())
            return value, str(self.output_path), warnings

    def _render_stage(self) -> List[str]:
        try:
            result = self.render(self.store.list(), self.style.current(), self.output_path)
        except RenderError as e:
            logger.error("Wallpaper render failed: %s", e)
            return [str(e)]
        except Exception as e:
            logger.exception("Wallpaper renderer raised")
            return [f"Wallpaper render failed: {e}"]
        return list(result.warnings)

    def _save_stage(self) -> List[str]:
        try:
            self.storage.save(self.store.to_snapshot(self.style.current()))
        except PersistenceError as e:
            logger.error("Failed to save data to %s: %s", e.path, e)
            return [f"Failed to save data: {e}"]
        return []
