"""
Data model: tasks, style colors and the persisted snapshot
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from config import DEFAULT_STYLE
from errors import PersistenceError


@dataclass
class Task:
    """A single to-do item.

    Attributes:
        id: Unique id, assigned from the store counter and never reused
        text: Trimmed, non-empty task text
        is_complete: Completion state, False at creation
    """

    id: int
    text: str
    is_complete: bool = False

    def to_dict(self) -> Dict:
        return {"id": self.id, "text": self.text, "isComplete": self.is_complete}

    @classmethod
    def from_dict(cls, data: Dict) -> "Task":
        if not isinstance(data, dict):
            raise PersistenceError(f"Task entry must be an object, got {type(data).__name__}")

        task_id = data.get("id")
        text = data.get("text")
        if isinstance(task_id, bool) or not isinstance(task_id, int) or task_id < 0:
            raise PersistenceError(f"Task entry has invalid id: {task_id!r}")
        if not isinstance(text, str) or not text.strip():
            raise PersistenceError(f"Task {task_id} has invalid text: {text!r}")

        is_complete = data.get("isComplete", False)
        if not isinstance(is_complete, bool):
            raise PersistenceError(f"Task {task_id} has invalid isComplete: {is_complete!r}")

        return cls(id=task_id, text=text.strip(), is_complete=is_complete)


@dataclass
class Style:
    """Background and text color strings used for rendering"""

    background: str = DEFAULT_STYLE["background"]
    text: str = DEFAULT_STYLE["text"]

    def to_dict(self) -> Dict:
        return {"background": self.background, "text": self.text}

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "Style":
        # Partial style objects merge over the defaults field by field
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise PersistenceError(f"Style must be an object, got {type(data).__name__}")

        style = cls()
        for key in ("background", "text"):
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                setattr(style, key, value.strip())
        return style


@dataclass
class Snapshot:
    """Everything TaskWall persists, saved and loaded as one blob"""

    tasks: List[Task] = field(default_factory=list)
    next_id: int = 0
    style: Style = field(default_factory=Style)

    def to_dict(self) -> Dict:
        return {
            "tasks": [task.to_dict() for task in self.tasks],
            "nextId": self.next_id,
            "style": self.style.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Snapshot":
        """
        Build a snapshot from decoded JSON.

        Accepts the older key names ``taskIdCounter`` and ``wallpaperColors``.
        Raises PersistenceError when the structure is not a snapshot.
        """
        if not isinstance(data, dict):
            raise PersistenceError("Snapshot root must be a JSON object")

        raw_tasks = data.get("tasks", [])
        if raw_tasks is None:
            raw_tasks = []
        if not isinstance(raw_tasks, list):
            raise PersistenceError("Snapshot 'tasks' must be a list")
        tasks = [Task.from_dict(item) for item in raw_tasks]

        ids = [task.id for task in tasks]
        if len(set(ids)) != len(ids):
            raise PersistenceError("Snapshot contains duplicate task ids")

        next_id = data.get("nextId", data.get("taskIdCounter", 0))
        if isinstance(next_id, bool) or not isinstance(next_id, int) or next_id < 0:
            raise PersistenceError(f"Snapshot has invalid nextId: {next_id!r}")
        # nextId must stay above every id ever handed out
        if ids and next_id <= max(ids):
            next_id = max(ids) + 1

        style = Style.from_dict(data.get("style", data.get("wallpaperColors")))
        return cls(tasks=tasks, next_id=next_id, style=style)
