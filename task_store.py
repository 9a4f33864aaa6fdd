"""
In-memory task list and id counter
"""
from dataclasses import replace
from typing import List, Optional

from errors import NotFoundError, ValidationError
from models import Snapshot, Style, Task


class TaskStore:
    """Ordered task list. Insertion order is the render order."""

    def __init__(self, tasks: Optional[List[Task]] = None, next_id: int = 0):
        self._tasks: List[Task] = [replace(t) for t in tasks or []]
        self._next_id = next_id

    @property
    def next_id(self) -> int:
        return self._next_id

    def __len__(self):
        return len(self._tasks)

    def add(self, text: str) -> Task:
        """
        Append a new task

        Args:
            text: Task text, trimmed before storage

        Returns:
            The created task

        Raises:
            ValidationError: text is not a string or is blank
        """
        if not isinstance(text, str):
            raise ValidationError("Task text must be a string")
        text = text.strip()
        if not text:
            raise ValidationError("Task text cannot be empty")

        task = Task(id=self._next_id, text=text)
        self._tasks.append(task)
        self._next_id += 1
        return replace(task)

    def delete(self, task_id: int) -> None:
        """Remove the task with this id, keeping the order of the rest"""
        index = self._index_of(task_id)
        del self._tasks[index]

    def toggle(self, task_id: int) -> Task:
        """Flip completion state in place and return the updated task"""
        task = self._tasks[self._index_of(task_id)]
        task.is_complete = not task.is_complete
        return replace(task)

    def get(self, task_id: int) -> Task:
        return replace(self._tasks[self._index_of(task_id)])

    def list(self) -> List[Task]:
        """Copies of the current tasks in display order"""
        return [replace(t) for t in self._tasks]

    def _index_of(self, task_id) -> int:
        if isinstance(task_id, int) and not isinstance(task_id, bool):
            for i, task in enumerate(self._tasks):
                if task.id == task_id:
                    return i
        raise NotFoundError(task_id)

    # Persistence bridge

    def to_snapshot(self, style: Style) -> Snapshot:
        return Snapshot(tasks=self.list(), next_id=self._next_id, style=replace(style))

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "TaskStore":
        return cls(tasks=snapshot.tasks, next_id=snapshot.next_id)
