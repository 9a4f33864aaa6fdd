"""
Error types raised by TaskWall

ValidationError and NotFoundError abort a mutation before any state changes.
PersistenceError and RenderError are best-effort failures: the facade logs
them and reports them as warnings on the mutation result.
"""


class TaskWallError(Exception):
    """Base class for all TaskWall errors"""


class ValidationError(TaskWallError, ValueError):
    """Invalid input to a mutation, e.g. empty task text"""


class NotFoundError(TaskWallError, LookupError):
    """Operation referenced a task id that does not exist"""

    def __init__(self, task_id):
        super().__init__(f"Task not found: {task_id!r}")
        self.task_id = task_id


class PersistenceError(TaskWallError):
    """Loading or saving the snapshot file failed"""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path


class RenderError(TaskWallError):
    """Encoding the wallpaper image or setting it as background failed"""
