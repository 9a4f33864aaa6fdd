"""
Snapshot persistence: tasks, id counter and colors in one JSON file
"""
import json
import logging
import os
from pathlib import Path
from typing import Optional

from config import DATA_FILE
from errors import PersistenceError
from models import Snapshot

logger = logging.getLogger(__name__)


class SnapshotStorage:
    """Loads and saves the whole snapshot at a fixed path.

    Every save overwrites the file; there is no incremental log.
    """

    def __init__(self, path=None):
        self.path = Path(path) if path is not None else DATA_FILE

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[Snapshot]:
        """
        Read the snapshot file

        Returns:
            The snapshot, or None if the file does not exist

        Raises:
            PersistenceError: the file exists but cannot be read or parsed
        """
        if not self.path.exists():
            logger.info("No data file at %s", self.path)
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Data file is not valid JSON: {e}", self.path) from e
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Cannot read data file: {e}", self.path) from e

        try:
            snapshot = Snapshot.from_dict(data)
        except PersistenceError as e:
            e.path = self.path
            raise

        logger.info("Loaded %d tasks from %s", len(snapshot.tasks), self.path)
        return snapshot

    def save(self, snapshot: Snapshot) -> None:
        """Write the snapshot, replacing the previous file atomically"""
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(snapshot.to_dict(), f, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as e:
            tmp.unlink(missing_ok=True)
            raise PersistenceError(f"Cannot save data file: {e}", self.path) from e

        logger.debug("Saved %d tasks to %s", len(snapshot.tasks), self.path)

    def quarantine(self) -> Optional[Path]:
        """
        Move an unreadable data file aside so a fresh one can be written

        Returns:
            Where the old file went, or None if there was nothing to move
        """
        if not self.path.exists():
            return None

        target = self.path.with_name(self.path.name + ".corrupt")
        try:
            os.replace(self.path, target)
        except OSError as e:
            raise PersistenceError(f"Cannot move corrupt data file: {e}", self.path) from e

        logger.warning("Moved unreadable data file to %s", target)
        return target
