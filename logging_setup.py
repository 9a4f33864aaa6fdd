"""
Logging configuration for TaskWall
"""
import logging
import sys
from pathlib import Path

from config import LOG_DIR, LOG_LEVEL


class _ConsoleNoiseFilter(logging.Filter):
    """Show our own logs on the console; third-party logs only from WARNING."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "py.warnings":
            return record.levelno >= logging.ERROR
        if record.name.startswith("PIL."):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(log_dir=None, console_level=None, file_level: int = logging.DEBUG) -> Path:
    """
    Configure logging with:
    - Console handler: filtered, at TASKWALL_LOG_LEVEL by default
    - File handler: full logs in taskwall.log

    Call once, early in main.
    Returns the log file path.
    """
    log_dir = Path(log_dir) if log_dir is not None else LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "taskwall.log"

    if console_level is None:
        console_level = logging.getLevelName(LOG_LEVEL)
        if not isinstance(console_level, int):
            console_level = logging.INFO

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
