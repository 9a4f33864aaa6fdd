"""
TaskWall - Main Entry Point

A desktop utility that keeps a short to-do list and renders it as your
desktop wallpaper, regenerated on every change.

Usage:
    python main.py                 # open the window
    python main.py --render-only   # regenerate the wallpaper and exit
    python main.py --list          # print saved tasks
"""
import argparse
import logging
import sys
from typing import List, Optional

import config
from errors import PersistenceError
from facade import TaskWall
from logging_setup import setup_logging
from storage import SnapshotStorage

logger = logging.getLogger("taskwall")


def open_taskwall(storage: Optional[SnapshotStorage] = None) -> TaskWall:
    """
    Load saved state for the app.

    A corrupt data file is reported, moved aside as *.corrupt and replaced
    by defaults; it is never silently overwritten.
    """
    storage = storage or SnapshotStorage()
    try:
        return TaskWall.open(storage)
    except PersistenceError as e:
        logger.error("Failed to load data from %s: %s", e.path, e)
        backup = storage.quarantine()
        logger.warning("Starting with an empty task list; old data kept at %s", backup)
        return TaskWall.open(storage)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskwall", description="To-do list as your desktop wallpaper")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--render-only", action="store_true",
                      help="regenerate and set the wallpaper, then exit")
    mode.add_argument("--list", action="store_true", help="print saved tasks and exit")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="console log level (default: TASKWALL_LOG_LEVEL or INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config.ensure_dirs()
    level = getattr(logging, args.log_level) if args.log_level else None
    setup_logging(console_level=level)

    app = open_taskwall()

    if args.list:
        state = app.get_tasks()
        if not state["tasks"]:
            print("No tasks yet")
        for i, task in enumerate(state["tasks"], start=1):
            mark = "x" if task["isComplete"] else " "
            print(f"{i:>2}. [{mark}] {task['text']}  (id {task['id']})")
        return 0

    result = app.refresh()
    for warning in result.warnings:
        logger.warning(warning)

    if args.render_only:
        print(result.image_path)
        return 0 if result.ok else 1

    from gui.app import run_app
    run_app(app)
    return 0


if __name__ == "__main__":
    sys.exit(main())
