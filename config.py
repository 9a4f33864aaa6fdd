"""
Configuration settings for TaskWall
Paths, wallpaper layout and default style colors
"""
import os
import sys
from pathlib import Path

APP_NAME = "TaskWall"


def _default_data_dir() -> Path:
    """Per-user application data folder for the current platform"""
    home = Path.home()
    if sys.platform.startswith("win"):
        base = os.environ.get("APPDATA")
        return Path(base) / APP_NAME if base else home / "AppData" / "Roaming" / APP_NAME
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / APP_NAME
    base = os.environ.get("XDG_CONFIG_HOME")
    return (Path(base) if base else home / ".config") / APP_NAME


# Base paths
DATA_DIR = Path(os.environ.get("TASKWALL_DATA_DIR") or _default_data_dir())
OUTPUT_DIR = Path(os.environ.get("TASKWALL_OUTPUT_DIR") or Path.home() / "Documents")
LOG_DIR = DATA_DIR / "logs"

# Data files
DATA_FILE = DATA_DIR / "taskwall-data.json"

LOG_LEVEL = os.environ.get("TASKWALL_LOG_LEVEL", "INFO").upper()


# Default colors: very dark background, light text
DEFAULT_STYLE = {
    "background": "#000000",
    "text": "#DDDDDD",
}


# Wallpaper settings
WALLPAPER_CONFIG = {
    "output_filename": "taskwall.png",
    "scale_mode": "fill",
}


# Scene geometry. Every value here feeds build_scene, so the scene is a pure
# function of (tasks, style, LAYOUT).
LAYOUT = {
    "width": 1920,
    "height": 1080,
    "font_family": "sans-serif",

    # Title
    "title": APP_NAME,
    "title_y": 150,
    "title_size": 64,
    "title_weight": 700,

    # Empty state
    "empty_message": "No tasks yet",
    "empty_size": 40,
    "empty_opacity": 0.8,

    # Task rows
    "row_height": 60,
    "row_spacing": 0,
    "title_offset": 20,
    "block_width": 600,
    "task_size": 42,
    "completed_opacity": 0.6,

    # Background
    "gradient": False,
    "gradient_strength": 0.35,

    # Write the SVG source next to the PNG
    "keep_svg": False,
}


def output_path() -> Path:
    """Fixed location of the generated wallpaper image"""
    return OUTPUT_DIR / WALLPAPER_CONFIG["output_filename"]


def ensure_dirs():
    """Create data, log and output folders if missing"""
    for folder in (DATA_DIR, LOG_DIR, OUTPUT_DIR):
        folder.mkdir(parents=True, exist_ok=True)
