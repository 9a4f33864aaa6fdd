"""
Desktop Wallpaper Setter - Windows API, macOS System Events, GNOME gsettings
"""
import ctypes
import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


# Windows API constants
SPI_SETDESKWALLPAPER = 0x0014
SPIF_UPDATEINIFILE = 0x01
SPIF_SENDCHANGE = 0x02

# Fit mode -> (WallpaperStyle, TileWallpaper) registry values
WINDOWS_STYLES = {
    "fill": ("10", "0"),
    "fit": ("6", "0"),
    "stretch": ("2", "0"),
    "center": ("0", "0"),
    "tile": ("0", "1"),
    "span": ("22", "0"),
}

# Fit mode -> org.gnome.desktop.background picture-options
GNOME_OPTIONS = {
    "fill": "zoom",
    "fit": "scaled",
    "stretch": "stretched",
    "center": "centered",
    "tile": "wallpaper",
    "span": "spanned",
}

SCALE_MODES = tuple(WINDOWS_STYLES)


def set_wallpaper(image_path: str, mode: str = "fill", platform: Optional[str] = None) -> bool:
    """
    Set the desktop wallpaper

    Args:
        image_path: Path to the image file
        mode: How the image is scaled to the screen (see SCALE_MODES)
        platform: Override for sys.platform

    Returns:
        True if successful, False otherwise
    """
    if mode not in SCALE_MODES:
        raise ValueError(f"Unknown wallpaper mode: {mode!r}")

    # Ensure absolute path
    abs_path = str(Path(image_path).absolute())

    if not os.path.exists(abs_path):
        logger.error("Wallpaper file not found: %s", abs_path)
        return False

    platform = platform or sys.platform
    if platform.startswith("win"):
        return _set_windows(abs_path, mode)
    if platform == "darwin":
        return _set_macos(abs_path)
    if platform.startswith("linux") or "bsd" in platform:
        return _set_gnome(abs_path, mode)

    logger.error("Setting the wallpaper is not supported on %s", platform)
    return False


def _set_windows(abs_path: str, mode: str) -> bool:
    style, tile = WINDOWS_STYLES[mode]
    try:
        import winreg

        key = winreg.OpenKey(
            winreg.HKEY_CURRENT_USER,
            r"Control Panel\Desktop",
            0,
            winreg.KEY_SET_VALUE
        )
        winreg.SetValueEx(key, "WallpaperStyle", 0, winreg.REG_SZ, style)
        winreg.SetValueEx(key, "TileWallpaper", 0, winreg.REG_SZ, tile)
        winreg.CloseKey(key)
    except (ImportError, OSError) as e:
        # Still try to set the image; Windows keeps its previous fit mode
        logger.warning("Could not set wallpaper style: %s", e)

    try:
        result = ctypes.windll.user32.SystemParametersInfoW(
            SPI_SETDESKWALLPAPER,
            0,
            abs_path,
            SPIF_UPDATEINIFILE | SPIF_SENDCHANGE
        )
    except (AttributeError, OSError) as e:
        logger.error("Error setting wallpaper: %s", e)
        return False

    if not result:
        logger.error("SystemParametersInfoW refused %s", abs_path)
    return bool(result)


def _set_macos(abs_path: str) -> bool:
    # macOS always fills the screen with the picture
    escaped = abs_path.replace("\\", "\\\\").replace('"', '\\"')
    script = f'tell application "System Events" to tell every desktop to set picture to "{escaped}"'
    return _run(["osascript", "-e", script])


def _set_gnome(abs_path: str, mode: str) -> bool:
    if shutil.which("gsettings") is None:
        logger.error("gsettings not found; cannot set wallpaper")
        return False

    uri = Path(abs_path).as_uri()
    schema = "org.gnome.desktop.background"
    if not _run(["gsettings", "set", schema, "picture-uri", uri]):
        return False
    # picture-uri-dark only exists on GNOME 42+
    _run(["gsettings", "set", schema, "picture-uri-dark", uri])
    return _run(["gsettings", "set", schema, "picture-options", GNOME_OPTIONS[mode]])


def _run(cmd) -> bool:
    try:
        subprocess.run(cmd, check=True, capture_output=True, timeout=30)
    except (OSError, subprocess.SubprocessError) as e:
        logger.error("Error setting wallpaper (%s): %s", cmd[0], e)
        return False
    return True
