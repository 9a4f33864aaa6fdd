"""
Active wallpaper colors
"""
from dataclasses import replace
from typing import Optional

from errors import ValidationError
from models import Style


class StyleConfig:
    """Holds the background and text colors.

    Color strings are stored as given; a malformed value is only noticed when
    the wallpaper is rendered.
    """

    def __init__(self, style: Optional[Style] = None):
        self._style = replace(style) if style else Style()

    def update(self, background: Optional[str] = None, text: Optional[str] = None) -> Style:
        """
        Apply a partial color update

        Args:
            background: New background color, ignored if None or empty
            text: New text color, ignored if None or empty

        Returns:
            The resulting style
        """
        changes = {}
        for key, value in (("background", background), ("text", text)):
            if value is None:
                continue
            if not isinstance(value, str):
                raise ValidationError(f"Color '{key}' must be a string")
            value = value.strip()
            if value:
                changes[key] = value

        self._style = replace(self._style, **changes)
        return self.current()

    def current(self) -> Style:
        return replace(self._style)
