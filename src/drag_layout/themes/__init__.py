"""Theme definitions for rendered layouts."""

from drag_layout.themes.dark import DARK_THEME
from drag_layout.themes.light import LIGHT_THEME

THEMES = {
    "light": LIGHT_THEME,
    "dark": DARK_THEME,
}

__all__ = ["THEMES", "DARK_THEME", "LIGHT_THEME"]
