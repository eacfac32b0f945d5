"""Rectangle collision detection between widgets.

Widgets collide only when they overlap with non-zero area on both axes;
rectangles that merely touch along an edge are compatible.
"""

from __future__ import annotations

__all__ = [
    "collides",
    "find_collisions",
    "get_first_collision",
    "rects_overlap",
    "widget_at_point",
]

from collections.abc import Iterable

from drag_layout.layout.units import to_pixels
from drag_layout.parser.model import Grid, Padding, Widget


def rects_overlap(
    ax: float, ay: float, aw: float, ah: float,
    bx: float, by: float, bw: float, bh: float,
) -> bool:
    """Return True when two ``(x, y, w, h)`` rectangles share area."""
    if ax + aw <= bx or bx + bw <= ax:
        return False
    if ay + ah <= by or by + bh <= ay:
        return False
    return True


def collides(a: Widget, b: Widget) -> bool:
    """Return True when two distinct widgets overlap."""
    if a.id == b.id:
        return False
    return rects_overlap(a.x, a.y, a.w, a.h, b.x, b.y, b.w, b.h)


def find_collisions(
    candidate: Widget,
    widgets: Iterable[Widget],
    exclude_ids: Iterable[str] = (),
) -> list[Widget]:
    """Return the widgets overlapping ``candidate``, in list order."""
    excluded = set(exclude_ids)
    excluded.add(candidate.id)
    return [w for w in widgets if w.id not in excluded and collides(candidate, w)]


def get_first_collision(
    candidate: Widget,
    widgets: Iterable[Widget],
    exclude_ids: Iterable[str] = (),
) -> Widget | None:
    """Return the first widget overlapping ``candidate``, or None."""
    excluded = set(exclude_ids)
    for widget in widgets:
        if widget.id not in excluded and collides(candidate, widget):
            return widget
    return None


def widget_at_point(
    widgets: list[Widget],
    px: float,
    py: float,
    grid: Grid,
    padding: Padding,
) -> Widget | None:
    """Return the widget under a canvas pixel position.

    Later widgets are drawn above earlier ones, so the last hit wins.
    """
    for widget in reversed(widgets):
        if to_pixels(widget, grid, padding).contains(px, py):
            return widget
    return None
