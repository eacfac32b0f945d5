"""Vertical compaction: remove gaps between grid widgets.

Static and anchored widgets are placed first and never move. The rest
are visited in ``(y, x)`` order and each drops to the lowest row at
which it clears every widget already placed. Because the result depends
only on the sorted geometry, compaction is deterministic and running it
twice gives the same positions as running it once.
"""

from __future__ import annotations

__all__ = ["compact", "sort_layout"]

import math
from collections.abc import Iterable

from drag_layout.layout.bounds import min_size
from drag_layout.layout.collision import find_collisions
from drag_layout.parser.model import Widget


def sort_layout(widgets: Iterable[Widget]) -> list[Widget]:
    """Return widgets ordered top-to-bottom, then left-to-right."""
    return sorted(widgets, key=lambda w: (w.y, w.x))


def compact(
    widgets: list[Widget],
    row_height: float | None = None,
    anchors: Iterable[str] = (),
    margin_y: float = 0.0,
) -> list[Widget]:
    """Compact the non-float widgets of a layout in place.

    Args:
        widgets: The layout; float widgets are left alone.
        row_height: When given, widgets with a content height (``inner_h``,
            pixels) first get their row span recomputed from it.
        anchors: Ids treated as static for this pass only, e.g. the shadow
            of a widget being dragged.
        margin_y: Vertical item margin added to content heights.

    Returns the same list, for chaining.
    """
    anchor_ids = set(anchors)
    grid_widgets = [w for w in widgets if not w.is_float]

    if row_height:
        for widget in grid_widgets:
            _sync_content_height(widget, row_height, margin_y)

    placed: list[Widget] = []
    movable: list[Widget] = []
    for widget in grid_widgets:
        if widget.is_static or widget.id in anchor_ids:
            widget.moved = False
            placed.append(widget)
        else:
            movable.append(widget)

    for widget in sort_layout(movable):
        old_y = widget.y
        widget.y = _lowest_free_row(widget, placed)
        widget.moved = widget.y != old_y
        placed.append(widget)

    return widgets


def _lowest_free_row(widget: Widget, placed: list[Widget]) -> float:
    """Return the smallest ``y >= 0`` at which ``widget`` clears ``placed``.

    Jumping to the lowest bottom edge among the current colliders never
    skips a free row: every row above that edge still overlaps the
    collider that owns it.
    """
    widget.y = 0
    colliders = find_collisions(widget, placed)
    while colliders:
        widget.y = max(c.y + c.h for c in colliders)
        colliders = find_collisions(widget, placed)
    return widget.y


def _sync_content_height(widget: Widget, row_height: float, margin_y: float) -> None:
    if widget.inner_h is None:
        return
    _, min_h = min_size(widget)
    widget.h = max(min_h, math.ceil((widget.inner_h + margin_y) / row_height))
