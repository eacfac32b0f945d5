"""Conversion between grid cells and canvas pixels.

Grid widgets store cells; float widgets already live in pixel space, so
every conversion is the identity for them. The grid origin sits at the
container's top-left padding corner.
"""

from __future__ import annotations

__all__ = [
    "compute_grid",
    "content_rect",
    "pointer_to_canvas",
    "snap_to_grid",
    "to_pixels",
    "to_units",
]

import math

from drag_layout.layout.constants import GRID_MIN_SIZE
from drag_layout.parser.model import Grid, LayoutConfig, Margin, Padding, PixelRect, Widget


def compute_grid(config: LayoutConfig) -> Grid:
    """Derive the cell size from container width, columns and padding."""
    padding = config.container_padding
    usable = max(config.width - padding.left - padding.right, 0.0)
    cols = max(config.cols, 1)
    # A collapsed container still needs a non-zero cell to divide by
    return Grid(col_width=usable / cols or 1.0, row_height=config.row_height or 1.0)


def to_pixels(widget: Widget, grid: Grid, padding: Padding) -> PixelRect:
    """Return the margin-inclusive pixel box of a widget."""
    if widget.is_float:
        return PixelRect(widget.x, widget.y, widget.w, widget.h)
    return PixelRect(
        x=padding.left + widget.x * grid.col_width,
        y=padding.top + widget.y * grid.row_height,
        w=widget.w * grid.col_width,
        h=widget.h * grid.row_height,
    )


def to_units(
    rect: PixelRect,
    grid: Grid,
    padding: Padding,
    is_float: bool = False,
) -> tuple[float, float, float, float]:
    """Inverse of :func:`to_pixels`; returns ``(x, y, w, h)``.

    The result is not rounded: integer cells survive the round trip
    exactly, arbitrary pixel positions come back fractional.
    """
    if is_float:
        return rect.x, rect.y, rect.w, rect.h
    return (
        (rect.x - padding.left) / grid.col_width,
        (rect.y - padding.top) / grid.row_height,
        rect.w / grid.col_width,
        rect.h / grid.row_height,
    )


def snap_to_grid(widget: Widget, grid: Grid, padding: Padding) -> Widget:
    """Convert a pixel-positioned grid widget to whole cells in place.

    Used for drag and resize payloads, which arrive in pixels. Position
    and size round to the nearest cell; size never drops below one cell.
    """
    x, y, w, h = to_units(
        PixelRect(widget.x, widget.y, widget.w, widget.h), grid, padding
    )
    widget.x = max(_round_half_up(x), 0)
    widget.y = max(_round_half_up(y), 0)
    widget.w = max(_round_half_up(w), GRID_MIN_SIZE)
    widget.h = max(_round_half_up(h), GRID_MIN_SIZE)
    return widget


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def content_rect(
    rect: PixelRect, margin: Margin, padding: Padding, is_float: bool = False
) -> PixelRect:
    """Return the visible box of a widget with its item margin removed.

    Content is offset by the part of the margin the container padding
    does not already provide.
    """
    if is_float:
        return rect
    offset_x = max(margin.x - padding.left, 0.0)
    offset_y = max(margin.y - padding.top, 0.0)
    return PixelRect(
        x=rect.x + offset_x,
        y=rect.y + offset_y,
        w=max(rect.w - margin.x, 0.0),
        h=max(rect.h - margin.y, 0.0),
    )


def pointer_to_canvas(px: float, py: float, scale: float) -> tuple[float, float]:
    """Undo the canvas scale transform on a pointer position."""
    if scale <= 0:
        return px, py
    return px / scale, py / scale
