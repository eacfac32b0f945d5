"""Movement bounds and widget normalization.

A widget's bound depends on its kind: float widgets are contained in the
padded pixel area of the canvas, grid widgets in ``0..cols`` columns with
unlimited rows. Either kind can have containment switched off, in which
case the unbounded sentinel is used.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_BOUND",
    "apply_bound",
    "bound_for",
    "clamp",
    "compute_bound",
    "min_size",
    "normalize_widget",
]

import math

from loguru import logger

from drag_layout.layout.constants import FLOAT_MIN_SIZE, GRID_MIN_SIZE
from drag_layout.parser.model import Bound, LayoutConfig, Padding, Widget

DEFAULT_BOUND = Bound(
    min_x=-math.inf,
    max_x=math.inf,
    min_y=-math.inf,
    max_y=math.inf,
)


def clamp(value: float, lo: float, hi: float) -> float:
    """Return ``value`` limited to ``[lo, hi]``."""
    return max(lo, min(value, hi))


def compute_bound(
    container_width: float,
    container_height: float,
    padding: Padding,
    is_float: bool,
    constraints_enabled: bool = True,
    cols: int = 10,
) -> Bound:
    """Compute the legal (min, max) rectangle for one kind of widget."""
    if not constraints_enabled:
        return DEFAULT_BOUND
    if is_float:
        return Bound(
            min_x=padding.left,
            max_x=container_width - padding.right,
            min_y=padding.top,
            max_y=container_height - padding.bottom,
        )
    return Bound(min_x=0, max_x=cols, min_y=0, max_y=math.inf)


def bound_for(config: LayoutConfig, is_float: bool) -> Bound:
    """Shortcut for :func:`compute_bound` from a canvas config."""
    enabled = config.need_drag_bound if is_float else config.need_grid_bound
    return compute_bound(
        config.width,
        config.height,
        config.container_padding,
        is_float,
        constraints_enabled=enabled,
        cols=config.cols,
    )


def min_size(widget: Widget) -> tuple[float, float]:
    """Return ``(min_w, min_h)`` with kind-specific defaults filled in."""
    default = FLOAT_MIN_SIZE if widget.is_float else GRID_MIN_SIZE
    min_w = widget.min_w if _is_positive(widget.min_w) else default
    min_h = widget.min_h if _is_positive(widget.min_h) else default
    return min_w, min_h


def apply_bound(widget: Widget, bound: Bound) -> Widget:
    """Clamp a widget into ``bound`` in place.

    Size is clamped before position so the position clamp sees the final
    size. The minimum size wins over a bound too small to hold it.
    """
    min_w, min_h = min_size(widget)

    widget.w = clamp(widget.w, min_w, max(bound.max_x - bound.min_x, min_w))
    widget.x = clamp(widget.x, bound.min_x, bound.max_x - widget.w)
    widget.h = clamp(widget.h, min_h, max(bound.max_y - bound.min_y, min_h))
    widget.y = clamp(widget.y, bound.min_y, bound.max_y - widget.h)
    return widget


def normalize_widget(widget: Widget) -> Widget:
    """Repair missing or invalid geometry in place.

    Malformed sizes fall back to the minimum size and malformed positions
    to the origin; nothing is raised.
    """
    repaired: list[str] = []

    if not _is_positive(widget.min_w):
        widget.min_w = None
    if not _is_positive(widget.min_h):
        widget.min_h = None
    min_w, min_h = min_size(widget)

    if not _is_finite(widget.x) or (not widget.is_float and widget.x < 0):
        widget.x = 0
        repaired.append("x")
    if not _is_finite(widget.y) or (not widget.is_float and widget.y < 0):
        widget.y = 0
        repaired.append("y")
    if not _is_positive(widget.w):
        widget.w = min_w
        repaired.append("w")
    if not _is_positive(widget.h):
        widget.h = min_h
        repaired.append("h")
    if widget.inner_h is not None and not _is_positive(widget.inner_h):
        widget.inner_h = None
        repaired.append("inner_h")

    widget.w = max(widget.w, min_w)
    widget.h = max(widget.h, min_h)

    if repaired:
        logger.debug(f"Widget '{widget.id}': defaulted {', '.join(repaired)}")
    return widget


def _is_finite(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _is_positive(value: object) -> bool:
    return _is_finite(value) and value > 0
