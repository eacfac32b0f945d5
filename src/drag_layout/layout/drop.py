"""Drop/insertion planning for items dragged onto a canvas.

A pointer position over the canvas becomes a provisional widget: a grid
cell for grid items (the cell under the pointer) or a pixel rectangle for
float items. Where that widget ends up is decided by one of two
strategies:

- ``direct``: insert at the pointer cell and cascade with
  :func:`move_element`, as a live drag does.
- ``search``: try every cell in a small neighbourhood of the pointer and
  keep the one that disturbs the fewest existing widgets.
"""

from __future__ import annotations

__all__ = [
    "PlacementResult",
    "dynamic_programming",
    "get_drop_item",
    "plan_direct",
    "plan_insertion",
]

import math
from dataclasses import dataclass, field

from drag_layout.layout.bounds import apply_bound, bound_for, normalize_widget
from drag_layout.layout.compactor import compact
from drag_layout.layout.constants import (
    DROP_ITEM_H,
    DROP_ITEM_ID,
    DROP_ITEM_W,
    SEARCH_RADIUS,
    STRATEGY_DIRECT,
)
from drag_layout.layout.displacement import move_element
from drag_layout.layout.units import pointer_to_canvas
from drag_layout.parser.loader import widget_from_dict
from drag_layout.parser.model import Grid, LayoutConfig, Widget


@dataclass
class PlacementResult:
    """Outcome of planning one insertion."""

    layout: list[Widget]
    shadow: Widget
    moved_ids: list[str] = field(default_factory=list)
    displacement: float = 0.0

    @property
    def shadow_pos(self) -> tuple[float, float]:
        return self.shadow.x, self.shadow.y


def get_drop_item(
    pointer_x: float,
    pointer_y: float,
    config: LayoutConfig,
    grid: Grid,
    template: dict | None = None,
) -> Widget:
    """Build the provisional widget for a drop at a pointer position.

    ``pointer_x``/``pointer_y`` are pixels relative to the scaled canvas.
    The size comes from the canvas ``dropping_item`` overlaid with
    ``template``; without either, the item is one cell square.
    """
    item = {"w": DROP_ITEM_W, "h": DROP_ITEM_H}
    item.update(config.dropping_item)
    if template:
        item.update(template)

    px, py = pointer_to_canvas(pointer_x, pointer_y, config.scale)
    if item.get("is_float"):
        item["x"], item["y"] = px, py
    else:
        padding = config.container_padding
        item["x"] = math.floor((px - padding.left) / grid.col_width)
        item["y"] = math.floor((py - padding.top) / grid.row_height)

    widget = widget_from_dict(item, default_id=DROP_ITEM_ID)
    widget.layout_id = config.layout_id
    normalize_widget(widget)
    apply_bound(widget, bound_for(config, widget.is_float))
    return widget


def plan_insertion(
    candidate: Widget,
    widgets: list[Widget],
    config: LayoutConfig,
) -> PlacementResult:
    """Place ``candidate`` with the canvas's configured drop strategy."""
    if candidate.is_float or config.drop_strategy == STRATEGY_DIRECT:
        return plan_direct(candidate, widgets)
    return dynamic_programming(
        candidate, widgets, config.cols, radius=config.search_radius
    )


def plan_direct(candidate: Widget, widgets: list[Widget]) -> PlacementResult:
    """Insert ``candidate`` at its own cell and compact around it."""
    baseline = _baseline(widgets, candidate.id)
    trial = [w.clone() for w in widgets if w.id != candidate.id]
    shadow = candidate.clone()
    if not shadow.is_float:
        move_element(trial, shadow, shadow.x, shadow.y)
        compact(trial + [shadow])
    return _score(trial, shadow, baseline)


def dynamic_programming(
    candidate: Widget,
    widgets: list[Widget],
    cols: int,
    radius: int = SEARCH_RADIUS,
) -> PlacementResult:
    """Search the cells around ``candidate`` for the least disruptive slot.

    Each cell within ``radius`` of the pointer cell is tried by cascading
    and compacting a copy of the layout. The winner moves the fewest
    other widgets; ties go to the smaller total row displacement, then
    to the cell nearest the pointer, then to the top-left-most cell.
    This is a bounded heuristic, not an exhaustive optimum.
    """
    baseline = _baseline(widgets, candidate.id)
    origin = (int(candidate.x), int(candidate.y))
    best_key, best = _try_cell(candidate, widgets, baseline, *origin)

    for cx, cy in _neighbourhood(candidate, cols, radius):
        if (cx, cy) == origin:
            continue
        key, result = _try_cell(candidate, widgets, baseline, cx, cy)
        if key < best_key:
            best, best_key = result, key
    return best


def _try_cell(
    candidate: Widget,
    widgets: list[Widget],
    baseline: dict[str, tuple[float, float]],
    cx: int,
    cy: int,
) -> tuple[tuple, PlacementResult]:
    trial = [w.clone() for w in widgets if w.id != candidate.id]
    shadow = candidate.clone()
    move_element(trial, shadow, cx, cy)
    compact(trial + [shadow])
    result = _score(trial, shadow, baseline)

    distance = abs(cx - candidate.x) + abs(cy - candidate.y)
    return (len(result.moved_ids), result.displacement, distance, cy, cx), result


def _neighbourhood(candidate: Widget, cols: int, radius: int) -> list[tuple[int, int]]:
    max_x = max(int(cols - candidate.w), 0)
    x0, y0 = int(candidate.x), int(candidate.y)
    cells = {(x0, y0)}
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            x = min(max(x0 + dx, 0), max_x)
            y = max(y0 + dy, 0)
            cells.add((x, y))
    return sorted(cells, key=lambda c: (c[1], c[0]))


def _baseline(widgets: list[Widget], exclude_id: str) -> dict[str, tuple[float, float]]:
    """Positions the other widgets would have without the insertion."""
    settled = compact([w.clone() for w in widgets if w.id != exclude_id])
    return {w.id: (w.x, w.y) for w in settled}


def _score(
    trial: list[Widget],
    shadow: Widget,
    baseline: dict[str, tuple[float, float]],
) -> PlacementResult:
    moved_ids = []
    displacement = 0.0
    for widget in trial:
        x, y = baseline[widget.id]
        if (widget.x, widget.y) != (x, y):
            moved_ids.append(widget.id)
            displacement += abs(widget.y - y)
    return PlacementResult(
        layout=trial, shadow=shadow, moved_ids=moved_ids, displacement=displacement
    )
