"""Layout reducer: apply one interaction event to a canvas state.

``reduce_layout(state, event)`` is a pure function: the incoming state is
copied, the event is applied to the copy with the unit converter, bound
resolver, displacement resolver, compactor, drop planner and sticky
tracker, and the new state comes back inside a :class:`ReduceResult`.

Only one interaction may own a canvas at a time (the operator slot).
Grid drags and resizes work on a shadow widget that is committed on
release; live drags cascade directly with ``move_element``, while drops
use the canvas's configured insertion strategy. Cancelling, or a drop
leaving the canvas, puts back the geometry the interaction started from.
"""

from __future__ import annotations

import copy
import math

from loguru import logger

from drag_layout.layout.bounds import apply_bound, bound_for, min_size, normalize_widget
from drag_layout.layout.collision import widget_at_point
from drag_layout.layout.compactor import compact
from drag_layout.layout.constants import DROP_ITEM_ID, KEY_STEP
from drag_layout.layout.displacement import move_element
from drag_layout.layout.drop import PlacementResult, get_drop_item, plan_insertion
from drag_layout.layout.events import (
    Cancel,
    ChangeReport,
    ChildrenChanged,
    ContentResize,
    Drag,
    DragLeave,
    DragOver,
    DragStart,
    DragStop,
    Drop,
    Event,
    PositionChange,
    ReduceResult,
    Resize,
    ResizeStart,
    ResizeStop,
    Scroll,
    Select,
)
from drag_layout.layout.sticky import StickyTracker
from drag_layout.layout.units import compute_grid, pointer_to_canvas, snap_to_grid, to_pixels
from drag_layout.parser.model import (
    LayoutConfig,
    LayoutState,
    OperatorType,
    Widget,
)

REJECT_NOT_FOUND = "not found"
REJECT_BUSY = "busy"
REJECT_NESTED = "nested"
REJECT_LOCKED = "locked"
REJECT_DUPLICATE = "duplicate id"

_NUDGES = {
    "left": (-1, 0),
    "up": (0, -1),
    "right": (1, 0),
    "down": (0, 1),
}


def mount_layout(config: LayoutConfig, widgets: list[Widget]) -> LayoutState:
    """Create a canvas state from the host's declared widgets."""
    state = LayoutState(config=config, widgets=[w.clone() for w in widgets])
    _settle(state)
    return state


def reduce_layout(state: LayoutState, event: Event) -> ReduceResult:
    """Apply one event to a copy of ``state``."""
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unsupported layout event: {type(event).__name__}")
    return handler(copy.deepcopy(state), event)


def pinned_ids(state: LayoutState) -> list[str]:
    """Ids rendered viewport-fixed; nothing pins while an operator is active."""
    if state.operator is not None:
        return []
    return StickyTracker(state.sticky_queue).pinned_ids()


# ---------------------------------------------------------------------------
# Widget interactions
# ---------------------------------------------------------------------------


def _drag_start(state: LayoutState, event: DragStart) -> ReduceResult:
    return _start(state, event.widget_id, OperatorType.DRAG_START)


def _resize_start(state: LayoutState, event: ResizeStart) -> ReduceResult:
    return _start(state, event.widget_id, OperatorType.RESIZE_START, resizing=True)


def _start(
    state: LayoutState, widget_id: str, operator: OperatorType, resizing: bool = False
) -> ReduceResult:
    widget, reason = _claim(state, widget_id, operator, resizing=resizing)
    if widget is None:
        return _reject(state, reason)
    _remember(state)
    state.operator = operator
    state.operator_id = widget.id
    state.checked_id = widget.id
    return ReduceResult(state, widget=widget, report=_report(state, operator, widget.id))


def _drag(state: LayoutState, event: Drag | DragStop) -> ReduceResult:
    save = isinstance(event, DragStop)
    operator = OperatorType.DRAG_OVER if save else OperatorType.DRAG
    widget, reason = _claim(state, event.widget_id, operator)
    if widget is None:
        return _reject(state, reason)
    _remember(state)

    if widget.is_float:
        widget.x, widget.y = event.x, event.y
        apply_bound(widget, bound_for(state.config, True))
        return _finish_float(state, widget, operator, save)

    grid = compute_grid(state.config)
    padding = state.config.container_padding
    rect = to_pixels(widget, grid, padding)
    shadow = widget.clone()
    shadow.x, shadow.y, shadow.w, shadow.h = event.x, event.y, rect.w, rect.h
    snap_to_grid(shadow, grid, padding)
    shadow.w, shadow.h = widget.w, widget.h
    apply_bound(shadow, bound_for(state.config, False))
    return _apply_shadow(state, widget, shadow, operator, save)


def _resize(state: LayoutState, event: Resize | ResizeStop) -> ReduceResult:
    save = isinstance(event, ResizeStop)
    operator = OperatorType.RESIZE_OVER if save else OperatorType.RESIZE
    widget, reason = _claim(state, event.widget_id, operator, resizing=True)
    if widget is None:
        return _reject(state, reason)
    _remember(state)

    if widget.is_float:
        widget.x, widget.y, widget.w, widget.h = event.x, event.y, event.w, event.h
        if event.inner_h is not None:
            widget.inner_h = event.inner_h
        apply_bound(widget, bound_for(state.config, True))
        return _finish_float(state, widget, operator, save)

    grid = compute_grid(state.config)
    shadow = widget.clone()
    shadow.x, shadow.y, shadow.w, shadow.h = event.x, event.y, event.w, event.h
    snap_to_grid(shadow, grid, state.config.container_padding)
    if event.inner_h is not None:
        shadow.inner_h = event.inner_h
    apply_bound(shadow, bound_for(state.config, False))
    return _apply_shadow(state, widget, shadow, operator, save)


def _position_change(state: LayoutState, event: PositionChange) -> ReduceResult:
    """Keyboard nudge: three pixels for float widgets, one cell for grid ones."""
    step = _NUDGES.get(event.direction)
    if step is None:
        return _reject(state, f"unknown direction '{event.direction}'")
    operator = OperatorType.CHANGE_OVER
    widget, reason = _claim(state, event.widget_id, operator)
    if widget is None:
        return _reject(state, reason)

    dx, dy = step
    if widget.is_float:
        widget.x += dx * KEY_STEP
        widget.y += dy * KEY_STEP
        apply_bound(widget, bound_for(state.config, True))
        return _finish_float(state, widget, operator, True)

    shadow = widget.clone()
    shadow.x += dx
    shadow.y += dy
    apply_bound(shadow, bound_for(state.config, False))
    return _apply_shadow(state, widget, shadow, operator, True)


def _content_resize(state: LayoutState, event: ContentResize) -> ReduceResult:
    widget = state.get_widget(event.widget_id)
    if widget is None:
        return _reject(state, REJECT_NOT_FOUND)
    if state.operator is OperatorType.RESIZE:
        # The resize handle owns the height until release.
        return ReduceResult(state, widget=widget)

    widget.inner_h = event.inner_h
    if state.committed is not None and widget.id in state.committed:
        state.committed[widget.id].inner_h = event.inner_h
    if widget.is_float:
        _, min_h = min_size(widget)
        widget.h = max(event.inner_h, min_h)
    _compact_state(state)
    return ReduceResult(state, widget=widget)


def _apply_shadow(
    state: LayoutState,
    widget: Widget,
    shadow: Widget,
    operator: OperatorType,
    save: bool,
) -> ReduceResult:
    """Cascade the other widgets around ``shadow``; commit it when saving."""
    others = state.without(widget.id)
    move_element(others, shadow, shadow.x, shadow.y, grid_enabled=True)
    compact(others + [shadow], anchors={shadow.id})

    if save:
        widget.move_to(shadow)
        widget.is_dragging = False
        state.shadow = None
        _compact_state(state)
        _release(state)
        report_widgets = state.widgets
    else:
        widget.is_dragging = True
        state.shadow = shadow
        state.operator = operator
        state.operator_id = widget.id
        report_widgets = [shadow if w.id == widget.id else w for w in state.widgets]

    report = _report(state, operator, widget.id, report_widgets)
    return ReduceResult(state, widget=widget, report=report)


def _finish_float(
    state: LayoutState, widget: Widget, operator: OperatorType, save: bool
) -> ReduceResult:
    if save:
        widget.is_dragging = False
        _release(state)
    else:
        widget.is_dragging = True
        state.operator = operator
        state.operator_id = widget.id
    return ReduceResult(state, widget=widget, report=_report(state, operator, widget.id))


# ---------------------------------------------------------------------------
# External drops
# ---------------------------------------------------------------------------


def _drag_over(state: LayoutState, event: DragOver) -> ReduceResult:
    if _busy(state, None):
        return _reject(state, REJECT_BUSY)

    _remember(state)
    _restore(state)

    placement = _plan_drop(state, event.pointer_x, event.pointer_y, event.template)
    if placement is None:
        return _veto(state)

    _apply_placement(state, placement)
    state.shadow = placement.shadow
    state.operator = OperatorType.DROP
    state.operator_id = None
    return ReduceResult(state, widget=placement.shadow)


def _drop(state: LayoutState, event: Drop) -> ReduceResult:
    if _busy(state, None):
        return _reject(state, REJECT_BUSY)
    _restore(state)

    placement = _plan_drop(state, event.pointer_x, event.pointer_y, event.template)
    if placement is None:
        return _veto(state)

    _apply_placement(state, placement)
    widget = placement.shadow.clone()
    widget.id = _new_widget_id(state, event.widget_id or widget.id)
    widget.moved = False
    state.widgets.append(widget)
    state.shadow = None
    _compact_state(state)
    _release(state)
    state.checked_id = widget.id

    report = _report(state, OperatorType.DROP_OVER, widget.id)
    return ReduceResult(state, widget=widget, report=report)


def _drag_leave(state: LayoutState, event: DragLeave) -> ReduceResult:
    if state.operator is not OperatorType.DROP:
        return ReduceResult(state)
    _restore(state)
    state.shadow = None
    _release(state)
    _compact_state(state)
    return ReduceResult(state)


def _cancel(state: LayoutState, event: Cancel) -> ReduceResult:
    if state.operator_id is not None:
        widget = state.get_widget(state.operator_id)
        if widget is not None:
            widget.is_dragging = False
    state.shadow = None
    _restore(state)
    _release(state)
    _compact_state(state)
    return ReduceResult(state)


def _plan_drop(
    state: LayoutState,
    pointer_x: float,
    pointer_y: float,
    template: dict | None,
) -> PlacementResult | None:
    """Plan an external drop; None when the pointer is over a nested canvas."""
    config = state.config
    grid = compute_grid(config)
    px, py = pointer_to_canvas(pointer_x, pointer_y, config.scale)
    over = widget_at_point(state.widgets, px, py, grid, config.container_padding)
    if over is not None and over.is_nested:
        return None
    candidate = get_drop_item(pointer_x, pointer_y, config, grid, template)
    return plan_insertion(candidate, state.widgets, config)


def _apply_placement(state: LayoutState, placement: PlacementResult) -> None:
    planned = {w.id: w for w in placement.layout}
    for widget in state.widgets:
        if widget.id in planned:
            target = planned[widget.id]
            widget.x, widget.y, widget.moved = target.x, target.y, target.moved


def _veto(state: LayoutState) -> ReduceResult:
    logger.debug(f"Drop onto nested container vetoed in '{state.config.layout_id}'")
    state.shadow = None
    if state.operator_id is None:
        state.operator = None
    _compact_state(state)
    return _reject(state, REJECT_NESTED)


def _new_widget_id(state: LayoutState, requested: str) -> str:
    taken = {w.id for w in state.widgets}
    if requested not in taken and requested != DROP_ITEM_ID:
        return requested
    n = len(state.widgets)
    while f"{state.config.layout_id}-{n}" in taken:
        n += 1
    return f"{state.config.layout_id}-{n}"


# ---------------------------------------------------------------------------
# Scrolling, selection, children
# ---------------------------------------------------------------------------


def _scroll(state: LayoutState, event: Scroll) -> ReduceResult:
    config = state.config
    grid = compute_grid(config)
    tracker = StickyTracker(state.sticky_queue)

    sticky_ids = {w.id for w in state.widgets if w.is_sticky}
    for entry in list(tracker.entries):
        if entry.id not in sticky_ids:
            tracker.forget(entry.id)

    for widget in state.widgets:
        if not widget.is_sticky:
            continue
        rect = to_pixels(widget, grid, config.container_padding)
        tracker.update(
            widget.id,
            widget.x,
            widget.x + widget.w,
            rect.y,
            event.scroll_top,
            threshold=config.sticky_threshold,
        )
    return ReduceResult(state)


def _select(state: LayoutState, event: Select) -> ReduceResult:
    if state.operator is not None:
        return _reject(state, REJECT_BUSY)
    if event.widget_id is not None and state.get_widget(event.widget_id) is None:
        return _reject(state, REJECT_NOT_FOUND)
    state.checked_id = event.widget_id
    return ReduceResult(state)


def _children_changed(state: LayoutState, event: ChildrenChanged) -> ReduceResult:
    state.widgets = [w.clone() for w in event.widgets]
    _settle(state)

    present = {w.id for w in state.widgets}
    tracker = StickyTracker(state.sticky_queue)
    for entry in list(tracker.entries):
        if entry.id not in present:
            tracker.forget(entry.id)
    if state.checked_id not in present:
        state.checked_id = None
    state.committed = None
    if state.operator_id is not None and state.operator_id not in present:
        state.shadow = None
        _release(state)
    return ReduceResult(state)


# ---------------------------------------------------------------------------
# Cross-canvas hand-off
# ---------------------------------------------------------------------------


def remove_widget(state: LayoutState, widget_id: str) -> ReduceResult:
    """Take a widget out of a canvas (the source side of a hand-off)."""
    state = copy.deepcopy(state)
    widget = state.get_widget(widget_id)
    if widget is None:
        return _reject(state, REJECT_NOT_FOUND)

    state.widgets.remove(widget)
    StickyTracker(state.sticky_queue).forget(widget_id)
    if state.operator_id == widget_id:
        state.shadow = None
        _release(state)
    if state.checked_id == widget_id:
        state.checked_id = None
    _compact_state(state)
    report = _report(state, OperatorType.REMOVE, widget_id)
    return ReduceResult(state, widget=widget, report=report)


def add_widget(
    state: LayoutState,
    widget: Widget,
    pointer_x: float,
    pointer_y: float,
) -> ReduceResult:
    """Insert a widget coming from another canvas at a pointer position."""
    state = copy.deepcopy(state)
    if state.get_widget(widget.id) is not None:
        return _reject(state, REJECT_DUPLICATE)

    config = state.config
    grid = compute_grid(config)
    padding = config.container_padding
    px, py = pointer_to_canvas(pointer_x, pointer_y, config.scale)
    over = widget_at_point(state.widgets, px, py, grid, padding)
    if over is not None and over.is_nested:
        return _reject(state, REJECT_NESTED)

    incoming = widget.clone()
    incoming.layout_id = config.layout_id
    incoming.is_dragging = False
    if incoming.is_float:
        incoming.x, incoming.y = px, py
    else:
        incoming.x = math.floor((px - padding.left) / grid.col_width)
        incoming.y = math.floor((py - padding.top) / grid.row_height)
    normalize_widget(incoming)
    apply_bound(incoming, bound_for(config, incoming.is_float))

    move_element(state.widgets, incoming, incoming.x, incoming.y)
    state.widgets.append(incoming)
    _compact_state(state)
    report = _report(state, OperatorType.DROP_OVER, incoming.id)
    return ReduceResult(state, widget=incoming, report=report)


def transfer_widget(
    source: LayoutState,
    target: LayoutState,
    widget_id: str,
    pointer_x: float,
    pointer_y: float,
) -> tuple[ReduceResult, ReduceResult]:
    """Hand a widget from ``source`` to ``target``.

    When the target refuses the widget both canvases stay as they were.
    """
    widget = source.get_widget(widget_id)
    if widget is None:
        return (
            _reject(copy.deepcopy(source), REJECT_NOT_FOUND),
            _reject(copy.deepcopy(target), REJECT_NOT_FOUND),
        )

    added = add_widget(target, widget, pointer_x, pointer_y)
    if added.rejected:
        return _reject(copy.deepcopy(source), added.reason), added
    return remove_widget(source, widget_id), added


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _settle(state: LayoutState) -> None:
    """Normalize, bound and compact every widget of a freshly loaded list."""
    config = state.config
    for widget in state.widgets:
        normalize_widget(widget)
        if widget.layout_id is None:
            widget.layout_id = config.layout_id
        apply_bound(widget, bound_for(config, widget.is_float))
    _compact_state(state)


def _compact_state(state: LayoutState) -> None:
    config = state.config
    compact(state.widgets, row_height=config.row_height, margin_y=config.item_margin.y)


def _claim(
    state: LayoutState,
    widget_id: str,
    operator: OperatorType,
    resizing: bool = False,
) -> tuple[Widget | None, str]:
    """Look up the widget an interaction is about and check it may proceed."""
    widget = state.get_widget(widget_id)
    if widget is None:
        return None, REJECT_NOT_FOUND
    if _busy(state, widget_id):
        logger.debug(
            f"'{widget_id}' {operator.value} ignored: "
            f"'{state.operator_id}' holds the canvas"
        )
        return None, REJECT_BUSY
    if widget.is_static or widget.covered:
        return None, REJECT_LOCKED
    if resizing and not widget.is_resizable:
        return None, REJECT_LOCKED
    if not resizing and not widget.is_draggable:
        return None, REJECT_LOCKED
    return widget, ""


def _busy(state: LayoutState, widget_id: str | None) -> bool:
    """Whether another interaction already owns the canvas."""
    if state.operator is None:
        return False
    return state.operator_id != widget_id


def _release(state: LayoutState) -> None:
    state.operator = None
    state.operator_id = None
    state.committed = None


def _remember(state: LayoutState) -> None:
    """Snapshot the committed geometry before an interaction displaces it."""
    if state.committed is None:
        state.committed = {w.id: w.clone() for w in state.widgets}


def _restore(state: LayoutState) -> None:
    """Put every widget back where it was when the interaction began."""
    if state.committed is None:
        return
    for widget in state.widgets:
        saved = state.committed.get(widget.id)
        if saved is not None:
            widget.x, widget.y, widget.w, widget.h = saved.x, saved.y, saved.w, saved.h
            widget.inner_h = saved.inner_h
            widget.moved = saved.moved


def _reject(state: LayoutState, reason: str) -> ReduceResult:
    return ReduceResult(state, rejected=True, reason=reason)


def _report(
    state: LayoutState,
    operator: OperatorType,
    widget_id: str,
    widgets: list[Widget] | None = None,
) -> ChangeReport:
    source = state.widgets if widgets is None else widgets
    return ChangeReport(
        type=operator,
        widget_id=widget_id,
        layout_id=state.config.layout_id,
        widgets=[w.clone() for w in source],
    )


_HANDLERS = {
    DragStart: _drag_start,
    Drag: _drag,
    DragStop: _drag,
    ResizeStart: _resize_start,
    Resize: _resize,
    ResizeStop: _resize,
    PositionChange: _position_change,
    ContentResize: _content_resize,
    DragOver: _drag_over,
    Drop: _drop,
    DragLeave: _drag_leave,
    Cancel: _cancel,
    Scroll: _scroll,
    ChildrenChanged: _children_changed,
    Select: _select,
}
