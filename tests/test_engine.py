"""Tests for the layout reducer and cross-canvas hand-off."""

import pytest

from drag_layout.layout.engine import (
    REJECT_BUSY,
    REJECT_DUPLICATE,
    REJECT_LOCKED,
    REJECT_NESTED,
    REJECT_NOT_FOUND,
    add_widget,
    mount_layout,
    pinned_ids,
    reduce_layout,
    transfer_widget,
)
from drag_layout.layout.events import (
    Cancel,
    ChildrenChanged,
    ContentResize,
    Drag,
    DragLeave,
    DragOver,
    DragStart,
    DragStop,
    Drop,
    PositionChange,
    ResizeStart,
    ResizeStop,
    Scroll,
    Select,
)
from drag_layout.parser.model import LayoutConfig, OperatorType, Widget

from layout_validator import Severity, format_violations, validate_layout


def _make_state(*widgets, **config):
    """Mount widgets on a 200px, 10 column canvas (20x20 pixel cells)."""
    return mount_layout(LayoutConfig(**config), list(widgets))


def _grid(widget_id, x, y, w=2, h=2, **kwargs):
    kwargs.setdefault("is_draggable", True)
    kwargs.setdefault("is_resizable", True)
    return Widget(widget_id, x=x, y=y, w=w, h=h, **kwargs)


def _run(state, *events):
    for event in events:
        result = reduce_layout(state, event)
        assert not result.rejected, result.reason
        state = result.state
    return state


def _errors(state):
    return [v for v in validate_layout(state) if v.severity == Severity.ERROR]


# --- mounting ---


def test_mount_compacts_declared_widgets():
    state = _make_state(_grid("a", 0, 0), _grid("b", 0, 5))
    assert state.get_widget("a").y == 0
    assert state.get_widget("b").y == 2


def test_mount_repairs_and_bounds():
    state = _make_state(
        Widget("bad", x=float("nan"), y=-4, w=0, h=2),
        Widget("wide", x=6, y=0, w=14, h=1),
    )
    bad = state.get_widget("bad")
    wide = state.get_widget("wide")
    assert (bad.x, bad.w) == (0, 1)
    assert (wide.x, wide.w) == (0, 10)
    assert bad.layout_id == "root"
    errors = _errors(state)
    assert not errors, format_violations(errors)


def test_mount_does_not_share_widgets():
    original = _grid("a", 0, 4)
    state = mount_layout(LayoutConfig(), [original])
    assert original.y == 4
    assert state.get_widget("a").y == 0


# --- dragging ---


def test_reduce_does_not_mutate_input():
    state = _make_state(_grid("a", 0, 0), _grid("b", 0, 2))
    reduce_layout(state, DragStart("a"))
    reduce_layout(state, Drag("a", x=0, y=40))
    assert state.operator is None
    assert state.shadow is None
    assert state.get_widget("a").y == 0


def test_drag_moves_shadow_and_reflows_others():
    state = _make_state(_grid("a", 0, 0), _grid("b", 0, 2))
    state = _run(state, DragStart("a"), Drag("a", x=0, y=40))

    assert state.operator is OperatorType.DRAG
    assert state.operator_id == "a"
    assert (state.shadow.x, state.shadow.y) == (0, 2)
    assert state.get_widget("a").is_dragging
    # The real widget keeps its place until release
    assert state.get_widget("a").y == 0
    assert state.get_widget("b").y == 0


def test_drag_stop_commits_shadow():
    state = _make_state(_grid("a", 0, 0), _grid("b", 0, 2))
    state = _run(state, DragStart("a"), Drag("a", x=0, y=40))
    result = reduce_layout(state, DragStop("a", x=0, y=40))

    state = result.state
    assert state.get_widget("a").y == 2
    assert state.get_widget("b").y == 0
    assert state.shadow is None
    assert state.operator is None
    assert not state.get_widget("a").is_dragging
    assert result.report.type is OperatorType.DRAG_OVER
    assert result.report.layout_id == "root"
    assert {w.id for w in result.report.widgets} == {"a", "b"}


def test_drag_onto_occupant_pushes_it_down():
    state = _make_state(_grid("a", 0, 0), _grid("b", 4, 0))
    state = _run(state, DragStart("b"), DragStop("b", x=0, y=0))
    assert state.get_widget("b").y == 0
    assert state.get_widget("a").y == 2
    errors = _errors(state)
    assert not errors, format_violations(errors)


def test_drag_clamped_to_columns():
    state = _make_state(_grid("a", 0, 0, w=3))
    state = _run(state, DragStart("a"), DragStop("a", x=500, y=0))
    assert state.get_widget("a").x == 7


def test_float_drag_is_bounded_and_does_not_push():
    f = Widget("f", x=10, y=10, w=50, h=50, is_float=True, is_draggable=True)
    state = _make_state(_grid("a", 0, 0), f)
    state = _run(state, DragStart("f"), Drag("f", x=500, y=500))
    assert state.get_widget("f").is_dragging
    state = _run(state, DragStop("f", x=500, y=500))

    moved = state.get_widget("f")
    assert (moved.x, moved.y) == (150, 150)
    assert not moved.is_dragging
    assert state.get_widget("a").y == 0
    assert state.operator is None


# --- slot ownership ---


def test_second_interaction_is_busy():
    state = _make_state(_grid("a", 0, 0), _grid("b", 4, 0))
    state = _run(state, DragStart("a"))
    result = reduce_layout(state, DragStart("b"))
    assert result.rejected
    assert result.reason == REJECT_BUSY
    assert result.state.operator_id == "a"


def test_unknown_widget_is_not_found():
    state = _make_state(_grid("a", 0, 0))
    result = reduce_layout(state, DragStart("ghost"))
    assert result.rejected
    assert result.reason == REJECT_NOT_FOUND


def test_static_widget_is_locked():
    state = _make_state(_grid("s", 0, 0, is_static=True))
    assert reduce_layout(state, DragStart("s")).reason == REJECT_LOCKED


def test_resize_needs_resizable_widget():
    state = _make_state(_grid("a", 0, 0, is_resizable=False))
    result = reduce_layout(state, ResizeStart("a"))
    assert result.reason == REJECT_LOCKED
    assert result.state.operator is None


def test_resizable_widget_resizes_without_being_draggable():
    state = _make_state(_grid("a", 0, 0, is_draggable=False))
    assert reduce_layout(state, DragStart("a")).reason == REJECT_LOCKED

    state = _run(state, ResizeStart("a"))
    assert state.operator is OperatorType.RESIZE_START
    assert state.operator_id == "a"
    state = _run(state, ResizeStop("a", x=0, y=0, w=60, h=40))
    assert state.get_widget("a").w == 3
    assert state.operator is None


def test_unsupported_event_raises():
    state = _make_state()
    with pytest.raises(TypeError, match="Unsupported layout event"):
        reduce_layout(state, object())


def test_cancel_discards_shadow():
    state = _make_state(_grid("a", 0, 0), _grid("b", 0, 2))
    state = _run(state, DragStart("a"), Drag("a", x=0, y=40), Cancel())
    assert state.shadow is None
    assert state.operator is None
    assert state.get_widget("a").y == 0
    assert not state.get_widget("a").is_dragging


def test_cancel_restores_displaced_order():
    state = _make_state(_grid("b", 0, 2), _grid("a", 0, 0))
    state = _run(state, DragStart("a"), Drag("a", x=0, y=80))
    assert state.get_widget("b").y == 0

    state = _run(state, Cancel())
    assert state.get_widget("a").y == 0
    assert state.get_widget("b").y == 2
    assert state.committed is None


def test_cancel_restores_float_position():
    f = Widget("f", x=10, y=10, w=50, h=50, is_float=True, is_draggable=True)
    state = _make_state(f)
    state = _run(state, DragStart("f"), Drag("f", x=100, y=60), Cancel())
    assert (state.get_widget("f").x, state.get_widget("f").y) == (10, 10)


# --- resizing and nudging ---


def test_resize_respects_min_width():
    """Resizing a min_w=2 widget to one column leaves it two wide."""
    state = _make_state(_grid("a", 0, 0, w=3, min_w=2))
    state = _run(
        state,
        ResizeStart("a"),
        ResizeStop("a", x=0, y=0, w=20, h=40),
    )
    assert state.get_widget("a").w == 2
    assert state.get_widget("a").h == 2


def test_resize_pushes_neighbour_below():
    state = _make_state(_grid("a", 0, 0), _grid("b", 2, 0))
    state = _run(state, ResizeStart("a"), ResizeStop("a", x=0, y=0, w=80, h=40))
    assert state.get_widget("a").w == 4
    assert state.get_widget("b").y == 2


def test_keyboard_nudge_grid_moves_one_cell():
    state = _make_state(_grid("a", 0, 0))
    result = reduce_layout(state, PositionChange("a", "right"))
    assert result.state.get_widget("a").x == 1
    assert result.state.operator is None
    assert result.report.type is OperatorType.CHANGE_OVER


def test_keyboard_nudge_float_moves_three_pixels():
    f = Widget("f", x=30, y=30, w=50, h=50, is_float=True, is_draggable=True)
    state = _run(_make_state(f), PositionChange("f", "up"))
    assert (state.get_widget("f").x, state.get_widget("f").y) == (30, 27)


def test_keyboard_nudge_unknown_direction():
    state = _make_state(_grid("a", 0, 0))
    assert reduce_layout(state, PositionChange("a", "sideways")).rejected


def test_content_resize_recomputes_rows():
    state = _make_state(_grid("a", 0, 0, h=1), _grid("b", 0, 1))
    state = _run(state, ContentResize("a", inner_h=70))
    assert state.get_widget("a").h == 4
    assert state.get_widget("b").y == 4


# --- external drops ---


def test_drop_creates_and_selects_widget():
    state = _make_state(_grid("a", 0, 0))
    result = reduce_layout(state, Drop(pointer_x=85, pointer_y=45, widget_id="new"))
    assert not result.rejected
    new = result.state.get_widget("new")
    assert new is result.widget
    assert (new.x, new.y) == (4, 0)
    assert result.state.checked_id == "new"
    assert result.report.type is OperatorType.DROP_OVER


def test_drop_generates_id():
    state = _make_state(_grid("a", 0, 0), layout_id="board")
    result = reduce_layout(state, Drop(pointer_x=150, pointer_y=0))
    assert result.widget.id == "board-1"
    assert result.state.get_widget("board-1") is not None


def test_drag_over_shows_shadow_and_leave_clears_it():
    state = _make_state(_grid("a", 0, 0))
    state = _run(state, DragOver(pointer_x=150, pointer_y=0, template={"w": 2}))
    assert state.operator is OperatorType.DROP
    assert (state.shadow.x, state.shadow.w) == (7, 2)

    state = _run(state, DragLeave())
    assert state.shadow is None
    assert state.operator is None


def test_drag_leave_restores_widgets_pushed_by_drop_shadow():
    state = _make_state(_grid("a", 0, 0, w=4), drop_strategy="direct")
    state = _run(state, DragOver(pointer_x=25, pointer_y=5, template={"w": 2, "h": 2}))
    assert state.get_widget("a").y == 2

    state = _run(state, DragLeave())
    assert state.get_widget("a").y == 0
    assert state.operator is None


def test_drop_after_drag_over_plans_from_committed_layout():
    state = _make_state(_grid("a", 0, 0, w=4), drop_strategy="direct")
    state = _run(
        state,
        DragOver(pointer_x=25, pointer_y=5, template={"w": 2, "h": 2}),
        DragOver(pointer_x=125, pointer_y=5, template={"w": 2, "h": 2}),
    )
    result = reduce_layout(
        state, Drop(pointer_x=125, pointer_y=5, template={"w": 2, "h": 2}, widget_id="n")
    )
    assert (result.widget.x, result.widget.y) == (6, 0)
    assert result.state.get_widget("a").y == 0


def test_drag_leave_ignored_during_grid_drag():
    state = _make_state(_grid("a", 0, 0), _grid("b", 0, 2))
    state = _run(state, DragStart("a"), Drag("a", x=0, y=40), DragLeave())
    assert state.operator is OperatorType.DRAG
    assert state.operator_id == "a"
    assert state.shadow is not None
    assert state.get_widget("a").is_dragging


def test_drop_over_nested_container_is_vetoed():
    state = _make_state(_grid("n", 0, 0, w=5, h=5, is_nested=True))
    result = reduce_layout(state, Drop(pointer_x=10, pointer_y=10))
    assert result.rejected
    assert result.reason == REJECT_NESTED
    assert [w.id for w in result.state.widgets] == ["n"]


def test_drop_while_dragging_is_busy():
    state = _run(_make_state(_grid("a", 0, 0)), DragStart("a"))
    assert reduce_layout(state, Drop(pointer_x=150, pointer_y=0)).reason == REJECT_BUSY


def test_direct_strategy_drop_pushes_occupant():
    state = _make_state(_grid("a", 0, 0, w=4), drop_strategy="direct")
    result = reduce_layout(
        state, Drop(pointer_x=25, pointer_y=5, template={"w": 2, "h": 2}, widget_id="n")
    )
    assert (result.widget.x, result.widget.y) == (1, 0)
    assert result.state.get_widget("a").y == 2


def test_search_strategy_drop_avoids_occupant():
    state = _make_state(_grid("a", 0, 0, w=4))
    result = reduce_layout(
        state, Drop(pointer_x=25, pointer_y=5, template={"w": 2, "h": 2}, widget_id="n")
    )
    assert (result.widget.x, result.widget.y) == (1, 2)
    assert result.state.get_widget("a").y == 0


# --- scrolling ---


def _make_sticky_state():
    return _make_state(
        _grid("s1", 0, 0, w=4, h=1, is_sticky=True),
        _grid("filler", 0, 1, w=10, h=2),
        _grid("s2", 2, 3, w=4, h=1, is_sticky=True),
    )


def test_scroll_pins_and_replaces_sticky_widgets():
    state = _run(_make_sticky_state(), Scroll(scroll_top=60))
    assert pinned_ids(state) == ["s2"]

    state = _run(state, Scroll(scroll_top=30))
    assert pinned_ids(state) == ["s1"]

    state = _run(state, Scroll(scroll_top=0))
    assert pinned_ids(state) == ["s1"]


def test_nothing_pinned_during_interaction():
    state = _run(_make_sticky_state(), Scroll(scroll_top=60), DragStart("filler"))
    assert pinned_ids(state) == []


# --- children and selection ---


def test_children_changed_renormalizes():
    state = _make_state(_grid("a", 0, 0))
    state = _run(state, ChildrenChanged([_grid("b", 0, 3), Widget("c", x=5, w=-1)]))
    assert [w.id for w in state.widgets] == ["b", "c"]
    assert state.get_widget("b").y == 0
    assert state.get_widget("c").w == 1


def test_children_changed_releases_removed_owner():
    state = _run(_make_state(_grid("a", 0, 0)), DragStart("a"))
    assert state.operator is not None
    assert state.checked_id == "a"
    state = _run(state, ChildrenChanged([_grid("b", 0, 0)]))
    assert state.operator is None
    assert state.checked_id is None


def test_select():
    state = _make_state(_grid("a", 0, 0))
    assert _run(state, Select("a")).checked_id == "a"
    assert reduce_layout(state, Select("ghost")).reason == REJECT_NOT_FOUND
    assert _run(state, Select(None)).checked_id is None


# --- cross-canvas hand-off ---


def test_transfer_moves_widget_between_canvases():
    source = _make_state(_grid("a", 0, 0), _grid("b", 0, 2), layout_id="left")
    target = _make_state(_grid("c", 0, 0), layout_id="right")

    removed, added = transfer_widget(source, target, "a", pointer_x=85, pointer_y=0)
    assert not removed.rejected and not added.rejected
    assert removed.report.type is OperatorType.REMOVE
    assert removed.report.widget_id == "a"
    assert [w.id for w in removed.state.widgets] == ["b"]
    assert removed.state.get_widget("b").y == 0

    moved = added.state.get_widget("a")
    assert (moved.x, moved.y) == (4, 0)
    assert moved.layout_id == "right"
    assert added.report.layout_id == "right"


def test_transfer_onto_nested_leaves_both_unchanged():
    source = _make_state(_grid("a", 0, 0), layout_id="left")
    target = _make_state(_grid("n", 0, 0, w=5, h=5, is_nested=True), layout_id="right")

    removed, added = transfer_widget(source, target, "a", pointer_x=10, pointer_y=10)
    assert removed.rejected and added.rejected
    assert added.reason == REJECT_NESTED
    assert [w.id for w in removed.state.widgets] == ["a"]
    assert [w.id for w in added.state.widgets] == ["n"]


def test_add_widget_rejects_duplicate_id():
    state = _make_state(_grid("a", 0, 0))
    result = add_widget(state, _grid("a", 0, 0), pointer_x=100, pointer_y=0)
    assert result.rejected
    assert result.reason == REJECT_DUPLICATE


def test_add_widget_pushes_occupant():
    state = _make_state(_grid("a", 0, 0))
    result = add_widget(state, _grid("z", 5, 5), pointer_x=0, pointer_y=0)
    assert (result.widget.x, result.widget.y) == (0, 0)
    assert result.state.get_widget("a").y == 2
