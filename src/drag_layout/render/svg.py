"""SVG generation for widget layouts using drawsvg.

The output is a debugging view of what the engine computed: the padded
canvas, its grid, every widget's content box and, when present, the
shadow of the interaction in progress.
"""

from __future__ import annotations

import drawsvg as draw

from drag_layout.layout.engine import pinned_ids
from drag_layout.layout.units import compute_grid, content_rect, to_pixels
from drag_layout.parser.model import Grid, LayoutState, PixelRect, Widget
from drag_layout.render.style import Theme

TITLE_HEIGHT = 30.0


def render_svg(
    state: LayoutState,
    theme: Theme,
    width: int | None = None,
    height: int | None = None,
    padding: float = 20.0,
    scroll_top: float | None = None,
) -> str:
    """Render a layout state to an SVG string.

    With ``scroll_top`` given, pinned sticky widgets are drawn at the
    viewport top instead of their flow position.
    """
    config = state.config
    grid = compute_grid(config)

    canvas_w = config.width
    canvas_h = config.height
    for widget in _all_widgets(state):
        rect = to_pixels(widget, grid, config.container_padding)
        canvas_h = max(canvas_h, rect.y + rect.h + config.container_padding.bottom)

    svg_width = width or int(canvas_w + padding * 2)
    svg_height = height or int(canvas_h + padding * 2 + TITLE_HEIGHT)

    d = draw.Drawing(svg_width, svg_height)
    d.append(draw.Rectangle(0, 0, svg_width, svg_height, fill=theme.background_color))
    d.append(draw.Text(
        config.layout_id,
        theme.title_font_size,
        padding, padding + theme.title_font_size / 2,
        fill=theme.title_color,
        font_family=theme.label_font_family,
        font_weight="bold",
        dominant_baseline="central",
    ))

    origin_x = padding
    origin_y = padding + TITLE_HEIGHT
    group = draw.Group(transform=f"translate({origin_x},{origin_y})")
    group.append(draw.Rectangle(
        0, 0, canvas_w, canvas_h,
        fill=theme.canvas_fill,
        stroke=theme.canvas_stroke,
        stroke_width=1.0,
    ))
    _render_grid(group, state, grid, canvas_h, theme)

    pinned = set(pinned_ids(state)) if scroll_top is not None else set()
    for widget in state.widgets:
        if widget.is_dragging and state.shadow is not None:
            continue
        top = scroll_top if widget.id in pinned else None
        _render_widget(group, state, grid, widget, theme, pinned_top=top)

    if state.shadow is not None:
        _render_shadow(group, state, grid, state.shadow, theme)

    d.append(group)
    return d.as_svg() + "\n"


def _all_widgets(state: LayoutState) -> list[Widget]:
    if state.shadow is None:
        return list(state.widgets)
    return [*state.widgets, state.shadow]


def _render_grid(
    group: draw.Group,
    state: LayoutState,
    grid: Grid,
    canvas_h: float,
    theme: Theme,
) -> None:
    """Draw column and row guides inside the padded canvas area."""
    padding = state.config.container_padding
    right = state.config.width - padding.right
    for col in range(state.config.cols + 1):
        x = padding.left + col * grid.col_width
        group.append(draw.Line(
            x, padding.top, x, canvas_h - padding.bottom,
            stroke=theme.grid_line_color,
            stroke_width=theme.grid_line_width,
        ))
    rows = int((canvas_h - padding.top - padding.bottom) // grid.row_height)
    for row in range(rows + 1):
        y = padding.top + row * grid.row_height
        group.append(draw.Line(
            padding.left, y, right, y,
            stroke=theme.grid_line_color,
            stroke_width=theme.grid_line_width,
        ))


def _widget_box(state: LayoutState, grid: Grid, widget: Widget) -> PixelRect:
    config = state.config
    rect = to_pixels(widget, grid, config.container_padding)
    return content_rect(
        rect, config.item_margin, config.container_padding, is_float=widget.is_float
    )


def _render_widget(
    group: draw.Group,
    state: LayoutState,
    grid: Grid,
    widget: Widget,
    theme: Theme,
    pinned_top: float | None = None,
) -> None:
    box = _widget_box(state, grid, widget)
    if pinned_top is not None:
        box.y = pinned_top

    fill = theme.widget_fill
    if widget.is_static:
        fill = theme.static_fill
    elif widget.is_float:
        fill = theme.float_fill

    stroke = theme.widget_stroke
    if pinned_top is not None:
        stroke = theme.pinned_stroke
    elif widget.is_nested:
        stroke = theme.nested_stroke

    group.append(draw.Rectangle(
        box.x, box.y, box.w, box.h,
        rx=theme.widget_corner_radius, ry=theme.widget_corner_radius,
        fill=fill,
        stroke=stroke,
        stroke_width=theme.widget_stroke_width,
    ))
    group.append(draw.Text(
        widget.id,
        theme.label_font_size,
        box.x + box.w / 2, box.y + box.h / 2,
        fill=theme.label_color,
        font_family=theme.label_font_family,
        text_anchor="middle",
        dominant_baseline="central",
    ))


def _render_shadow(
    group: draw.Group,
    state: LayoutState,
    grid: Grid,
    shadow: Widget,
    theme: Theme,
) -> None:
    box = _widget_box(state, grid, shadow)
    group.append(draw.Rectangle(
        box.x, box.y, box.w, box.h,
        rx=theme.widget_corner_radius, ry=theme.widget_corner_radius,
        fill=theme.shadow_fill,
        stroke=theme.shadow_stroke,
        stroke_width=theme.widget_stroke_width,
        stroke_dasharray=theme.shadow_dash,
    ))
