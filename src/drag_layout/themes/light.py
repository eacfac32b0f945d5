"""Light theme."""

from drag_layout.render.style import Theme

LIGHT_THEME = Theme(
    name="light",
    background_color="#ffffff",
    canvas_fill="#fafafa",
    canvas_stroke="#cccccc",
    grid_line_color="rgba(0, 0, 0, 0.06)",
    grid_line_width=1.0,
    widget_fill="#ffffff",
    widget_stroke="#333333",
    widget_stroke_width=1.0,
    widget_corner_radius=4.0,
    label_color="#333333",
    label_font_family="'Helvetica Neue', Helvetica, Arial, sans-serif",
    label_font_size=12.0,
    title_color="#111111",
    title_font_size=16.0,
)
