"""Dark grey theme."""

from drag_layout.render.style import Theme

DARK_THEME = Theme(
    name="dark",
    background_color="#2b2b2b",
    canvas_fill="#333333",
    canvas_stroke="rgba(255, 255, 255, 0.2)",
    grid_line_color="rgba(255, 255, 255, 0.06)",
    grid_line_width=1.0,
    widget_fill="rgba(255, 255, 255, 0.08)",
    widget_stroke="#e0e0e0",
    widget_stroke_width=1.0,
    widget_corner_radius=4.0,
    label_color="#e0e0e0",
    label_font_family="'Helvetica Neue', Helvetica, Arial, sans-serif",
    label_font_size=12.0,
    title_color="#ffffff",
    title_font_size=16.0,
    static_fill="rgba(255, 255, 255, 0.2)",
)
