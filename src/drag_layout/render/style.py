"""Theme and style constants for layout rendering."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Theme:
    """Visual theme for a rendered layout."""

    name: str
    background_color: str
    canvas_fill: str
    canvas_stroke: str
    grid_line_color: str
    grid_line_width: float
    widget_fill: str
    widget_stroke: str
    widget_stroke_width: float
    widget_corner_radius: float
    label_color: str
    label_font_family: str
    label_font_size: float
    title_color: str
    title_font_size: float
    # Interaction states
    float_fill: str = "rgba(90, 160, 255, 0.25)"
    static_fill: str = "rgba(128, 128, 128, 0.35)"
    nested_stroke: str = "#f0a030"
    shadow_fill: str = "rgba(0, 120, 255, 0.15)"
    shadow_stroke: str = "#0078ff"
    shadow_dash: str = "6,4"
    pinned_stroke: str = "#e0457b"
