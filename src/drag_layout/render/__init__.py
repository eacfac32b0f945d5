"""SVG rendering of layouts."""

from drag_layout.render.svg import render_svg

__all__ = ["render_svg"]
