"""Layout data model and JSON layout documents.

Public API:
- load_layout / dump_layout: Read and write layout documents
- Widget, LayoutConfig, LayoutState: Core data model
"""

from drag_layout.parser.loader import dump_layout, load_layout, widget_from_dict
from drag_layout.parser.model import (
    Bound,
    Grid,
    LayoutConfig,
    LayoutState,
    Margin,
    OperatorType,
    Padding,
    PixelRect,
    StickyEntry,
    Widget,
)

__all__ = [
    "Bound",
    "Grid",
    "LayoutConfig",
    "LayoutState",
    "Margin",
    "OperatorType",
    "Padding",
    "PixelRect",
    "StickyEntry",
    "Widget",
    "dump_layout",
    "load_layout",
    "widget_from_dict",
]
