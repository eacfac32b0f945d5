"""Data model for widget layouts."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


class OperatorType(Enum):
    """Kind of interaction currently owning a canvas."""

    DRAG_START = "dragstart"
    DRAG = "drag"
    DRAG_OVER = "dragover"
    RESIZE_START = "resizestart"
    RESIZE = "resize"
    RESIZE_OVER = "resizeover"
    DROP = "drop"
    DROP_OVER = "dropover"
    CHANGE_OVER = "changeover"
    REMOVE = "remove"


@dataclass
class Padding:
    """Container padding in pixels."""

    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    @classmethod
    def from_values(cls, values: float | list[float] | tuple[float, ...]) -> Padding:
        """Build padding from CSS-style shorthand (1, 2 or 4 values)."""
        if isinstance(values, (int, float)):
            values = [values]
        values = [float(v) for v in values]
        if len(values) == 1:
            return cls(values[0], values[0], values[0], values[0])
        if len(values) == 2:
            return cls(values[0], values[1], values[0], values[1])
        if len(values) == 4:
            return cls(*values)
        raise ValueError(f"Padding takes 1, 2 or 4 values, got {len(values)}")

    def as_list(self) -> list[float]:
        return [self.top, self.right, self.bottom, self.left]


@dataclass
class Margin:
    """Spacing between grid widgets, ``[margin_y, margin_x]`` in pixels."""

    y: float = 0.0
    x: float = 0.0

    @classmethod
    def from_values(cls, values: float | list[float] | tuple[float, ...]) -> Margin:
        if isinstance(values, (int, float)):
            return cls(float(values), float(values))
        values = [float(v) for v in values]
        if len(values) == 1:
            return cls(values[0], values[0])
        if len(values) == 2:
            return cls(values[0], values[1])
        raise ValueError(f"Margin takes 1 or 2 values, got {len(values)}")


@dataclass
class Widget:
    """A positioned, sized rectangle on a canvas.

    Coordinates are grid cells for grid widgets and pixels for float
    widgets.
    """

    id: str
    x: float = 0.0
    y: float = 0.0
    w: float = 1.0
    h: float = 1.0
    inner_h: float | None = None
    min_w: float | None = None
    min_h: float | None = None
    is_float: bool = False
    is_draggable: bool = False
    is_resizable: bool = False
    is_nested: bool = False
    is_sticky: bool = False
    is_static: bool = False
    # Populated by the engine
    moved: bool = False
    covered: bool = False
    is_dragging: bool = False
    layout_id: str | None = None

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def clone(self) -> Widget:
        """Return an independent copy (used for shadow widgets)."""
        return replace(self)

    def move_to(self, other: Widget) -> None:
        """Copy position and size from another widget with the same id."""
        self.x = other.x
        self.y = other.y
        self.w = other.w
        self.h = other.h
        self.inner_h = other.inner_h


@dataclass
class PixelRect:
    """A rectangle in canvas pixel space."""

    x: float
    y: float
    w: float
    h: float

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x + self.w and self.y <= py <= self.y + self.h


@dataclass
class Grid:
    """Cell size derived from the container geometry."""

    col_width: float
    row_height: float


@dataclass
class Bound:
    """Legal movement rectangle for a widget."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float


@dataclass
class StickyEntry:
    """A pinned widget and the entries it suppressed while pinned."""

    id: str
    min_x: float
    max_x: float
    y: float
    is_sticky: bool = True
    replaced_ids: list[str] = field(default_factory=list)


@dataclass
class LayoutConfig:
    """Canvas geometry and behaviour switches."""

    layout_id: str = "root"
    cols: int = 10
    row_height: float = 20.0
    width: float = 200.0
    height: float = 200.0
    container_padding: Padding = field(default_factory=Padding)
    item_margin: Margin = field(default_factory=Margin)
    scale: float = 1.0
    need_grid_bound: bool = True
    need_drag_bound: bool = True
    # Template for externally dropped items (w/h/id/is_float...)
    dropping_item: dict = field(default_factory=dict)
    drop_strategy: str = "search"  # "search" or "direct"
    search_radius: int = 2
    sticky_threshold: float = 0.0


@dataclass
class LayoutState:
    """Complete state of one canvas between two events."""

    config: LayoutConfig = field(default_factory=LayoutConfig)
    widgets: list[Widget] = field(default_factory=list)
    shadow: Widget | None = None
    operator: OperatorType | None = None
    operator_id: str | None = None
    checked_id: str | None = None
    # Pinned widgets in pin order
    sticky_queue: list[StickyEntry] = field(default_factory=list)
    # Geometry to restore when the active interaction is abandoned
    committed: dict[str, Widget] | None = None

    def get_widget(self, widget_id: str) -> Widget | None:
        """Return the widget with the given id, or None."""
        for widget in self.widgets:
            if widget.id == widget_id:
                return widget
        return None

    def without(self, widget_id: str) -> list[Widget]:
        """Return the widgets other than ``widget_id``."""
        return [w for w in self.widgets if w.id != widget_id]

