"""Interaction events fed to the layout reducer, and what it returns.

Pointer payloads are canvas pixels (before undoing the canvas scale for
drop events, after it for drag/resize events, which report the element's
own box).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from drag_layout.parser.model import LayoutState, OperatorType, Widget


@dataclass
class DragStart:
    widget_id: str


@dataclass
class Drag:
    """The dragged element's top-left corner moved to ``(x, y)``."""

    widget_id: str
    x: float
    y: float


@dataclass
class DragStop:
    widget_id: str
    x: float
    y: float


@dataclass
class ResizeStart:
    widget_id: str


@dataclass
class Resize:
    """The resized element's box, margin included, is now ``(x, y, w, h)``."""

    widget_id: str
    x: float
    y: float
    w: float
    h: float
    inner_h: float | None = None


@dataclass
class ResizeStop:
    widget_id: str
    x: float
    y: float
    w: float
    h: float
    inner_h: float | None = None


@dataclass
class PositionChange:
    """Keyboard nudge: ``direction`` is one of left, up, right, down."""

    widget_id: str
    direction: str


@dataclass
class ContentResize:
    """A widget's rendered content height changed to ``inner_h`` pixels."""

    widget_id: str
    inner_h: float


@dataclass
class DragOver:
    """An external item hovers over the canvas at a pointer position."""

    pointer_x: float
    pointer_y: float
    template: dict | None = None


@dataclass
class Drop:
    pointer_x: float
    pointer_y: float
    template: dict | None = None
    # Id for the created widget; generated when omitted
    widget_id: str | None = None


@dataclass
class DragLeave:
    pass


@dataclass
class Cancel:
    pass


@dataclass
class Scroll:
    scroll_top: float


@dataclass
class ChildrenChanged:
    """The host's declared widget list changed."""

    widgets: list[Widget] = field(default_factory=list)


@dataclass
class Select:
    widget_id: str | None


Event = Union[
    DragStart,
    Drag,
    DragStop,
    ResizeStart,
    Resize,
    ResizeStop,
    PositionChange,
    ContentResize,
    DragOver,
    Drop,
    DragLeave,
    Cancel,
    Scroll,
    ChildrenChanged,
    Select,
]


@dataclass
class ChangeReport:
    """What the hosting registry is told after an accepted interaction."""

    type: OperatorType
    widget_id: str
    layout_id: str
    widgets: list[Widget] = field(default_factory=list)


@dataclass
class ReduceResult:
    """New state plus the side information of one reducer call."""

    state: LayoutState
    widget: Widget | None = None
    rejected: bool = False
    reason: str = ""
    report: ChangeReport | None = None
