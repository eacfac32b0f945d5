"""Reader and writer for layout documents.

A layout document is a JSON object holding the canvas geometry (keys as
in :class:`LayoutConfig`) and a ``widgets`` array. Widget objects use the
field names of :class:`Widget`; ``i`` is accepted in place of ``id``.
Widget values that cannot be used are left for normalization to repair,
while a document that is not a layout at all raises ``ValueError``.
"""

from __future__ import annotations

import json

from drag_layout.parser.model import (
    LayoutConfig,
    LayoutState,
    Margin,
    Padding,
    Widget,
)

_NUMERIC_FIELDS = ("x", "y", "w", "h", "inner_h", "min_w", "min_h")
_GEOMETRY_FIELDS = ("x", "y", "w", "h")
_FLAG_FIELDS = (
    "is_float",
    "is_draggable",
    "is_resizable",
    "is_nested",
    "is_sticky",
    "is_static",
    "covered",
)
_CONFIG_FIELDS = (
    "layout_id",
    "cols",
    "row_height",
    "width",
    "height",
    "scale",
    "need_grid_bound",
    "need_drag_bound",
    "dropping_item",
    "drop_strategy",
    "search_radius",
    "sticky_threshold",
)


def load_layout(text: str) -> LayoutState:
    """Parse a JSON layout document into an (unnormalized) layout state."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Layout is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("Layout document must be a JSON object")

    raw_widgets = data.get("widgets", [])
    if not isinstance(raw_widgets, list):
        raise ValueError("'widgets' must be a list")

    config = config_from_dict(data)
    widgets = []
    for index, item in enumerate(raw_widgets):
        if not isinstance(item, dict):
            raise ValueError(f"Widget #{index} must be an object")
        widget = widget_from_dict(item, default_id=str(index))
        if widget.layout_id is None:
            widget.layout_id = config.layout_id
        widgets.append(widget)

    _check_unique_ids(widgets)
    return LayoutState(config=config, widgets=widgets)


def config_from_dict(data: dict) -> LayoutConfig:
    """Build a :class:`LayoutConfig` from the geometry keys of a document."""
    config = LayoutConfig()
    for name in _CONFIG_FIELDS:
        if name in data:
            setattr(config, name, data[name])
    if "container_padding" in data:
        config.container_padding = Padding.from_values(data["container_padding"])
    if "item_margin" in data:
        config.item_margin = Margin.from_values(data["item_margin"])
    config.layout_id = str(config.layout_id)
    if isinstance(config.cols, bool) or not isinstance(config.cols, int) or config.cols < 1:
        raise ValueError(f"'cols' must be a positive integer, got {config.cols!r}")
    if not isinstance(config.dropping_item, dict):
        raise ValueError("'dropping_item' must be an object")
    return config


def widget_from_dict(data: dict, default_id: str = "") -> Widget:
    """Build a :class:`Widget` from a JSON object.

    Numeric fields that are not numbers become ``None`` (or NaN for
    required coordinates) so that normalization can default them.
    """
    widget_id = data.get("id", data.get("i", default_id))
    widget = Widget(id=str(widget_id))
    for name in _NUMERIC_FIELDS:
        value = _number_or_none(data.get(name))
        if value is None and name in _GEOMETRY_FIELDS:
            value = float("nan")
        setattr(widget, name, value)
    for name in _FLAG_FIELDS:
        if name in data:
            setattr(widget, name, bool(data[name]))
    if data.get("layout_id") is not None:
        widget.layout_id = str(data["layout_id"])
    return widget


def widget_to_dict(widget: Widget) -> dict:
    """Serialize a widget, leaving out unset optional fields."""
    out: dict = {"id": widget.id}
    for name in _NUMERIC_FIELDS:
        value = getattr(widget, name)
        if value is not None:
            out[name] = value
    for name in _FLAG_FIELDS:
        out[name] = getattr(widget, name)
    if widget.layout_id is not None:
        out["layout_id"] = widget.layout_id
    return out


def dump_layout(state: LayoutState) -> str:
    """Serialize a layout state back to a JSON document."""
    config = state.config
    data: dict = {name: getattr(config, name) for name in _CONFIG_FIELDS}
    data["container_padding"] = config.container_padding.as_list()
    data["item_margin"] = [config.item_margin.y, config.item_margin.x]
    data["widgets"] = [widget_to_dict(w) for w in state.widgets]
    return json.dumps(data, indent=2) + "\n"


def _number_or_none(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _check_unique_ids(widgets: list[Widget]) -> None:
    seen: set[str] = set()
    for widget in widgets:
        if widget.id in seen:
            raise ValueError(f"Duplicate widget id '{widget.id}'")
        seen.add(widget.id)
