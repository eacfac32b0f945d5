"""Grid layout engine.

Public API:
- reduce_layout: Apply one interaction event to a canvas state
- mount_layout: Build a normalized, compacted canvas state
- compact / move_element / find_collisions: Placement primitives
- get_drop_item / dynamic_programming: Drop planning
- StickyTracker: Scroll pinning bookkeeping
"""

from drag_layout.layout.bounds import DEFAULT_BOUND, apply_bound, clamp, compute_bound
from drag_layout.layout.collision import collides, find_collisions
from drag_layout.layout.compactor import compact
from drag_layout.layout.displacement import move_element
from drag_layout.layout.drop import dynamic_programming, get_drop_item
from drag_layout.layout.engine import (
    add_widget,
    mount_layout,
    pinned_ids,
    reduce_layout,
    remove_widget,
    transfer_widget,
)
from drag_layout.layout.sticky import StickyTracker
from drag_layout.layout.units import compute_grid, to_pixels, to_units

__all__ = [
    "DEFAULT_BOUND",
    "StickyTracker",
    "add_widget",
    "apply_bound",
    "clamp",
    "collides",
    "compact",
    "compute_bound",
    "compute_grid",
    "dynamic_programming",
    "find_collisions",
    "get_drop_item",
    "mount_layout",
    "move_element",
    "pinned_ids",
    "reduce_layout",
    "remove_widget",
    "to_pixels",
    "to_units",
    "transfer_widget",
]
