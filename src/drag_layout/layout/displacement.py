"""Displacement resolver: move one widget and push its colliders down.

Moving a widget onto occupied cells pushes every overlapped widget to
just below the mover, and each pushed widget in turn pushes whatever it
now overlaps. Widgets are referenced by id and each one is displaced at
most once per call, so the cascade is a tree rooted at the mover and
touches at most ``N - 1`` other widgets.

Static widgets are never displaced; a grid-snapped widget that would
land on one is routed below it instead.
"""

from __future__ import annotations

__all__ = ["move_element"]

from collections import deque

import networkx as nx
from loguru import logger

from drag_layout.layout.collision import find_collisions, get_first_collision
from drag_layout.parser.model import Widget


def move_element(
    widgets: list[Widget],
    target: Widget,
    new_x: float,
    new_y: float,
    grid_enabled: bool = True,
) -> nx.DiGraph:
    """Move ``target`` to ``(new_x, new_y)`` and cascade displacement.

    ``widgets`` is mutated in place; ``target`` may or may not be a
    member of it. Returns the cascade as a directed graph whose edges
    run from pusher to pushed widget id.
    """
    cascade = nx.DiGraph()
    cascade.add_node(target.id)

    if target.is_static:
        logger.debug(f"Widget '{target.id}' is static; move ignored")
        return cascade

    if target.is_float:
        # Float widgets may overlap anything and never push.
        target.x = new_x
        target.y = new_y
        return cascade

    target.x = max(new_x, 0)
    target.y = max(new_y, 0)

    others = [w for w in widgets if w.id != target.id and not w.is_float]
    statics = [w for w in others if w.is_static]
    if grid_enabled:
        _route_below_statics(target, statics)

    visited: set[str] = {target.id}
    queue: deque[Widget] = deque([target])
    while queue:
        mover = queue.popleft()
        colliders = find_collisions(mover, others, exclude_ids=visited)
        colliders.sort(key=lambda w: (w.y, w.x))
        for widget in colliders:
            if widget.is_static:
                continue
            visited.add(widget.id)
            widget.y = mover.y + mover.h
            if grid_enabled:
                _route_below_statics(widget, statics)
            widget.moved = True
            cascade.add_edge(mover.id, widget.id)
            queue.append(widget)

    if cascade.number_of_edges():
        logger.debug(
            f"Moving '{target.id}' displaced {cascade.number_of_nodes() - 1} widgets"
        )
    return cascade


def _route_below_statics(widget: Widget, statics: list[Widget]) -> None:
    """Slide ``widget`` down until it clears every static widget."""
    blocker = get_first_collision(widget, statics)
    while blocker is not None:
        widget.y = blocker.y + blocker.h
        blocker = get_first_collision(widget, statics)
