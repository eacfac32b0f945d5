"""Layout constants used across layout modules.

Centralizes the magic numbers of the unit converter, bound resolver,
drop planner and sticky tracker.
"""

# ---------------------------------------------------------------------------
# Widget sizing
# ---------------------------------------------------------------------------
GRID_MIN_SIZE: float = 1.0
"""Default minimum width/height of a grid widget, in cells."""

FLOAT_MIN_SIZE: float = 5.0
"""Default minimum width/height of a float widget, in pixels."""

DROP_ITEM_W: float = 1.0
"""Width of a dropped item when the template gives none."""

DROP_ITEM_H: float = 1.0
"""Height of a dropped item when the template gives none."""

DROP_ITEM_ID: str = "__dropping_elem__"
"""Id given to the drop shadow when the template names none."""

# ---------------------------------------------------------------------------
# Interaction
# ---------------------------------------------------------------------------
KEY_STEP: float = 3.0
"""Pixels moved by one keyboard nudge."""

SEARCH_RADIUS: int = 2
"""Neighbourhood radius (in cells) searched by the insertion planner."""

STICKY_THRESHOLD: float = 0.0
"""Scroll-relative top offset at or below which a sticky widget pins."""

# ---------------------------------------------------------------------------
# Placement strategies
# ---------------------------------------------------------------------------
STRATEGY_SEARCH: str = "search"
"""Drop insertion searches nearby cells for the least disruptive slot."""

STRATEGY_DIRECT: str = "direct"
"""Drop insertion cascades directly from the pointer cell."""

DROP_STRATEGIES: tuple[str, ...] = (STRATEGY_SEARCH, STRATEGY_DIRECT)
