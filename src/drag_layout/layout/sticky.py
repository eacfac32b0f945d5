"""Sticky pinning of widgets while the viewport scrolls.

Each sticky-eligible widget is either unpinned or pinned. The pinned ones
live in an ordered queue of :class:`StickyEntry`. When a widget pins, any
queued entry whose column span intersects its own and which sits at or
above it is suppressed, and its id is recorded in the new entry's
``replaced_ids``. Unpinning restores exactly those ids. Entries refer to
each other by id only, so restoring is a lookup in the queue.
"""

from __future__ import annotations

__all__ = ["StickyTracker", "spans_intersect"]

from loguru import logger

from drag_layout.layout.constants import STICKY_THRESHOLD
from drag_layout.parser.model import StickyEntry


def spans_intersect(a_min: float, a_max: float, b_min: float, b_max: float) -> bool:
    """Return True when closed intervals ``[a_min, a_max]``/``[b_min, b_max]`` meet."""
    return not (a_max < b_min or a_min > b_max)


class StickyTracker:
    """Pin/unpin bookkeeping over an ordered queue of entries.

    The tracker works directly on the list it is given, so a layout state
    can own the queue and hand it to a fresh tracker on every event.
    """

    def __init__(self, entries: list[StickyEntry] | None = None):
        self.entries: list[StickyEntry] = entries if entries is not None else []

    def entry(self, widget_id: str) -> StickyEntry | None:
        for entry in self.entries:
            if entry.id == widget_id:
                return entry
        return None

    def is_pinned(self, widget_id: str) -> bool:
        """Return True when the widget is queued and not suppressed."""
        entry = self.entry(widget_id)
        return entry is not None and entry.is_sticky

    def pinned_ids(self) -> list[str]:
        return [e.id for e in self.entries if e.is_sticky]

    def update(
        self,
        widget_id: str,
        min_x: float,
        max_x: float,
        y: float,
        scroll_top: float,
        threshold: float = STICKY_THRESHOLD,
    ) -> bool:
        """Feed one widget's geometry for the current scroll position.

        ``y`` is the widget's native (flow) top in pixels and ``scroll_top``
        the viewport's scroll offset. Returns whether the widget is pinned
        afterwards.
        """
        if y - scroll_top <= threshold:
            if self.entry(widget_id) is None:
                self.pin(widget_id, min_x, max_x, y)
        elif self.entry(widget_id) is not None:
            self.unpin(widget_id)
        return self.is_pinned(widget_id)

    def pin(self, widget_id: str, min_x: float, max_x: float, y: float) -> StickyEntry:
        """Queue a widget as pinned, suppressing the entries it covers."""
        replaced: list[str] = []
        for other in self.entries:
            if not spans_intersect(other.min_x, other.max_x, min_x, max_x):
                continue
            if other.y > y:
                continue
            if other.is_sticky and other.id not in replaced:
                replaced.append(other.id)
            other.is_sticky = False

        entry = StickyEntry(
            id=widget_id, min_x=min_x, max_x=max_x, y=y, replaced_ids=replaced
        )
        self.entries.append(entry)
        if replaced:
            logger.debug(f"Sticky '{widget_id}' pinned over {', '.join(replaced)}")
        return entry

    def unpin(self, widget_id: str) -> bool:
        """Drop a widget from the queue and restore what it suppressed.

        Returns False when the widget was not pinned.
        """
        target = self.entry(widget_id)
        if target is None:
            return False
        for other in self.entries:
            if other.id in target.replaced_ids:
                other.is_sticky = True
        self.entries.remove(target)
        return True

    def forget(self, widget_id: str) -> None:
        """Remove a widget that left the layout without restoring anything."""
        self.entries[:] = [e for e in self.entries if e.id != widget_id]
        for entry in self.entries:
            if widget_id in entry.replaced_ids:
                entry.replaced_ids.remove(widget_id)
