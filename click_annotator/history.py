"""Ordered point history with undo."""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple

from PyQt5.QtCore import QObject, pyqtSignal

from .geometry import Point

logger = logging.getLogger(__name__)


class PointHistory(QObject):
    """Append-only sequence of points; only the newest one can be removed.

    ``changed`` fires after every mutation that altered the sequence so the
    overlays can redraw.  Undo and clear on an empty history are no-ops.
    """

    changed = pyqtSignal()

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._points: List[Point] = []

    def append(self, point: Point) -> None:
        self._points.append(point)
        logger.debug("Point %d added at (%.4f, %.4f)", len(self._points), point.x, point.y)
        self.changed.emit()

    def undo_last(self) -> Optional[Point]:
        if not self._points:
            return None
        removed = self._points.pop()
        logger.debug("Undo removed point at (%.4f, %.4f)", removed.x, removed.y)
        self.changed.emit()
        return removed

    def clear(self) -> None:
        if not self._points:
            return
        self._points.clear()
        logger.debug("History cleared")
        self.changed.emit()

    def count(self) -> int:
        return len(self._points)

    def points(self) -> Tuple[Point, ...]:
        """Snapshot of the history in insertion order."""
        return tuple(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point]:
        return iter(tuple(self._points))
