"""
Visual overlays drawn on top of the image.

* ``MarkerOverlay`` – one unfilled ring per point (vector, always crisp).
* ``HeatmapOverlay`` – raster density map built from soft red radial blobs.

Both are transparent for mouse events so clicks reach the annotator, and both
redraw everything from scratch on every change; point counts are small.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from PyQt5.QtCore import QPointF, QSize, Qt
from PyQt5.QtGui import QBrush, QColor, QImage, QPainter, QPen, QRadialGradient
from PyQt5.QtWidgets import QWidget

from .geometry import BoxSize, Point, to_pixels

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Colours
# ---------------------------------------------------------------------------
MARKER_COLOR = QColor(255, 0, 0)
MARKER_PEN_WIDTH = 2

HEAT_ALPHA = 0.35
HEAT_CENTER_COLOR = QColor(255, 0, 0, round(HEAT_ALPHA * 255))
HEAT_EDGE_COLOR = QColor(255, 0, 0, 0)


def draw_markers(painter: QPainter, points: Iterable[Point], box: BoxSize, radius_px: float) -> int:
    """Draw a ring per point, returning how many were drawn."""
    if box.is_empty:
        return 0
    pen = QPen(MARKER_COLOR)
    pen.setWidth(MARKER_PEN_WIDTH)
    painter.setPen(pen)
    painter.setBrush(Qt.NoBrush)

    drawn = 0
    for point in points:
        x, y = to_pixels(point, box)
        painter.drawEllipse(QPointF(x, y), radius_px, radius_px)
        drawn += 1
    return drawn


def render_heatmap(surface: QImage, points: Iterable[Point], box: BoxSize, radius: float) -> bool:
    """Repaint ``surface`` with one radial blob per point.

    The surface is cleared first so repeated renders never darken existing
    regions.  Returns ``False`` without touching the surface when the box is
    empty.
    """
    if box.is_empty:
        return False

    surface.fill(Qt.transparent)
    painter = QPainter(surface)
    painter.setRenderHint(QPainter.Antialiasing)
    painter.setCompositionMode(QPainter.CompositionMode_SourceOver)
    painter.setPen(Qt.NoPen)

    for point in points:
        center = QPointF(*to_pixels(point, box))
        grad = QRadialGradient(center, float(radius))
        grad.setColorAt(0.0, HEAT_CENTER_COLOR)
        grad.setColorAt(1.0, HEAT_EDGE_COLOR)
        painter.setBrush(QBrush(grad))
        painter.drawEllipse(center, float(radius), float(radius))

    painter.end()
    return True


# ---------------------------------------------------------------------------


class _Overlay(QWidget):
    """Click-through child widget that covers the image box."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setAttribute(Qt.WA_TransparentForMouseEvents, True)
        self.setAttribute(Qt.WA_NoSystemBackground, True)
        self._points: Sequence[Point] = ()
        self._box = BoxSize()

    @property
    def box(self) -> BoxSize:
        return self._box

    def set_points(self, points: Iterable[Point]) -> None:
        self._points = tuple(points)
        self._refresh()

    def set_box(self, box: BoxSize) -> None:
        self._box = box
        self.setGeometry(0, 0, box.width, box.height)
        self._refresh()

    def _refresh(self) -> None:
        self.update()


class MarkerOverlay(_Overlay):
    def __init__(self, radius_px: float = 10, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.radius_px = radius_px

    def paintEvent(self, _event):  # noqa: N802
        if self._box.is_empty:
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        draw_markers(painter, self._points, self._box, self.radius_px)
        painter.end()


class HeatmapOverlay(_Overlay):
    """Keeps an offscreen surface sized to the box and blits it on paint."""

    def __init__(self, radius: float = 40, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._radius = radius
        self._surface = QImage()

    @property
    def radius(self) -> float:
        return self._radius

    @property
    def surface(self) -> QImage:
        return self._surface

    def set_radius(self, radius: float) -> None:
        if radius == self._radius:
            return
        self._radius = radius
        self._refresh()

    def set_box(self, box: BoxSize, radius: Optional[float] = None) -> None:
        """Resize to ``box``, optionally with a new radius, in one render."""
        if radius is not None:
            self._radius = radius
        super().set_box(box)

    def _refresh(self) -> None:
        if self._box.is_empty:
            return
        size = QSize(self._box.width, self._box.height)
        if self._surface.size() != size:
            self._surface = QImage(size, QImage.Format_ARGB32_Premultiplied)
        render_heatmap(self._surface, self._points, self._box, self._radius)
        self.update()

    def paintEvent(self, _event):  # noqa: N802
        if self._box.is_empty or self._surface.isNull():
            return
        painter = QPainter(self)
        painter.drawImage(0, 0, self._surface)
        painter.end()
