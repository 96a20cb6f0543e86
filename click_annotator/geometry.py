"""
Coordinate mapping between on-screen pixels and the normalized unit square.

Points are stored normalized (0..1 on each axis) so they stay valid no matter
how large the image is drawn.  ``BoxSize`` is the frame used to project them
back to pixels for the overlays.
"""

from __future__ import annotations

import math
import time
from dataclasses import asdict, dataclass
from typing import Dict, Optional, Tuple, Union

from PyQt5.QtCore import QRect, QRectF

from .errors import GeometryError

Rect = Union[QRect, QRectF]


@dataclass(frozen=True)
class Point:
    """A single annotated click, normalized to the image box."""

    x: float
    y: float
    t: int  # Click timestamp, ms since the epoch

    def __post_init__(self):
        if not (0.0 <= self.x <= 1.0 and 0.0 <= self.y <= 1.0):
            raise GeometryError(f"Point ({self.x}, {self.y}) is outside the unit square")

    def to_dict(self) -> Dict[str, Union[float, int]]:
        return asdict(self)


@dataclass(frozen=True)
class BoxSize:
    """Last observed rendered size of the image widget, in whole pixels."""

    width: int = 0
    height: int = 0

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def now_ms() -> int:
    return int(time.time() * 1000)


def to_normalized(pixel_x: float, pixel_y: float, box: Rect, t: Optional[int] = None) -> Point:
    """Map a pixel position onto the unit square of ``box``.

    Positions outside the box are clamped onto its edge, so the returned
    point always lies in [0, 1] on both axes.  ``box`` must have a non-zero
    width and height.
    """
    width, height = box.width(), box.height()
    if width <= 0 or height <= 0:
        raise GeometryError(f"Cannot normalize against an empty box ({width}x{height})")

    x = clamp((pixel_x - box.left()) / width, 0.0, 1.0)
    y = clamp((pixel_y - box.top()) / height, 0.0, 1.0)
    return Point(x, y, now_ms() if t is None else t)


def to_pixels(point: Point, box: BoxSize) -> Tuple[float, float]:
    """Project a normalized point into the pixel space of ``box``."""
    return point.x * box.width, point.y * box.height


def heatmap_radius(box: BoxSize) -> int:
    """Blob radius scaled to the displayed image, never below 40 px."""
    return max(40, math.floor((box.width + box.height) / 50))
