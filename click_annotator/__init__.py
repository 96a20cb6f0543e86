"""Image click annotator with ring markers and a density heatmap."""

from .annotator import AnnotatorMode, ImageAnnotator
from .config import AnnotatorConfig
from .errors import AnnotatorError, ConfigError, GeometryError, SizeTrackerError
from .geometry import BoxSize, Point, heatmap_radius, to_normalized, to_pixels
from .history import PointHistory
from .size_tracker import SizeTracker
from .visibility import Visibility, VisibilityController

__all__ = [
    "AnnotatorConfig",
    "AnnotatorError",
    "AnnotatorMode",
    "BoxSize",
    "ConfigError",
    "GeometryError",
    "ImageAnnotator",
    "Point",
    "PointHistory",
    "SizeTracker",
    "SizeTrackerError",
    "Visibility",
    "VisibilityController",
    "heatmap_radius",
    "to_normalized",
    "to_pixels",
]
