"""
Image annotator widget.

Flow:
1. The subject clicks on the image; each click is normalized against the
   image box and appended to the point history.  Ring markers and the
   heatmap follow the history and the image size.
2. Undo / Clear / Done live in the actions menu above the image.  Ctrl+Z
   undoes the last point while annotating.
3. Done freezes the annotation, shows the image again if limited view hid it
   and emits ``finished`` with the point list for the host.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from PyQt5.QtCore import QPoint, QPointF, QRect, QSize, Qt, pyqtSignal
from PyQt5.QtGui import QKeySequence, QPainter, QPixmap
from PyQt5.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPushButton,
    QShortcut,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from .config import AnnotatorConfig
from .errors import AnnotatorError
from .geometry import BoxSize, Point, heatmap_radius, to_normalized
from .history import PointHistory
from .overlays import HeatmapOverlay, MarkerOverlay
from .size_tracker import SizeTracker
from .visibility import VisibilityController

logger = logging.getLogger(__name__)

ImageSource = Union[str, Path, QPixmap]


class AnnotatorMode(enum.Enum):
    ANNOTATE = "annotate"
    DONE = "done"


# ---------------------------------------------------------------------------


def fit_rect(image: QSize, area: QSize) -> QRect:
    """Largest rect with the image's aspect ratio, centred in ``area``."""
    if image.isEmpty() or area.isEmpty():
        return QRect(0, 0, 0, 0)
    size = image.scaled(area, Qt.KeepAspectRatio)
    return QRect(
        (area.width() - size.width()) // 2,
        (area.height() - size.height()) // 2,
        size.width(),
        size.height(),
    )


class ImageView(QWidget):
    """Draws the pixmap over its own rect; ``ImageStage`` keeps that rect
    at the image's aspect ratio.

    When hidden by limited view the pixmap is painted at zero opacity so the
    widget keeps its box.
    """

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._pixmap = QPixmap()
        self._image_visible = True

    def pixmap(self) -> QPixmap:
        return self._pixmap

    def set_pixmap(self, pixmap: QPixmap) -> None:
        self._pixmap = pixmap
        self.update()

    @property
    def image_visible(self) -> bool:
        return self._image_visible

    def set_image_visible(self, visible: bool) -> None:
        self._image_visible = visible
        self.update()

    def paintEvent(self, _event):  # noqa: N802
        if self._pixmap.isNull():
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.SmoothPixmapTransform)
        painter.setOpacity(1.0 if self._image_visible else 0.0)
        painter.drawPixmap(self.rect(), self._pixmap)
        painter.end()


class ImageStage(QWidget):
    """Letterboxes the image view inside whatever space the layout gives."""

    def __init__(self, view: ImageView, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.view = view
        view.setParent(self)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

    def sizeHint(self) -> QSize:  # noqa: N802
        pixmap = self.view.pixmap()
        return QSize(0, 0) if pixmap.isNull() else pixmap.size()

    def relayout(self) -> None:
        self.view.setGeometry(fit_rect(self.view.pixmap().size(), self.size()))

    def resizeEvent(self, event):  # noqa: N802
        super().resizeEvent(event)
        self.relayout()


class ActionsMenu(QWidget):
    """Point counter plus the Undo / Clear / Done buttons."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.point_count_label = QLabel("Points: 0")
        self.undo_btn = QPushButton("Undo")
        self.clear_btn = QPushButton("Clear")
        self.done_btn = QPushButton("Done")

        row = QHBoxLayout(self)
        row.setContentsMargins(0, 0, 0, 0)
        row.addWidget(self.point_count_label)
        row.addStretch(1)
        row.addWidget(self.undo_btn)
        row.addWidget(self.clear_btn)
        row.addWidget(self.done_btn)

    def buttons(self) -> Tuple[QPushButton, ...]:
        return self.undo_btn, self.clear_btn, self.done_btn


# ---------------------------------------------------------------------------


class ImageAnnotator(QWidget):
    """Click-to-point annotator with ring markers and a heatmap overlay."""

    finished = pyqtSignal(list)  # List of point dicts
    mode_changed = pyqtSignal(str)

    def __init__(
        self,
        source: Optional[ImageSource] = None,
        config: Optional[AnnotatorConfig] = None,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.config = config or AnnotatorConfig()
        self._mode = AnnotatorMode.ANNOTATE
        self._shown = False
        self._torn_down = False

        # ------------------------------------------------------------------
        # Widgets – actions row above the image, overlays stacked on the image
        # ------------------------------------------------------------------
        self.actions_menu = ActionsMenu()
        self.image_view = ImageView()
        self.image_stage = ImageStage(self.image_view)
        self.heatmap_overlay = HeatmapOverlay(parent=self.image_view)
        self.heatmap_overlay.setVisible(self.config.show_heatmap)
        self.marker_overlay = MarkerOverlay(self.config.circle_radius_px, parent=self.image_view)

        layout = QVBoxLayout(self)
        layout.addWidget(self.actions_menu)
        layout.addWidget(self.image_stage, 1)

        # ------------------------------------------------------------------
        # State
        # ------------------------------------------------------------------
        self.history = PointHistory(self)
        self.history.changed.connect(self._on_points_changed)

        self.visibility = VisibilityController(
            self.config.limited_view, self.config.auto_hide_delay_ms, self
        )
        self.visibility.visibility_changed.connect(self.image_view.set_image_visible)

        self.size_tracker = SizeTracker(self)
        self.size_tracker.box_changed.connect(self._on_box_changed)
        self.size_tracker.attach(self.image_view)

        # Wire actions
        self.actions_menu.undo_btn.clicked.connect(self.undo)
        self.actions_menu.clear_btn.clicked.connect(self.clear)
        self.actions_menu.done_btn.clicked.connect(self.finish)

        # The shortcut consumes the key event, so nothing else sees the Ctrl+Z
        self.undo_shortcut = QShortcut(QKeySequence("Ctrl+Z"), self)
        self.undo_shortcut.setContext(Qt.WindowShortcut)
        self.undo_shortcut.activated.connect(self._on_undo_shortcut)

        self._update_action_buttons()
        self._update_cursor()

        if source is not None:
            self.set_source(source)

    # ------------------------------------------------------------------
    # Public state
    # ------------------------------------------------------------------

    @property
    def mode(self) -> AnnotatorMode:
        return self._mode

    @property
    def box(self) -> BoxSize:
        return self.size_tracker.box

    def points(self) -> Tuple[Point, ...]:
        return self.history.points()

    def image_rect(self) -> QRect:
        """The displayed image box in annotator coordinates."""
        return QRect(self.image_view.mapTo(self, QPoint(0, 0)), self.image_view.size())

    def set_source(self, source: ImageSource) -> None:
        """Show a new image; the limited-view countdown starts over."""
        pixmap = source if isinstance(source, QPixmap) else QPixmap(str(source))
        if pixmap.isNull():
            logger.warning("Image source %r produced an empty pixmap", source)
        self.image_view.set_pixmap(pixmap)
        self.image_stage.updateGeometry()
        self.image_stage.relayout()
        if self._shown:
            self._arm_visibility()

    # ------------------------------------------------------------------
    # Click pipeline
    # ------------------------------------------------------------------

    def mousePressEvent(self, event):  # noqa: N802
        if event.button() == Qt.LeftButton:
            self.handle_click(event.localPos())
            event.accept()
            return
        super().mousePressEvent(event)

    def handle_click(self, pos: Union[QPoint, QPointF]) -> Optional[Point]:
        """Turn a click at ``pos`` (annotator coordinates) into a point."""
        if self._mode is not AnnotatorMode.ANNOTATE:
            return None

        # Disabled buttons hand their clicks to us; those must not become points
        target = self.childAt(QPoint(int(pos.x()), int(pos.y())))
        if target is not None and self._is_action_control(target):
            return None

        rect = self.image_rect()
        if rect.width() <= 0 or rect.height() <= 0:
            return None

        point = to_normalized(pos.x(), pos.y(), rect)
        self.history.append(point)
        return point

    def _is_action_control(self, widget: QWidget) -> bool:
        return widget is self.actions_menu or self.actions_menu.isAncestorOf(widget)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def undo(self) -> None:
        if self._mode is AnnotatorMode.ANNOTATE:
            self.history.undo_last()

    def clear(self) -> None:
        if self._mode is AnnotatorMode.ANNOTATE:
            self.history.clear()

    def finish(self) -> List[dict]:
        """Freeze the annotation and hand the points to the host."""
        if self.history.count() == 0:
            raise AnnotatorError("Cannot finish an annotation without points")
        result = [p.to_dict() for p in self.history.points()]
        if self._mode is AnnotatorMode.DONE:
            return result

        self._mode = AnnotatorMode.DONE
        self.visibility.force_visible()
        self._update_action_buttons()
        self._update_cursor()
        logger.info("Annotation finished with %d point(s)", len(result))
        self.mode_changed.emit(self._mode.value)
        self.finished.emit(result)
        return result

    def _on_undo_shortcut(self) -> None:
        if self._mode is AnnotatorMode.ANNOTATE:
            self.undo()

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def _on_points_changed(self) -> None:
        points = self.history.points()
        self.marker_overlay.set_points(points)
        self.heatmap_overlay.set_points(points)
        self.actions_menu.point_count_label.setText(f"Points: {len(points)}")
        self._update_action_buttons()

    def _on_box_changed(self, box: BoxSize) -> None:
        self.marker_overlay.set_box(box)
        self.heatmap_overlay.set_box(box, radius=heatmap_radius(box))

    def _update_action_buttons(self) -> None:
        enable = self._mode is AnnotatorMode.ANNOTATE and self.history.count() > 0
        for btn in self.actions_menu.buttons():
            btn.setEnabled(enable)

    def _update_cursor(self) -> None:
        if self._mode is AnnotatorMode.ANNOTATE:
            self.image_view.setCursor(Qt.CrossCursor)
        else:
            self.image_view.setCursor(Qt.ArrowCursor)

    # ------------------------------------------------------------------
    # Lifetime
    # ------------------------------------------------------------------

    def _arm_visibility(self) -> None:
        if self._mode is AnnotatorMode.ANNOTATE and not self._torn_down:
            self.visibility.activate()

    def showEvent(self, event):  # noqa: N802
        super().showEvent(event)
        if not self._shown:
            self._shown = True
            self._arm_visibility()

    def teardown(self) -> None:
        """Release the size observer, the timer and the shortcut."""
        if self._torn_down:
            return
        self._torn_down = True
        self.size_tracker.detach()
        self.visibility.deactivate()
        self.undo_shortcut.setEnabled(False)
        logger.debug("Annotator torn down")

    def closeEvent(self, event):  # noqa: N802
        self.teardown()
        super().closeEvent(event)
