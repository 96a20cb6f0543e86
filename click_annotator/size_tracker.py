"""Publishes the rendered size of the image widget whenever it changes."""

from __future__ import annotations

import logging
from typing import Optional

from PyQt5.QtCore import QEvent, QObject, pyqtSignal
from PyQt5.QtWidgets import QWidget

from .errors import SizeTrackerError
from .geometry import BoxSize

logger = logging.getLogger(__name__)


class SizeTracker(QObject):
    """Event filter that republishes the watched widget's box size.

    Observation starts with ``attach`` and ends with ``detach``; at most one
    widget is watched at a time.
    """

    box_changed = pyqtSignal(object)  # BoxSize

    _WATCHED_EVENTS = (QEvent.Resize, QEvent.Show)

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._widget: Optional[QWidget] = None
        self._box = BoxSize()

    @property
    def box(self) -> BoxSize:
        return self._box

    @property
    def widget(self) -> Optional[QWidget]:
        return self._widget

    def attach(self, widget: QWidget) -> None:
        if widget is None:
            raise SizeTrackerError("No image widget to observe")
        if widget is self._widget:
            return
        self.detach()

        widget.installEventFilter(self)
        widget.destroyed.connect(self._on_widget_destroyed)
        self._widget = widget
        logger.debug("Size tracker attached to %s", type(widget).__name__)
        self._publish(widget.width(), widget.height())

    def detach(self) -> None:
        widget, self._widget = self._widget, None
        if widget is None:
            return
        widget.removeEventFilter(self)
        try:
            widget.destroyed.disconnect(self._on_widget_destroyed)
        except TypeError:
            pass  # Already disconnected by Qt
        logger.debug("Size tracker detached")

    # Qt event filter ------------------------------------------------------

    def eventFilter(self, obj, event):  # noqa: N802
        if obj is self._widget and event.type() in self._WATCHED_EVENTS:
            self._publish(obj.width(), obj.height())
        return super().eventFilter(obj, event)

    # ------------------------------------------------------------------

    def _publish(self, width: int, height: int) -> None:
        box = BoxSize(max(0, int(round(width))), max(0, int(round(height))))
        if box == self._box:
            return
        self._box = box
        logger.debug("Image box is now %dx%d", box.width, box.height)
        self.box_changed.emit(box)

    def _on_widget_destroyed(self, _obj=None) -> None:
        self._widget = None
