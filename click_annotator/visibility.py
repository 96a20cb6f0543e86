"""Optional "limited view": hide the image a fixed delay after it is shown."""

from __future__ import annotations

import enum
import logging
from typing import Optional

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

logger = logging.getLogger(__name__)


class Visibility(enum.Enum):
    VISIBLE = "visible"
    HIDDEN = "hidden"


class VisibilityController(QObject):
    """Single-shot auto-hide timer.

    The timer only exists while limited view is enabled and active; it is
    stopped on ``deactivate``, on ``force_visible`` and whenever the
    controller is re-armed.
    """

    visibility_changed = pyqtSignal(bool)

    def __init__(self, enabled: bool = False, delay_ms: int = 1000, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._enabled = enabled
        self._delay_ms = delay_ms
        self._state = Visibility.VISIBLE
        self._timer: Optional[QTimer] = None

    # ------------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def state(self) -> Visibility:
        return self._state

    @property
    def is_visible(self) -> bool:
        return self._state is Visibility.VISIBLE

    @property
    def timer_active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    # ------------------------------------------------------------------

    def activate(self) -> None:
        """(Re)start the countdown, showing the image again first."""
        self._cancel_timer()
        self._set_state(Visibility.VISIBLE)
        if not self._enabled:
            return
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)
        self._timer.start(self._delay_ms)
        logger.debug("Limited view armed for %d ms", self._delay_ms)

    def deactivate(self) -> None:
        self._cancel_timer()

    def force_visible(self) -> None:
        self._cancel_timer()
        self._set_state(Visibility.VISIBLE)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        if enabled:
            self.activate()
        else:
            self.force_visible()

    def set_delay(self, delay_ms: int) -> None:
        self._delay_ms = delay_ms

    # ------------------------------------------------------------------

    def _on_timeout(self) -> None:
        self._cancel_timer()
        self._set_state(Visibility.HIDDEN)

    def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is None:
            return
        timer.stop()
        timer.timeout.disconnect(self._on_timeout)
        timer.deleteLater()

    def _set_state(self, state: Visibility) -> None:
        if state is self._state:
            return
        self._state = state
        logger.info("Image %s", state.value)
        self.visibility_changed.emit(state is Visibility.VISIBLE)
