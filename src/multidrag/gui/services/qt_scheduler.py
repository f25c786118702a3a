"""QTimer-backed scheduler for Qt hosts."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer

_LOGGER = logging.getLogger(__name__)


class QtTimerTask:
    """Repeating ``QTimer`` satisfying the engine's task handle protocol."""

    def __init__(self, interval_ms: int, callback: Callable[[], None], parent: Optional[QObject] = None) -> None:
        self._callback = callback
        self._timer = QTimer(parent)
        self._timer.setInterval(max(1, int(interval_ms)))
        self._timer.timeout.connect(self._fire)
        self._timer.start()

    @property
    def active(self) -> bool:
        return self._timer.isActive()

    def cancel(self) -> None:
        if self._timer.isActive():
            self._timer.stop()

    def _fire(self) -> None:
        try:
            self._callback()
        except Exception:
            _LOGGER.exception("Repeating task callback failed; stopping timer")
            self.cancel()


class QtTimerScheduler:
    """Scheduler that runs ticks on the Qt event loop of the calling thread."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self._parent = parent

    def call_repeating(self, interval_ms: int, callback: Callable[[], None]) -> QtTimerTask:
        return QtTimerTask(interval_ms, callback, self._parent)
