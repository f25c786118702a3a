"""Edge auto-scrolling while a drag is in progress."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from ..domain.models import ScrollMetrics
from .scheduling import Scheduler, TaskHandle

LOGGER = logging.getLogger(__name__)


class ScrollController(Protocol):
    """The host viewport, as seen by the engine."""

    def metrics(self) -> ScrollMetrics: ...

    def jump_to(self, offset: float) -> None: ...


def compute_scroll_delta(y: float, container_height: float, threshold: float, speed: float) -> float:
    """Pixels to scroll for a pointer at container-local *y*.

    Inside the top band the list scrolls up, inside the bottom band it
    scrolls down, proportionally to how deep the pointer is in the band.
    Outside both bands the result is ``0``.
    """
    if threshold <= 0 or speed <= 0:
        return 0.0
    if y < threshold:
        return -speed * (1 - y / threshold)
    if y > container_height - threshold:
        return speed * (1 - (container_height - y) / threshold)
    return 0.0


def plan_scroll(metrics: ScrollMetrics, delta: float) -> Optional[float]:
    """Return the new offset for *delta*, or ``None`` when already at the limit."""
    if delta < 0 and metrics.offset <= 0:
        return None
    if delta > 0 and metrics.offset >= metrics.max_extent:
        return None
    return max(0.0, min(metrics.max_extent, metrics.offset + delta))


class AutoScroller:
    """Owns the repeating auto-scroll task of one drag session.

    Every tick asks ``compute_delta`` how far to scroll.  ``None`` means the
    drag is over and the task cancels itself; ``0`` means the pointer left the
    edge bands, which also ends the loop until :meth:`ensure_running` is
    called again.  After a successful scroll ``on_scrolled`` receives the
    applied delta so the session can re-measure rows and re-resolve its
    target.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        scroll: ScrollController,
        *,
        interval_ms: int,
        compute_delta: Callable[[ScrollMetrics], Optional[float]],
        on_scrolled: Callable[[float], None],
    ) -> None:
        self._scheduler = scheduler
        self._scroll = scroll
        self._interval_ms = interval_ms
        self._compute_delta = compute_delta
        self._on_scrolled = on_scrolled
        self._task: Optional[TaskHandle] = None

    @property
    def running(self) -> bool:
        return self._task is not None and self._task.active

    def ensure_running(self) -> None:
        if self.running:
            return
        self._task = self._scheduler.call_repeating(self._interval_ms, self.tick)
        LOGGER.debug("Auto-scroll started (every %d ms)", self._interval_ms)

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
            LOGGER.debug("Auto-scroll stopped")

    def tick(self) -> None:
        metrics = self._scroll.metrics()
        delta = self._compute_delta(metrics)
        if not delta:
            self.stop()
            return
        new_offset = plan_scroll(metrics, delta)
        if new_offset is None:
            return
        self._scroll.jump_to(new_offset)
        self._on_scrolled(new_offset - metrics.offset)
