"""Cancellable repeating tasks.

The drag session owns exactly one repeating task (the auto-scroll loop) and
must be able to cancel it on every exit transition.  Hosts pick the
scheduler that matches their event loop:

* :class:`AsyncioScheduler` chains ``loop.call_later`` calls.
* :class:`FrameScheduler` is driven by the host calling :meth:`advance` once
  per frame (terminal UIs, game loops, tests).
* ``multidrag.gui.services.qt_scheduler.QtTimerScheduler`` wraps ``QTimer``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Protocol

LOGGER = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class TaskHandle(Protocol):
    """Handle to a scheduled repeating task."""

    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Minimal protocol the drag session needs from the host event loop."""

    def call_repeating(self, interval_ms: int, callback: TickCallback) -> TaskHandle: ...


class AsyncioTask:
    """Repeating task re-armed with ``call_later`` after every tick."""

    def __init__(self, loop: asyncio.AbstractEventLoop, interval_ms: int, callback: TickCallback) -> None:
        self._loop = loop
        self._interval = max(1, int(interval_ms)) / 1000.0
        self._callback = callback
        self._timer: Optional[asyncio.TimerHandle] = None
        self._active = True
        self._arm()

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _arm(self) -> None:
        self._timer = self._loop.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        self._timer = None
        if not self._active:
            return
        try:
            self._callback()
        except Exception:
            LOGGER.exception("Repeating task callback failed; cancelling task")
            self.cancel()
            return
        # The callback may have cancelled us.
        if self._active:
            self._arm()


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_repeating(self, interval_ms: int, callback: TickCallback) -> AsyncioTask:
        loop = self._loop or asyncio.get_running_loop()
        return AsyncioTask(loop, interval_ms, callback)


class FrameTask:
    def __init__(self, scheduler: FrameScheduler, interval_ms: int, callback: TickCallback) -> None:
        self._scheduler = scheduler
        self.interval_ms = max(1, int(interval_ms))
        self.callback = callback
        self.due_ms = scheduler.now_ms + self.interval_ms
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False
        self._scheduler._discard(self)


class FrameScheduler:
    """Scheduler advanced explicitly by the host, one frame at a time."""

    def __init__(self) -> None:
        self.now_ms = 0
        self._tasks: List[FrameTask] = []

    @property
    def pending(self) -> int:
        """Number of tasks still scheduled."""
        return len(self._tasks)

    def call_repeating(self, interval_ms: int, callback: TickCallback) -> FrameTask:
        task = FrameTask(self, interval_ms, callback)
        self._tasks.append(task)
        return task

    def advance(self, elapsed_ms: int) -> int:
        """Move the clock forward and fire every due tick; returns ticks fired."""
        target = self.now_ms + max(0, int(elapsed_ms))
        fired = 0
        while True:
            due = [task for task in self._tasks if task.due_ms <= target]
            if not due:
                break
            task = min(due, key=lambda t: t.due_ms)
            self.now_ms = task.due_ms
            task.due_ms += task.interval_ms
            task.callback()
            fired += 1
        self.now_ms = target
        return fired

    def _discard(self, task: FrameTask) -> None:
        if task in self._tasks:
            self._tasks.remove(task)
