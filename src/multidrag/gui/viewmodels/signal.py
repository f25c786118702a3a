"""Pure Python signal system: no Qt dependency.

Provides ``Signal`` for observer-pattern callbacks and ``ObservableProperty``
for binding list state (items, selection mode, drag phase, loading flags)
to whatever renders it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

_logger = logging.getLogger(__name__)


class Signal:
    """Pure Python signal that does not depend on Qt.

    Handlers run synchronously in connection order on the emitting thread.
    Exceptions raised by individual handlers are caught and logged so that a
    failing renderer hook cannot leave the drag state machine half-updated.
    """

    def __init__(self) -> None:
        self._handlers: list[Callable] = []

    def connect(self, handler: Callable) -> Callable:
        if handler not in self._handlers:
            self._handlers.append(handler)
        return handler

    def disconnect(self, handler: Callable) -> None:
        self._handlers.remove(handler)

    def emit(self, *args: Any, **kwargs: Any) -> None:
        for handler in list(self._handlers):
            try:
                handler(*args, **kwargs)
            except Exception as exc:
                _logger.error("Signal handler %r failed: %s", handler, exc)

    @property
    def handler_count(self) -> int:
        return len(self._handlers)


class ObservableProperty:
    """Observable property that emits ``changed(new_value, old_value)``.

    Assigning an equal value is a no-op, so views can bind without guarding
    against redundant refreshes.
    """

    def __init__(self, initial_value: Any = None) -> None:
        self._value = initial_value
        self.changed = Signal()

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        if self._value != new_value:
            old_value = self._value
            self._value = new_value
            self.changed.emit(new_value, old_value)
