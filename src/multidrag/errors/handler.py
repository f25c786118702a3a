import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from multidrag.events.bus import Event, EventBus


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(kw_only=True)
class ErrorOccurredEvent(Event):
    error: Exception
    severity: ErrorSeverity
    context: dict = field(default_factory=dict)


class ErrorHandler:
    """Single reporting point for failures caught at a component boundary.

    Errors are logged at the level matching their severity, published as an
    :class:`ErrorOccurredEvent` when a bus is attached, and forwarded to the
    host's ``on_error`` hook for ``ERROR`` and ``CRITICAL`` severities.
    """

    def __init__(self, logger: logging.Logger, event_bus: Optional[EventBus] = None):
        self._logger = logger
        self._events = event_bus
        self._ui_callback: Optional[Callable[[Exception, ErrorSeverity], None]] = None

    def register_ui_callback(self, callback: Optional[Callable[[Exception, ErrorSeverity], None]]):
        self._ui_callback = callback

    def handle(self, error: Exception, severity: ErrorSeverity = ErrorSeverity.ERROR, context: dict = None):
        log_method = getattr(self._logger, severity.value, self._logger.error)
        log_method("%s: %s", error.__class__.__name__, error, extra={"context": context or {}})

        if self._events is not None:
            self._events.publish(ErrorOccurredEvent(
                error=error,
                severity=severity,
                context=context or {},
            ))

        if self._ui_callback and severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL):
            self._ui_callback(error, severity)
