"""Tests for ErrorHandler and the error hierarchy."""

import logging
from unittest.mock import Mock

import pytest

from multidrag.errors import (
    ApplicationError,
    DomainError,
    InvalidTransitionError,
    MultiDragError,
    OptionsValidationError,
    PageRequestError,
    SettingsError,
)
from multidrag.errors.handler import ErrorHandler, ErrorOccurredEvent, ErrorSeverity
from multidrag.events.bus import EventBus


class TestErrorHandler:
    def test_logs_publishes_and_calls_ui(self, caplog):
        bus = EventBus()
        published = []
        bus.subscribe(ErrorOccurredEvent, published.append)
        ui = Mock()
        handler = ErrorHandler(logging.getLogger("test.errors"), bus)
        handler.register_ui_callback(ui)
        error = PageRequestError("page 3 failed")

        with caplog.at_level(logging.ERROR, logger="test.errors"):
            handler.handle(error, ErrorSeverity.ERROR, {"page": 3})

        assert "page 3 failed" in caplog.text
        assert published[0].error is error
        assert published[0].context == {"page": 3}
        ui.assert_called_once_with(error, ErrorSeverity.ERROR)

    def test_warnings_skip_ui_callback(self, caplog):
        ui = Mock()
        handler = ErrorHandler(logging.getLogger("test.errors"))
        handler.register_ui_callback(ui)

        with caplog.at_level(logging.WARNING, logger="test.errors"):
            handler.handle(PageRequestError("slow"), ErrorSeverity.WARNING)

        ui.assert_not_called()
        assert caplog.records[0].levelno == logging.WARNING


class TestHierarchy:
    @pytest.mark.parametrize(
        "error, base",
        [
            (InvalidTransitionError("commit", "idle", "reordering"), DomainError),
            (PageRequestError("x"), ApplicationError),
            (OptionsValidationError("x"), SettingsError),
        ],
    )
    def test_layers(self, error, base):
        assert isinstance(error, base)
        assert isinstance(error, MultiDragError)

    def test_invalid_transition_message(self):
        error = InvalidTransitionError("commit", "idle", "reordering")
        assert str(error) == "cannot commit() while the drag session is idle; expected reordering"
        assert error.phase == "idle"
