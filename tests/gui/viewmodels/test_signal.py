"""Tests for the pure Python Signal and ObservableProperty classes."""

import pytest

from multidrag.domain.models import DragPhase
from multidrag.gui.viewmodels.signal import ObservableProperty, Signal


class TestSignal:
    def test_handlers_run_in_connection_order(self):
        sig = Signal()
        calls = []
        sig.connect(lambda items: calls.append(("first", items)))
        sig.connect(lambda items: calls.append(("second", items)))

        sig.emit(["A", "C"])

        assert calls == [("first", ["A", "C"]), ("second", ["A", "C"])]

    def test_connect_returns_handler_and_ignores_duplicates(self):
        sig = Signal()
        handler = lambda: None
        assert sig.connect(handler) is handler
        sig.connect(handler)
        assert sig.handler_count == 1

    def test_disconnect(self):
        sig = Signal()
        received = []
        handler = sig.connect(received.append)
        sig.emit(1)
        sig.disconnect(handler)
        sig.emit(2)
        assert received == [1]

    def test_disconnect_unknown_handler_raises(self):
        with pytest.raises(ValueError):
            Signal().disconnect(lambda: None)

    def test_failing_handler_is_isolated(self):
        sig = Signal()
        received = []

        def broken(_items):
            raise RuntimeError("renderer exploded")

        sig.connect(broken)
        sig.connect(received.append)
        sig.emit(["B"])

        assert received == [["B"]]


class TestObservableProperty:
    def test_changed_carries_new_and_old(self):
        phase = ObservableProperty(DragPhase.IDLE)
        changes = []
        phase.changed.connect(lambda new, old: changes.append((new, old)))

        phase.value = DragPhase.DRAGGING
        phase.value = DragPhase.DRAGGING
        phase.value = DragPhase.IDLE

        assert changes == [
            (DragPhase.DRAGGING, DragPhase.IDLE),
            (DragPhase.IDLE, DragPhase.DRAGGING),
        ]

    def test_equal_list_is_not_a_change(self):
        items = ObservableProperty(["A", "B"])
        changes = []
        items.changed.connect(lambda new, old: changes.append(new))

        items.value = ["A", "B"]
        items.value = ["B", "A"]

        assert changes == [["B", "A"]]

    def test_default_is_none(self):
        assert ObservableProperty().value is None
