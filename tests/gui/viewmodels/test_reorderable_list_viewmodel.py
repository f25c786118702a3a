"""End-to-end tests for ReorderableListViewModel without Qt."""

import asyncio
from dataclasses import dataclass
from unittest.mock import Mock

import pytest

from fakes import FakeScroll
from multidrag.core.scheduling import FrameScheduler
from multidrag.domain.models import DragPhase, Point, PointerEvent, PointerKind, Rect, ScrollMetrics
from multidrag.errors import PageRequestError
from multidrag.errors.handler import ErrorSeverity
from multidrag.events.bus import EventBus
from multidrag.events.list_events import (
    DragPhaseChangedEvent,
    ListRefreshedEvent,
    PageLoadedEvent,
    ReorderCommittedEvent,
    SelectionChangedEvent,
)
from multidrag.gui.viewmodels.pointer_router import PointerRouter
from multidrag.gui.viewmodels.reorderable_list_viewmodel import ReorderableListViewModel
from multidrag.settings.options import ListOptions


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Card:
    key: str
    title: str = ""


def _record_rows(vm, count, height=80.0):
    for index in range(count):
        vm.geometry.record_rect(index, Rect(0.0, index * height, 300.0, height))


def _make_vm(items="ABCDE", **kwargs):
    kwargs.setdefault("container_height", 400.0)
    vm = ReorderableListViewModel(list(items), **kwargs)
    _record_rows(vm, len(vm.snapshot))
    return vm


class _Host:
    """Owns the real list, like a screen holding the data would."""

    def __init__(self, total):
        self.backend = [f"row-{n}" for n in range(total)]
        self.vm = None
        self.requests = []

    async def fetch(self, page, page_size):
        self.requests.append((page, page_size))
        start = (page - 1) * page_size
        chunk = self.backend[start : start + page_size]
        current = [] if page == 1 else list(self.vm.snapshot.items)
        self.vm.set_items(current + chunk)


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

class TestSelection:
    def test_toggle_reports_selection_in_list_order(self):
        on_selection_changed = Mock()
        vm = _make_vm(on_selection_changed=on_selection_changed)

        vm.toggle(3)
        vm.toggle(0)

        assert on_selection_changed.call_args_list[-1].args == (["A", "D"],)
        assert vm.selection_mode.value is True
        assert vm.selection_count_text == "2 items selected"

    def test_long_press_enters_selection_mode_without_deselecting(self):
        vm = _make_vm()
        vm.long_press(2)
        vm.long_press(2)
        assert vm.selected_items == ["C"]
        assert vm.selection_mode.value is True

    def test_done_returns_selection_and_leaves_mode(self):
        on_done = Mock()
        done_signal = Mock()
        vm = _make_vm(on_done=on_done)
        vm.selection_done.connect(done_signal)
        vm.toggle(4)
        vm.toggle(1)

        assert vm.done() == ["B", "E"]

        on_done.assert_called_once_with(["B", "E"])
        done_signal.assert_called_once_with(["B", "E"])
        assert vm.selected_items == []
        assert vm.selection_mode.value is False

    def test_done_outside_selection_mode_does_not_call_back(self):
        on_done = Mock()
        vm = _make_vm(on_done=on_done)
        vm.done()
        on_done.assert_not_called()

    def test_done_cancels_active_drag(self):
        on_done = Mock()
        on_reorder = Mock()
        vm = _make_vm(on_done=on_done, on_reorder=on_reorder)
        vm.start_drag(1, Point(150, 120))
        vm.update_drag(Point(150, 10))

        vm.done()

        assert vm.drag_phase.value is DragPhase.IDLE
        on_done.assert_called_once_with(["B"])
        on_reorder.assert_not_called()

    def test_initial_selection_with_identity(self):
        cards = [Card("a"), Card("b"), Card("c")]
        on_selection_changed = Mock()
        vm = ReorderableListViewModel(
            cards,
            identity=lambda card: card.key,
            initial_selection=[Card("c", "rebuilt copy")],
            on_selection_changed=on_selection_changed,
        )
        assert vm.selection_mode.value is True
        assert vm.selected_items == [Card("c")]
        on_selection_changed.assert_not_called()

    def test_set_items_drops_vanished_selection(self):
        on_selection_changed = Mock()
        vm = _make_vm(on_selection_changed=on_selection_changed)
        vm.toggle(1)
        vm.toggle(2)

        vm.set_items(["A", "C", "F"])

        assert vm.selected_items == ["C"]
        on_selection_changed.assert_called_with(["C"])
        assert vm.items.value == ["A", "C", "F"]

    def test_build_items_passes_row_state(self):
        vm = _make_vm("ABC")
        vm.toggle(2)
        vm.start_drag(0, Point(150, 40))

        rows = vm.build_items(lambda item, index, selected, dragging: (item, index, selected, dragging))

        assert rows == [
            ("A", 0, True, True),
            ("B", 1, False, False),
            ("C", 2, True, False),
        ]


# ---------------------------------------------------------------------------
# Drag and reorder
# ---------------------------------------------------------------------------

class TestDrag:
    def test_drag_on_unselected_item_selects_it_before_moving(self):
        on_selection_changed = Mock()
        vm = _make_vm(on_selection_changed=on_selection_changed)

        assert vm.start_drag(4, Point(150, 350)) is True

        on_selection_changed.assert_called_once_with(["E"])
        assert vm.selection_mode.value is True
        assert vm.drag_phase.value is DragPhase.DRAGGING

    def test_block_reorder_through_pointer_router(self):
        router = PointerRouter()
        on_reorder = Mock()
        reordered = Mock()
        bus = EventBus()
        committed = []
        bus.subscribe(ReorderCommittedEvent, committed.append)
        vm = _make_vm(on_reorder=on_reorder, pointer_router=router, event_bus=bus)
        vm.reordered.connect(reordered)
        vm.toggle(3)

        vm.start_drag(1, Point(150, 120))
        router.move(150, 10)
        router.up(150, 10)

        assert vm.drag_phase.value is DragPhase.REORDERING
        on_reorder.assert_not_called()
        assert vm.item_offset(1, 1.0) == pytest.approx(-80.0)

        new_items = vm.commit_reorder()

        assert new_items == ["B", "D", "A", "C", "E"]
        on_reorder.assert_called_once_with(["B", "D", "A", "C", "E"])
        reordered.assert_called_once_with(["B", "D", "A", "C", "E"])
        assert committed[0].moved == ["B", "D"]
        assert committed[0].target_index == 0
        assert vm.drag_phase.value is DragPhase.IDLE
        # The host owns the list until it hands the new order back.
        assert vm.items.value == ["A", "B", "C", "D", "E"]
        vm.set_items(new_items)
        assert vm.selected_items == ["B", "D"]

    def test_commit_immediately_without_animation(self):
        on_reorder = Mock()
        vm = _make_vm(on_reorder=on_reorder, options=ListOptions(animate_reorder=False))
        vm.toggle(2)

        vm.start_drag(2, Point(150, 200))
        vm.update_drag(Point(150, 390))
        assert vm.end_drag() is True

        on_reorder.assert_called_once_with(["A", "B", "D", "E", "C"])
        assert vm.drag_phase.value is DragPhase.IDLE

    def test_release_without_target_keeps_order(self):
        on_reorder = Mock()
        vm = _make_vm(on_reorder=on_reorder)
        vm.start_drag(1, Point(150, 120))
        vm.end_drag()
        assert vm.commit_reorder() is None
        on_reorder.assert_not_called()

    def test_pointer_cancel_discards_drag(self):
        router = PointerRouter()
        on_reorder = Mock()
        vm = _make_vm(on_reorder=on_reorder, pointer_router=router)
        vm.start_drag(1, Point(150, 120))
        router.move(150, 10)
        router.cancel()

        assert vm.drag_phase.value is DragPhase.IDLE
        assert vm.commit_reorder() is None
        on_reorder.assert_not_called()

    def test_stray_pointer_events_are_ignored(self):
        vm = _make_vm()
        vm.handle_pointer_event(PointerEvent(PointerKind.UP))
        vm.handle_pointer_event(PointerEvent(PointerKind.MOVE, Point(0, 0)))
        vm.handle_pointer_event(PointerEvent(PointerKind.CANCEL))
        assert vm.update_drag(Point(0, 0)) is None
        assert vm.end_drag() is False
        assert vm.cancel_drag() is False
        assert vm.drag_phase.value is DragPhase.IDLE

    def test_second_drag_start_is_ignored(self):
        vm = _make_vm()
        assert vm.start_drag(0, Point(150, 40)) is True
        assert vm.start_drag(1, Point(150, 120)) is False
        assert vm.start_drag(99, Point(0, 0)) is False
        assert vm.session.dragged_index == 0

    def test_phase_events_published(self):
        bus = EventBus()
        phases = []
        bus.subscribe(DragPhaseChangedEvent, lambda event: phases.append((event.previous, event.phase)))
        vm = _make_vm(event_bus=bus)

        vm.start_drag(0, Point(150, 40))
        vm.end_drag()
        vm.commit_reorder()

        assert phases == [("idle", "dragging"), ("dragging", "reordering"), ("reordering", "idle")]

    def test_selection_events_published(self):
        bus = EventBus()
        events = []
        bus.subscribe(SelectionChangedEvent, events.append)
        vm = _make_vm(event_bus=bus)
        vm.toggle(0)
        assert events[0].selected == ["A"]
        assert events[0].selection_mode is True

    def test_stack_metrics(self):
        vm = _make_vm()
        assert vm.stack_metrics() == (0.0, 0.0)
        vm.toggle(0)
        vm.toggle(1)
        assert vm.stack_metrics() == (8.0, 2.0)

    def test_auto_scroll_stops_on_cancel(self):
        scheduler = FrameScheduler()
        scroll = FakeScroll(offset=100.0)
        vm = _make_vm(scheduler=scheduler, scroll=scroll)
        vm.start_drag(4, Point(150, 390))
        scheduler.advance(16)
        assert scroll.offset > 100.0

        vm.cancel_drag()

        assert scheduler.pending == 0

    def test_on_scroll_re_resolves_target_during_drag(self):
        scroll_offset = {"value": 0.0}

        def provider():
            return {
                index: Rect(0, index * 80 - scroll_offset["value"], 300, 80)
                for index in range(10)
            }

        vm = ReorderableListViewModel(list("ABCDEFGHIJ"), geometry_provider=provider, container_height=400.0)
        vm.start_drag(0, Point(150, 40))
        assert vm.update_drag(Point(150, 200)) == 2

        scroll_offset["value"] = 240.0
        asyncio.run(vm.on_scroll(ScrollMetrics(240, 400, 400)))

        assert vm.session.target_index == 5

    def test_dispose_unsubscribes_from_router(self):
        router = PointerRouter()
        on_reorder = Mock()
        vm = _make_vm(on_reorder=on_reorder, pointer_router=router, options=ListOptions(animate_reorder=False))
        assert router.route_count == 1
        vm.start_drag(1, Point(150, 120))

        vm.dispose()
        router.up()

        assert router.route_count == 0
        assert vm.disposed
        assert vm.drag_phase.value is DragPhase.IDLE
        on_reorder.assert_not_called()


# ---------------------------------------------------------------------------
# Pagination and refresh
# ---------------------------------------------------------------------------

class TestPagination:
    def test_pages_until_short_page(self):
        host = _Host(total=45)
        bus = EventBus()
        pages = []
        bus.subscribe(PageLoadedEvent, lambda event: pages.append((event.page, event.added, event.has_more)))
        vm = ReorderableListViewModel(on_page_request=host.fetch, event_bus=bus)
        host.vm = vm

        asyncio.run(vm.load_initial())
        assert len(vm.items.value) == 20
        assert vm.has_more.value is True

        near_end = ScrollMetrics(990, 1000, 400)
        asyncio.run(vm.on_scroll(near_end))
        asyncio.run(vm.on_scroll(near_end))
        assert asyncio.run(vm.on_scroll(near_end)) is False

        assert host.requests == [(1, 20), (2, 20), (3, 20)]
        assert len(vm.items.value) == 45
        assert vm.has_more.value is False
        assert vm.is_loading.value is False
        assert pages == [(1, 20, True), (2, 20, True), (3, 5, False)]

    def test_failed_page_is_reported(self):
        on_error = Mock()
        messages = []

        async def broken(page, page_size):
            raise TimeoutError("backend timed out")

        vm = ReorderableListViewModel(on_page_request=broken, on_error=on_error)
        vm.error_occurred.connect(messages.append)

        assert asyncio.run(vm.request_next_page()) is False

        error, severity = on_error.call_args.args
        assert isinstance(error, PageRequestError)
        assert severity is ErrorSeverity.ERROR
        assert "backend timed out" in messages[0]
        assert vm.has_more.value is True
        assert vm.is_loading.value is False

    def test_refresh_mid_drag_cancels_and_resets(self):
        host = _Host(total=5)
        on_reorder = Mock()
        scheduler = FrameScheduler()
        scroll = FakeScroll(offset=300.0)
        bus = EventBus()
        refreshed = []
        bus.subscribe(ListRefreshedEvent, refreshed.append)
        vm = ReorderableListViewModel(
            on_page_request=host.fetch,
            on_reorder=on_reorder,
            scheduler=scheduler,
            scroll=scroll,
            event_bus=bus,
            container_height=400.0,
        )
        host.vm = vm
        asyncio.run(vm.load_initial())
        assert vm.has_more.value is False
        _record_rows(vm, 5)

        vm.start_drag(1, Point(150, 120))
        vm.update_drag(Point(150, 390))
        assert scheduler.pending == 1

        asyncio.run(vm.refresh_items(reset_pagination=True))

        assert vm.drag_phase.value is DragPhase.IDLE
        on_reorder.assert_not_called()
        assert vm.has_more.value is True
        assert scroll.offset == 0.0
        assert scheduler.pending == 0
        assert host.requests[-1] == (1, 20)
        assert refreshed[0].reset_pagination is True
        assert refreshed[0].item_count == 5

    def test_refresh_uses_on_refresh_callback(self):
        calls = []

        async def on_refresh():
            calls.append("refresh")
            vm.set_items(["X", "Y"])

        vm = ReorderableListViewModel(["A"], on_refresh=on_refresh)
        asyncio.run(vm.refresh_items())

        assert calls == ["refresh"]
        assert vm.items.value == ["X", "Y"]
