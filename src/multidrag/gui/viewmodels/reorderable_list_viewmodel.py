"""ReorderableListViewModel (MVVM): no Qt dependency.

Wires the geometry index, selection set, drag session and pagination
controller into the single object a renderer talks to.  The ViewModel never
mutates the host's list: reorders are proposed through ``on_reorder`` and the
host hands the applied list back with :meth:`set_items`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from multidrag.core.autoscroll import ScrollController
from multidrag.core.drag_session import DragSession, GeometryProvider
from multidrag.core.geometry import GeometryIndex
from multidrag.core.pagination import PageRequest, PaginationController, RefreshRequest
from multidrag.core.reorder import stack_offset, stack_rotation
from multidrag.core.scheduling import Scheduler
from multidrag.core.selection import SelectionSet
from multidrag.domain.models import (
    DragPhase,
    ItemState,
    PaginationState,
    Point,
    PointerEvent,
    PointerKind,
    ScrollMetrics,
)
from multidrag.domain.snapshot import IdentityFn, ListSnapshot, default_identity
from multidrag.errors.handler import ErrorHandler, ErrorSeverity
from multidrag.events.bus import EventBus
from multidrag.events.list_events import (
    DragPhaseChangedEvent,
    ListRefreshedEvent,
    PageLoadedEvent,
    ReorderCommittedEvent,
    SelectionChangedEvent,
)
from multidrag.gui.viewmodels.base import BaseViewModel
from multidrag.gui.viewmodels.pointer_router import PointerRouter
from multidrag.gui.viewmodels.signal import ObservableProperty, Signal
from multidrag.settings.options import ListOptions

ItemsCallback = Callable[[List[Any]], None]
ErrorCallback = Callable[[Exception, ErrorSeverity], None]


class ReorderableListViewModel(BaseViewModel):
    """Multi-select drag-to-reorder list: pure Python, no Qt dependency.

    Positions passed to the drag methods and recorded in :attr:`geometry` are
    container-local: ``y == 0`` is the top edge of the visible list.

    When ``options.animate_reorder`` is true the renderer must call
    :meth:`commit_reorder` once its settle animation finishes; otherwise the
    reorder is committed as soon as the drag ends.
    """

    def __init__(
        self,
        items: Iterable[Any] = (),
        *,
        on_reorder: Optional[ItemsCallback] = None,
        on_selection_changed: Optional[ItemsCallback] = None,
        on_done: Optional[ItemsCallback] = None,
        on_page_request: Optional[PageRequest] = None,
        on_refresh: Optional[RefreshRequest] = None,
        on_error: Optional[ErrorCallback] = None,
        identity: IdentityFn = default_identity,
        options: Optional[ListOptions] = None,
        scheduler: Optional[Scheduler] = None,
        geometry_provider: Optional[GeometryProvider] = None,
        scroll: Optional[ScrollController] = None,
        pointer_router: Optional[PointerRouter] = None,
        event_bus: Optional[EventBus] = None,
        initial_selection: Optional[Iterable[Any]] = None,
        container_height: Optional[float] = None,
    ) -> None:
        super().__init__()
        self._logger = logging.getLogger(__name__)
        self._options = options or ListOptions()
        self._snapshot = ListSnapshot(items, identity)
        self._events = event_bus
        self._scroll = scroll
        self._on_reorder = on_reorder
        self._on_selection_changed = on_selection_changed
        self._on_done = on_done
        self._on_error = on_error

        # Observable properties
        self.items = ObservableProperty(list(self._snapshot.items))
        self.selection_mode = ObservableProperty(False)
        self.drag_phase = ObservableProperty(DragPhase.IDLE)
        self.is_loading = ObservableProperty(False)
        self.has_more = ObservableProperty(True)

        # Signals
        self.reordered = Signal()
        self.selection_changed = Signal()
        self.selection_done = Signal()
        self.error_occurred = Signal()

        self._error_handler = ErrorHandler(self._logger, event_bus)
        self._error_handler.register_ui_callback(self._report_error)

        self.geometry = GeometryIndex(container_height)
        self.selection = SelectionSet(
            self._snapshot,
            on_change=self._handle_selection_changed,
            drag_active=lambda: self.session.is_active,
        )
        self.session = DragSession(
            self.selection,
            geometry=self.geometry,
            geometry_provider=geometry_provider,
            scheduler=scheduler,
            scroll=scroll,
            options=self._options,
            on_phase_changed=self._handle_phase_changed,
        )
        self.pagination = PaginationController(
            lambda: len(self._snapshot),
            on_page_request=on_page_request,
            on_refresh=on_refresh,
            options=self._options,
            error_handler=self._error_handler,
            on_state_changed=self._handle_pagination_state,
            on_page_loaded=self._handle_page_loaded,
        )

        if initial_selection:
            self.selection.replace(
                (identity(item) for item in initial_selection),
                notify=False,
            )
            self.selection_mode.value = self.selection.is_selection_mode

        if pointer_router is not None:
            self.track(pointer_router.add_route(self.handle_pointer_event))

    # ------------------------------------------------------------------
    # List data
    # ------------------------------------------------------------------
    @property
    def options(self) -> ListOptions:
        return self._options

    @property
    def snapshot(self) -> ListSnapshot:
        return self._snapshot

    def set_items(self, items: Sequence[Any]) -> None:
        """Adopt a new list from the host (after a reorder, page or refresh)."""
        self._snapshot = self._snapshot.with_items(items)
        self.selection.retain(self._snapshot)
        self.pagination.observe_length(len(self._snapshot))
        self.items.value = list(self._snapshot.items)

    def item_state(self, index: int) -> ItemState:
        item_id = self._snapshot.id_at(index)
        return ItemState(
            item=self._snapshot[index],
            index=index,
            is_selected=item_id in self.selection,
            is_dragging=self.session.is_dragging_item(index),
        )

    def build_items(self, item_builder: Callable[[Any, int, bool, bool], Any]) -> List[Any]:
        """Call ``item_builder(item, index, is_selected, is_dragging)`` for every row."""
        built = []
        for index in range(len(self._snapshot)):
            state = self.item_state(index)
            built.append(item_builder(state.item, state.index, state.is_selected, state.is_dragging))
        return built

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    @property
    def selected_items(self) -> List[Any]:
        return self.selection.ordered_items()

    @property
    def selection_count_text(self) -> str:
        return self.selection.count_text(self._options.selection_count_text)

    def toggle(self, index: int) -> bool:
        return self.selection.toggle(self._snapshot.id_at(index))

    def long_press(self, index: int) -> bool:
        """Enter selection mode on the row at *index* (never deselects)."""
        return self.selection.enter_selection_mode(self._snapshot.id_at(index))

    def done(self) -> List[Any]:
        """Leave selection mode, cancelling any drag; returns the final selection."""
        was_selecting = self.selection.is_selection_mode
        selected = self.selection.ordered_items()
        self.session.cancel()
        if len(self.selection):
            self.selection.clear_all()
        self.selection_mode.value = self.selection.is_selection_mode
        if was_selecting:
            if self._on_done is not None:
                self._on_done(list(selected))
            self.selection_done.emit(list(selected))
        return selected

    # ------------------------------------------------------------------
    # Drag gesture
    # ------------------------------------------------------------------
    def start_drag(self, index: int, position: Point) -> bool:
        """Begin a drag on the row at *index*; ignored while a drag is active."""
        if self.session.is_active:
            self._logger.debug("Ignoring drag start on %d: session is %s", index, self.session.phase.value)
            return False
        if not 0 <= index < len(self._snapshot):
            self._logger.debug("Ignoring drag start on out-of-range index %d", index)
            return False
        self.session.start(index, position)
        return True

    def update_drag(self, position: Point) -> Optional[int]:
        if self.session.phase is not DragPhase.DRAGGING:
            return None
        return self.session.update(position)

    def end_drag(self) -> bool:
        """Pointer released; commits immediately when animations are disabled."""
        if self.session.phase is not DragPhase.DRAGGING:
            return False
        self.session.release()
        if not self._options.animate_reorder:
            self.commit_reorder()
        return True

    def cancel_drag(self) -> bool:
        return self.session.cancel()

    def commit_reorder(self) -> Optional[List[Any]]:
        """Apply the pending reorder; call when the settle animation completes."""
        if self.session.phase is not DragPhase.REORDERING:
            return None
        original = self.session.original_index_of
        target = self.session.target_index
        new_items = self.session.commit()
        if new_items is None:
            self._logger.debug("Drag released without a drop target; order unchanged")
            return None
        moved = [item for item in new_items if self._snapshot.identity(item) in original]
        self._logger.debug("Reorder committed: %d items moved to %s", len(moved), target)
        if self._on_reorder is not None:
            self._on_reorder(list(new_items))
        self.reordered.emit(list(new_items))
        self._publish(ReorderCommittedEvent(items=list(new_items), moved=moved, target_index=target))
        return new_items

    def item_offset(self, index: int, progress: float) -> float:
        return self.session.item_offset(index, progress)

    def stack_metrics(self) -> Tuple[float, float]:
        """(offset, rotation) per card of the dragged-stack preview."""
        count = len(self.selection)
        return (
            stack_offset(count, self._options.max_stack_offset),
            stack_rotation(count, self._options.max_stack_rotation),
        )

    def handle_pointer_event(self, event: PointerEvent) -> None:
        """Route a window-wide pointer event into the drag session."""
        phase = self.session.phase
        if event.kind is PointerKind.MOVE:
            if phase is DragPhase.DRAGGING and event.position is not None:
                self.session.update(event.position)
        elif event.kind is PointerKind.UP:
            if phase is DragPhase.DRAGGING:
                self.end_drag()
        elif event.kind is PointerKind.CANCEL:
            if phase is DragPhase.DRAGGING:
                self.session.cancel()

    # ------------------------------------------------------------------
    # Scrolling and pagination
    # ------------------------------------------------------------------
    async def on_scroll(self, metrics: ScrollMetrics) -> bool:
        if self.session.phase is DragPhase.DRAGGING:
            self.session.on_viewport_scrolled()
        return await self.pagination.on_scroll(metrics)

    async def request_next_page(self) -> bool:
        return await self.pagination.request_next_page()

    async def load_initial(self) -> bool:
        return await self.pagination.load_initial()

    async def refresh_items(self, reset_pagination: bool = False) -> None:
        """Programmatic refresh; safe to call mid-drag."""
        if self.session.cancel():
            self._logger.debug("Drag cancelled by refresh")
        if reset_pagination:
            self.pagination.reset()
            if self._scroll is not None:
                self._scroll.jump_to(0.0)
        await self.pagination.refresh(reset_pagination)
        self._publish(ListRefreshedEvent(reset_pagination=reset_pagination, item_count=len(self._snapshot)))

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------
    def dispose(self) -> None:
        self.session.cancel()
        super().dispose()

    # ------------------------------------------------------------------
    # Internal handlers
    # ------------------------------------------------------------------
    def _handle_selection_changed(self, selected: List[Any]) -> None:
        self.selection_mode.value = self.selection.is_selection_mode
        if self._on_selection_changed is not None:
            self._on_selection_changed(list(selected))
        self.selection_changed.emit(list(selected))
        self._publish(SelectionChangedEvent(selected=list(selected), selection_mode=self.selection_mode.value))

    def _handle_phase_changed(self, phase: DragPhase, previous: DragPhase) -> None:
        self.drag_phase.value = phase
        self.selection_mode.value = self.selection.is_selection_mode
        self._publish(DragPhaseChangedEvent(phase=phase.value, previous=previous.value))

    def _handle_pagination_state(self, state: PaginationState) -> None:
        self.is_loading.value = state.is_loading
        self.has_more.value = state.has_more

    def _handle_page_loaded(self, page: int, added: int, has_more: bool) -> None:
        self._publish(PageLoadedEvent(page=page, page_size=self._options.page_size, added=added, has_more=has_more))

    def _report_error(self, error: Exception, severity: ErrorSeverity) -> None:
        if self._on_error is not None:
            self._on_error(error, severity)
        self.error_occurred.emit(str(error))

    def _publish(self, event) -> None:
        if self._events is not None:
            self._events.publish(event)
