"""Drag gesture state machine.

``IDLE -> DRAGGING -> REORDERING -> IDLE``, with ``cancel()`` leading back to
``IDLE`` from any phase.  Releasing the pointer does not touch the data: the
renderer plays its settle animation and calls :meth:`DragSession.commit` when
it is done, which is when the reorder is computed.

Illegal transitions raise :class:`InvalidTransitionError`.  ``cancel()`` is
the one exception: it is idempotent so that teardown paths can always call it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..domain.models import DragPhase, DragState, Point, Rect, ScrollMetrics
from ..domain.snapshot import ListSnapshot
from ..errors import InvalidTransitionError, UnknownItemError
from ..settings.options import ListOptions
from .autoscroll import AutoScroller, ScrollController, compute_scroll_delta
from .geometry import GeometryIndex
from .reorder import compute_permutation
from .scheduling import Scheduler
from .selection import SelectionSet

LOGGER = logging.getLogger(__name__)

GeometryProvider = Callable[[], Mapping[int, Rect]]
PhaseListener = Callable[[DragPhase, DragPhase], None]


class DragSession:
    """Tracks one drag gesture against the current list snapshot."""

    def __init__(
        self,
        selection: SelectionSet,
        *,
        geometry: Optional[GeometryIndex] = None,
        geometry_provider: Optional[GeometryProvider] = None,
        scheduler: Optional[Scheduler] = None,
        scroll: Optional[ScrollController] = None,
        options: Optional[ListOptions] = None,
        on_phase_changed: Optional[PhaseListener] = None,
    ) -> None:
        self._selection = selection
        self._geometry = geometry if geometry is not None else GeometryIndex()
        self._geometry_provider = geometry_provider
        self._options = options or ListOptions()
        self._on_phase_changed = on_phase_changed
        self._scroll = scroll
        self._state = DragState()

        self._auto_scroller: Optional[AutoScroller] = None
        if scheduler is not None and scroll is not None:
            self._auto_scroller = AutoScroller(
                scheduler,
                scroll,
                interval_ms=self._options.auto_scroll_interval_ms,
                compute_delta=self._auto_scroll_delta,
                on_scrolled=self._after_auto_scroll,
            )

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def phase(self) -> DragPhase:
        return self._state.phase

    @property
    def is_active(self) -> bool:
        return self._state.phase is not DragPhase.IDLE

    @property
    def target_index(self) -> Optional[int]:
        return self._state.target_index

    @property
    def dragged_index(self) -> Optional[int]:
        return self._state.dragged_index

    @property
    def dragged_id(self) -> Any:
        return self._state.dragged_id

    @property
    def pointer_position(self) -> Optional[Point]:
        return self._state.pointer_position

    @property
    def original_index_of(self) -> Dict[Any, int]:
        return dict(self._state.original_index_of)

    @property
    def geometry(self) -> GeometryIndex:
        return self._geometry

    @property
    def auto_scrolling(self) -> bool:
        return self._auto_scroller is not None and self._auto_scroller.running

    @property
    def snapshot(self) -> ListSnapshot:
        return self._selection.snapshot

    def is_dragging_item(self, index: int) -> bool:
        return self._state.phase is DragPhase.DRAGGING and self._state.dragged_index == index

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def start(self, index: int, position: Point) -> None:
        """Begin dragging the row at *index*.

        The dragged item is selected if it was not already, and the drag-start
        index of every selected item is recorded; those indices decide the
        order of the moving block at commit time.
        """
        self._require("start", DragPhase.IDLE)
        snapshot = self.snapshot
        if not 0 <= index < len(snapshot):
            raise UnknownItemError(f"cannot drag index {index} of a {len(snapshot)}-item list")

        dragged_id = snapshot.id_at(index)
        state = self._state
        state.dragged_id = dragged_id
        state.dragged_index = index
        state.pointer_position = position if position.is_finite else None
        state.target_index = None
        state.original_index_of.clear()
        for item_id in self._selection.selected:
            item_index = snapshot.index_of(item_id)
            if item_index is not None:
                state.original_index_of[item_id] = item_index
        state.original_index_of[dragged_id] = index

        self._set_phase(DragPhase.DRAGGING)
        # Selection mode now holds through the drag flag, then through the set.
        self._selection.ensure_selected(dragged_id)
        self.recapture_geometry()
        self._maybe_auto_scroll()
        LOGGER.debug(
            "Drag started on index %d with %d moving items",
            index,
            len(state.original_index_of),
        )

    def update(self, position: Point) -> Optional[int]:
        """Track a pointer move; returns the current target index."""
        self._require("update", DragPhase.DRAGGING)
        if not position.is_finite:
            LOGGER.debug("Ignoring non-finite pointer position %r", position)
            return self._state.target_index
        self._state.pointer_position = position
        self._resolve_target()
        self._maybe_auto_scroll()
        return self._state.target_index

    def release(self) -> None:
        """Pointer up: stop tracking and wait for :meth:`commit`."""
        self._require("release", DragPhase.DRAGGING)
        self._stop_auto_scroll()
        self._state.pointer_position = None
        self._set_phase(DragPhase.REORDERING)

    def commit(self) -> Optional[List[Any]]:
        """Compute the new order and return to ``IDLE``.

        Returns ``None`` when no drop target was ever resolved, in which case
        the list must be left untouched.
        """
        self._require("commit", DragPhase.REORDERING)
        state = self._state
        snapshot = self.snapshot
        new_items: Optional[List[Any]] = None
        if state.target_index is not None:
            new_items = compute_permutation(
                snapshot.items,
                self._selection.selected,
                state.original_index_of,
                state.target_index,
                snapshot.identity,
            )
        self._finish()
        return new_items

    def cancel(self) -> bool:
        """Discard the gesture without reordering; returns ``False`` when idle."""
        if self._state.phase is DragPhase.IDLE:
            self._stop_auto_scroll()
            return False
        LOGGER.debug("Drag cancelled in phase %s", self._state.phase.value)
        self._finish()
        return True

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def recapture_geometry(self) -> None:
        """Re-measure mounted rows through the geometry provider, if any."""
        if self._geometry_provider is None:
            return
        self._geometry.capture(self._geometry_provider())

    def on_viewport_scrolled(self) -> Optional[int]:
        """Host scrolled the list during a drag: re-measure and re-resolve."""
        if self._state.phase is not DragPhase.DRAGGING:
            return None
        self.recapture_geometry()
        self._resolve_target()
        return self._state.target_index

    def item_offset(self, index: int, progress: float) -> float:
        """Vertical offset of the row at *index* during the settle animation."""
        state = self._state
        if state.phase is not DragPhase.REORDERING or state.target_index is None:
            return 0.0
        snapshot = self.snapshot
        if not 0 <= index < len(snapshot):
            return 0.0
        item_id = snapshot.id_at(index)
        if item_id not in self._selection:
            return 0.0
        original_index = state.original_index_of.get(item_id)
        if original_index is None:
            return 0.0
        original_rect = self._geometry.rect_for(original_index)
        target_rect = self._geometry.rect_for(state.target_index)
        if original_rect is None or target_rect is None:
            return 0.0
        progress = max(0.0, min(1.0, float(progress)))
        return (target_rect.top - original_rect.top) * progress

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _require(self, operation: str, expected: DragPhase) -> None:
        if self._state.phase is not expected:
            raise InvalidTransitionError(operation, self._state.phase.value, expected.value)

    def _set_phase(self, phase: DragPhase) -> None:
        previous = self._state.phase
        if previous is phase:
            return
        self._state.phase = phase
        if self._on_phase_changed is not None:
            self._on_phase_changed(phase, previous)

    def _finish(self) -> None:
        self._stop_auto_scroll()
        previous = self._state.phase
        self._state.reset()
        if previous is not DragPhase.IDLE and self._on_phase_changed is not None:
            self._on_phase_changed(DragPhase.IDLE, previous)

    def _resolve_target(self) -> None:
        position = self._state.pointer_position
        if position is None:
            return
        if not len(self._geometry):
            self.recapture_geometry()
        target = self._geometry.resolve_target(position, len(self.snapshot))
        if target is not None:
            self._state.target_index = target

    def _container_height(self, metrics: Optional[ScrollMetrics] = None) -> Optional[float]:
        if self._geometry.container_height is not None:
            return self._geometry.container_height
        if metrics is not None:
            return metrics.viewport
        return None

    def _pointer_delta(self, metrics: Optional[ScrollMetrics]) -> float:
        position = self._state.pointer_position
        height = self._container_height(metrics)
        if position is None or height is None:
            return 0.0
        return compute_scroll_delta(
            position.y,
            height,
            self._options.auto_scroll_threshold,
            self._options.auto_scroll_speed,
        )

    def _auto_scroll_delta(self, metrics: ScrollMetrics) -> Optional[float]:
        if self._state.phase is not DragPhase.DRAGGING:
            return None
        return self._pointer_delta(metrics)

    def _after_auto_scroll(self, applied: float) -> None:
        if self._geometry_provider is not None:
            self.recapture_geometry()
        else:
            self._geometry.capture(self._geometry.shifted(-applied).snapshot())
        self._resolve_target()

    def _maybe_auto_scroll(self) -> None:
        if self._auto_scroller is None or self._state.phase is not DragPhase.DRAGGING:
            return
        if self._auto_scroller.running:
            return
        metrics = None
        if self._geometry.container_height is None:
            metrics = self._scroll.metrics() if self._scroll is not None else None
        if self._pointer_delta(metrics):
            self._auto_scroller.ensure_running()

    def _stop_auto_scroll(self) -> None:
        if self._auto_scroller is not None:
            self._auto_scroller.stop()
