from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, Optional


class DragPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    # Pointer released; the renderer plays its settle animation and the list
    # is only mutated when that animation completes.
    REORDERING = "reordering"


class SelectionMode(str, Enum):
    IDLE = "idle"
    SELECTING = "selecting"


class PointerKind(str, Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    CANCEL = "cancel"


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center(self) -> Point:
        return Point(self.left + self.width / 2, self.top + self.height / 2)

    def contains_y(self, y: float) -> bool:
        return self.top <= y <= self.bottom

    def translated(self, dx: float = 0.0, dy: float = 0.0) -> Rect:
        return Rect(self.left + dx, self.top + dy, self.width, self.height)


@dataclass(frozen=True)
class ScrollMetrics:
    """Scroll position reported by the host viewport."""

    offset: float
    max_extent: float
    viewport: float


@dataclass(frozen=True)
class PointerEvent:
    kind: PointerKind
    position: Optional[Point] = None


@dataclass
class DragState:
    phase: DragPhase = DragPhase.IDLE
    dragged_id: Optional[Hashable] = None
    dragged_index: Optional[int] = None
    pointer_position: Optional[Point] = None
    original_index_of: Dict[Hashable, int] = field(default_factory=dict)
    target_index: Optional[int] = None

    def reset(self) -> None:
        self.phase = DragPhase.IDLE
        self.dragged_id = None
        self.dragged_index = None
        self.pointer_position = None
        self.original_index_of.clear()
        self.target_index = None


@dataclass
class PaginationState:
    is_loading: bool = False
    has_more: bool = True
    # Mirrors the externally owned list length; never incremented on its own.
    loaded_count: int = 0


@dataclass(frozen=True)
class ItemState:
    """Everything an ``item_builder`` needs to render one row."""

    item: Any
    index: int
    is_selected: bool
    is_dragging: bool
