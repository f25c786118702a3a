"""
Geometry index for drop-target resolution.

Maps list indices to the screen rectangle of the currently mounted row and
answers "which index is under this point".  Coordinates are container-local:
``y == 0`` is the top edge of the visible list and ``container_height`` its
bottom edge.  Rows that are not mounted (scrolled out of view) simply have no
entry.
"""

from __future__ import annotations

import math
from typing import Dict, Iterator, Mapping, Optional

from ..domain.models import Point, Rect


class GeometryIndex:
    """Index -> rectangle map with nearest-row lookup."""

    def __init__(self, container_height: Optional[float] = None) -> None:
        self._rects: Dict[int, Rect] = {}
        self._container_height = container_height

    # -- properties --------------------------------------------------------

    @property
    def container_height(self) -> Optional[float]:
        return self._container_height

    @container_height.setter
    def container_height(self, value: Optional[float]) -> None:
        self._container_height = None if value is None else float(value)

    # -- mutation ----------------------------------------------------------

    def record_rect(self, index: int, rect: Rect) -> None:
        """Register or overwrite the rectangle for the row at *index*."""
        if index < 0:
            return
        self._rects[index] = rect

    def clear(self) -> None:
        self._rects.clear()

    def capture(self, rects: Mapping[int, Rect], container_height: Optional[float] = None) -> None:
        """Replace the whole index, e.g. after the viewport scrolled."""
        self._rects = {index: rect for index, rect in rects.items() if index >= 0}
        if container_height is not None:
            self.container_height = container_height

    def shifted(self, dy: float) -> GeometryIndex:
        """Return a copy with every rectangle moved by *dy* pixels.

        Scrolling the content down by ``n`` pixels moves the rows up by ``n``,
        so callers pass ``-scroll_delta``.
        """
        copy = GeometryIndex(self._container_height)
        copy._rects = {index: rect.translated(dy=dy) for index, rect in self._rects.items()}
        return copy

    # -- queries -----------------------------------------------------------

    def rect_for(self, index: int) -> Optional[Rect]:
        return self._rects.get(index)

    def indices(self) -> list[int]:
        return sorted(self._rects)

    def snapshot(self) -> Dict[int, Rect]:
        return dict(self._rects)

    def __len__(self) -> int:
        return len(self._rects)

    def __contains__(self, index: object) -> bool:
        return index in self._rects

    def __iter__(self) -> Iterator[int]:
        return iter(self.indices())

    def resolve_target(self, point: Point, list_length: int) -> Optional[int]:
        """Return the drop-target index for *point*, or ``None``.

        Dragging above the container snaps to the topmost mounted row and
        dragging below it snaps to the bottommost one.  Inside the container
        the first row (ascending) whose vertical span contains the point wins;
        otherwise the row whose centre is closest, ties going to the lower
        index.  Rows at or beyond *list_length* belong to a stale layout and
        are ignored.
        """
        candidates = [index for index in sorted(self._rects) if index < list_length]
        if not candidates:
            return None

        if point.y < 0:
            return candidates[0]
        if self._container_height is not None and point.y > self._container_height:
            return candidates[-1]

        best: Optional[int] = None
        best_distance = math.inf
        for index in candidates:
            rect = self._rects[index]
            if rect.contains_y(point.y):
                return index
            distance = rect.center.distance_to(point)
            if distance < best_distance:
                best_distance = distance
                best = index
        return best
