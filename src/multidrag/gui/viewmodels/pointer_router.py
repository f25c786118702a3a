"""Pointer event source wider than the list itself.

A drag can end with the pointer far outside the list widget.  The host feeds
*every* pointer event of its window into a :class:`PointerRouter`, and the
list ViewModel subscribes to it, so a pointer-up anywhere always reaches the
drag session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List

from multidrag.domain.models import Point, PointerEvent, PointerKind

LOGGER = logging.getLogger(__name__)

PointerHandler = Callable[[PointerEvent], None]


@dataclass(eq=False)
class PointerRoute:
    """Handle returned by :meth:`PointerRouter.add_route`."""

    router: "PointerRouter"
    handler: PointerHandler
    active: bool = field(default=True)

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self.router._remove(self)


class PointerRouter:
    """Explicitly owned replacement for a process-wide pointer hook."""

    def __init__(self) -> None:
        self._routes: List[PointerRoute] = []

    @property
    def route_count(self) -> int:
        return len(self._routes)

    def add_route(self, handler: PointerHandler) -> PointerRoute:
        route = PointerRoute(self, handler)
        self._routes.append(route)
        return route

    def dispatch(self, event: PointerEvent) -> None:
        for route in list(self._routes):
            if not route.active:
                continue
            try:
                route.handler(event)
            except Exception as exc:
                LOGGER.error("Pointer route %r failed on %s: %s", route.handler, event.kind.value, exc)

    # Convenience wrappers for hosts that do not build PointerEvent objects.

    def move(self, x: float, y: float) -> None:
        self.dispatch(PointerEvent(PointerKind.MOVE, Point(x, y)))

    def up(self, x: float | None = None, y: float | None = None) -> None:
        position = Point(x, y) if x is not None and y is not None else None
        self.dispatch(PointerEvent(PointerKind.UP, position))

    def cancel(self) -> None:
        self.dispatch(PointerEvent(PointerKind.CANCEL))

    def _remove(self, route: PointerRoute) -> None:
        if route in self._routes:
            self._routes.remove(route)
