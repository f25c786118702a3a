"""BaseViewModel: pure Python, no Qt dependency.

Tracks every subscription a ViewModel makes (event bus, pointer router) so
that ``dispose()`` releases all of them deterministically.
"""

from __future__ import annotations

from typing import Callable, Protocol, Type

from multidrag.events.bus import EventBus, Subscription


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class BaseViewModel:
    """ViewModel base class: pure Python, no Qt dependency."""

    def __init__(self) -> None:
        self._subscriptions: list[Cancellable] = []
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def subscribe_event(
        self,
        event_bus: EventBus,
        event_type: Type,
        handler: Callable,
    ) -> Subscription:
        """Subscribe to an event type and track the subscription."""
        sub = event_bus.subscribe(event_type, handler)
        self._subscriptions.append(sub)
        return sub

    def track(self, subscription: Cancellable) -> Cancellable:
        """Track any cancellable handle so that ``dispose()`` releases it."""
        self._subscriptions.append(subscription)
        return subscription

    def dispose(self) -> None:
        """Cancel all tracked subscriptions."""
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions.clear()
        self._disposed = True
