from .bus import Event, EventBus, Subscription
from .list_events import (
    DragPhaseChangedEvent,
    ListRefreshedEvent,
    PageLoadedEvent,
    ReorderCommittedEvent,
    SelectionChangedEvent,
)

__all__ = [
    "DragPhaseChangedEvent",
    "Event",
    "EventBus",
    "ListRefreshedEvent",
    "PageLoadedEvent",
    "ReorderCommittedEvent",
    "SelectionChangedEvent",
    "Subscription",
]
