from dataclasses import dataclass, field
from typing import Any, Optional

from .bus import Event


@dataclass(kw_only=True)
class SelectionChangedEvent(Event):
    selected: list[Any] = field(default_factory=list)
    selection_mode: bool = False


@dataclass(kw_only=True)
class DragPhaseChangedEvent(Event):
    phase: str = "idle"
    previous: str = "idle"


@dataclass(kw_only=True)
class ReorderCommittedEvent(Event):
    items: list[Any] = field(default_factory=list)
    moved: list[Any] = field(default_factory=list)
    target_index: Optional[int] = None


@dataclass(kw_only=True)
class PageLoadedEvent(Event):
    page: int = 1
    page_size: int = 0
    added: int = 0
    has_more: bool = True


@dataclass(kw_only=True)
class ListRefreshedEvent(Event):
    reset_pagination: bool = False
    item_count: int = 0
