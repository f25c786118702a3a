"""Pure Python view models (no Qt dependency)."""

from .base import BaseViewModel
from .pointer_router import PointerRoute, PointerRouter
from .reorderable_list_viewmodel import ReorderableListViewModel
from .signal import ObservableProperty, Signal

__all__ = [
    "BaseViewModel",
    "ObservableProperty",
    "PointerRoute",
    "PointerRouter",
    "ReorderableListViewModel",
    "Signal",
]
