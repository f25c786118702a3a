"""Selection set keyed by item identity."""

from __future__ import annotations

import logging
from typing import Any, Callable, Hashable, Iterable, List, Optional, Set

from ..domain.models import SelectionMode
from ..domain.snapshot import ListSnapshot

LOGGER = logging.getLogger(__name__)

SelectionListener = Callable[[List[Any]], None]


class SelectionSet:
    """Mutable set of selected identities with change notification.

    Selection mode is never stored: it is derived from the selected set and the
    ``drag_active`` probe, so the two can never disagree.  Every notification
    carries the full selection as *items* ordered by the current snapshot, not
    by the order in which they were selected.
    """

    def __init__(
        self,
        snapshot: Optional[ListSnapshot] = None,
        *,
        on_change: Optional[SelectionListener] = None,
        drag_active: Optional[Callable[[], bool]] = None,
    ) -> None:
        self._snapshot = snapshot if snapshot is not None else ListSnapshot()
        self._selected: Set[Hashable] = set()
        self._on_change = on_change
        self._drag_active = drag_active or (lambda: False)

    # -- properties --------------------------------------------------------

    @property
    def snapshot(self) -> ListSnapshot:
        return self._snapshot

    @snapshot.setter
    def snapshot(self, snapshot: ListSnapshot) -> None:
        self._snapshot = snapshot

    @property
    def selected(self) -> frozenset:
        return frozenset(self._selected)

    @property
    def is_selection_mode(self) -> bool:
        return bool(self._selected) or bool(self._drag_active())

    @property
    def mode(self) -> SelectionMode:
        return SelectionMode.SELECTING if self.is_selection_mode else SelectionMode.IDLE

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._selected

    def contains(self, item_id: Hashable) -> bool:
        return item_id in self._selected

    def ordered_ids(self) -> List[Hashable]:
        """Selected identities in list order; unknown identities go last."""
        known = self._snapshot.ordered_ids(self._selected)
        missing = [item_id for item_id in self._selected if item_id not in self._snapshot]
        if missing:
            missing.sort(key=repr)
        return known + missing

    def ordered_items(self) -> List[Any]:
        return self._snapshot.items_for(self._selected)

    def count_text(self, template: str) -> str:
        return template.replace("{}", str(len(self._selected)))

    # -- mutation ----------------------------------------------------------

    def toggle(self, item_id: Hashable) -> bool:
        """Flip membership of *item_id*; returns ``True`` if it is now selected."""
        if item_id in self._selected:
            self._selected.discard(item_id)
            now_selected = False
        else:
            self._selected.add(item_id)
            now_selected = True
        self._notify()
        return now_selected

    def ensure_selected(self, item_id: Hashable) -> bool:
        """Add *item_id* without ever removing it; returns ``True`` if it was added."""
        if item_id in self._selected:
            return False
        self._selected.add(item_id)
        self._notify()
        return True

    def enter_selection_mode(self, item_id: Hashable) -> bool:
        """Long-press behaviour: select *item_id*, never deselect it."""
        return self.ensure_selected(item_id)

    def replace(self, item_ids: Iterable[Hashable], *, notify: bool = True) -> None:
        self._selected = set(item_ids)
        if notify:
            self._notify()

    def clear_all(self) -> None:
        self._selected.clear()
        self._notify()

    def retain(self, snapshot: ListSnapshot) -> List[Hashable]:
        """Adopt *snapshot* and drop identities that are no longer in it.

        Returns the dropped identities; a notification fires only when
        something was actually dropped.
        """
        self._snapshot = snapshot
        dropped = [item_id for item_id in self._selected if item_id not in snapshot]
        if dropped:
            LOGGER.debug("Dropping %d selected items missing after refresh", len(dropped))
            self._selected.difference_update(dropped)
            self._notify()
        return dropped

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.ordered_items())
