"""Read-only view of the externally owned list.

The engine never keeps a reference to the caller's list.  Each time the host
hands over a new list a :class:`ListSnapshot` is built from it, and every
proposed change (reorder, selection) is expressed as a new sequence.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, Iterable, Iterator, List, Optional, Sequence, Tuple

from ..errors import UnknownItemError

IdentityFn = Callable[[Any], Hashable]


def default_identity(item: Any) -> Hashable:
    """Use the item itself as its identity.

    Items must then implement structural ``__eq__``/``__hash__``; two
    reconstructed copies of the same logical item compare equal.
    """

    return item


class ListSnapshot:
    """Immutable ordered items plus the identity -> index map."""

    __slots__ = ("_items", "_ids", "_index_of", "_identity")

    def __init__(self, items: Iterable[Any] = (), identity: IdentityFn = default_identity) -> None:
        self._identity = identity
        self._items: Tuple[Any, ...] = tuple(items)
        self._ids: Tuple[Hashable, ...] = tuple(identity(item) for item in self._items)
        index_of: Dict[Hashable, int] = {}
        for index, item_id in enumerate(self._ids):
            # First occurrence wins if the host hands over duplicates.
            index_of.setdefault(item_id, index)
        self._index_of = index_of

    @property
    def identity(self) -> IdentityFn:
        return self._identity

    @property
    def items(self) -> Tuple[Any, ...]:
        return self._items

    @property
    def ids(self) -> Tuple[Hashable, ...]:
        return self._ids

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __getitem__(self, index: int) -> Any:
        return self._items[index]

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._index_of

    def id_at(self, index: int) -> Hashable:
        if not 0 <= index < len(self._ids):
            raise UnknownItemError(f"index {index} is outside a list of {len(self._ids)} items")
        return self._ids[index]

    def index_of(self, item_id: Hashable) -> Optional[int]:
        return self._index_of.get(item_id)

    def items_for(self, ids: Iterable[Hashable]) -> List[Any]:
        """Return items for *ids* in list order, skipping unknown identities."""

        wanted = set(ids)
        return [item for item, item_id in zip(self._items, self._ids) if item_id in wanted]

    def ordered_ids(self, ids: Iterable[Hashable]) -> List[Hashable]:
        wanted = set(ids)
        return [item_id for item_id in self._ids if item_id in wanted]

    def with_items(self, items: Sequence[Any]) -> ListSnapshot:
        return ListSnapshot(items, self._identity)

    def __repr__(self) -> str:
        return f"ListSnapshot({list(self._ids)!r})"
