"""Block-move reordering.

Pure functions: given the current list, the selected identities, where each
of them sat when the drag started and a single target index, compute the new
list.  Single-item reordering is the degenerate case of a one-item block.
"""

from __future__ import annotations

from typing import Any, Collection, Hashable, List, Mapping, Optional, Sequence

from ..domain.snapshot import IdentityFn, default_identity


def clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def moving_block(
    items: Sequence[Any],
    selected_ids: Collection[Hashable],
    original_index_of: Mapping[Hashable, int],
    identity: IdentityFn = default_identity,
) -> List[Any]:
    """Return the selected items ordered by their index at drag start.

    Items without a recorded original index (selected after the drag began or
    unknown to the session) do not move.
    """
    selected = set(selected_ids)
    block = [
        item
        for item in items
        if identity(item) in selected and identity(item) in original_index_of
    ]
    block.sort(key=lambda item: original_index_of[identity(item)])
    return block


def compute_permutation(
    items: Sequence[Any],
    selected_ids: Collection[Hashable],
    original_index_of: Mapping[Hashable, int],
    target_index: Optional[int],
    identity: IdentityFn = default_identity,
) -> List[Any]:
    """Move every selected item to *target_index* as one ordered block.

    The remainder keeps its relative order, the block keeps the order the
    items had before the drag, and *target_index* is clamped into the bounds
    of the remainder because it was resolved against the pre-removal layout.
    ``None`` means no target was ever resolved: the list is returned as is.
    """
    if target_index is None:
        return list(items)

    block = moving_block(items, selected_ids, original_index_of, identity)
    if not block:
        return list(items)

    moving = {identity(item) for item in block}
    remainder = [item for item in items if identity(item) not in moving]
    insert_at = clamp(int(target_index), 0, len(remainder))
    return remainder[:insert_at] + block + remainder[insert_at:]


def stack_offset(item_count: int, max_offset: float) -> float:
    """Per-card offset for the dragged stack preview.

    Full offset for up to three cards, then shrinking so large selections do
    not produce a huge stack, never below 30% of *max_offset*.
    """
    if item_count <= 1:
        return 0.0
    if item_count <= 3:
        return float(max_offset)
    return float(max_offset) * clamp_float(3 / item_count, 0.3, 1.0)


def stack_rotation(item_count: int, max_rotation: float) -> float:
    """Per-card rotation (degrees) for the dragged stack preview."""
    if item_count <= 1:
        return 0.0
    if item_count <= 3:
        return float(max_rotation)
    return float(max_rotation) * clamp_float(3 / item_count, 0.3, 1.0)


def clamp_float(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
