"""Validated, immutable options for a reorderable list."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Mapping

from jsonschema import ValidationError

from ..errors import OptionsLoadError, OptionsValidationError
from .schema import DEFAULT_OPTIONS, merge_with_defaults


@dataclass(frozen=True)
class ListOptions:
    """Tuning knobs for drag, auto-scroll and pagination behaviour.

    ``item_height`` and the animation durations are layout hints for the
    renderer; the engine forwards them but never enforces them.
    """

    page_size: int = DEFAULT_OPTIONS["page_size"]
    auto_scroll_speed: float = DEFAULT_OPTIONS["auto_scroll_speed"]
    auto_scroll_threshold: float = DEFAULT_OPTIONS["auto_scroll_threshold"]
    auto_scroll_interval_ms: int = DEFAULT_OPTIONS["auto_scroll_interval_ms"]
    scroll_trigger_fraction: float = DEFAULT_OPTIONS["scroll_trigger_fraction"]
    item_height: float = DEFAULT_OPTIONS["item_height"]
    animate_reorder: bool = DEFAULT_OPTIONS["animate_reorder"]
    drag_animation_ms: int = DEFAULT_OPTIONS["drag_animation_ms"]
    reorder_animation_ms: int = DEFAULT_OPTIONS["reorder_animation_ms"]
    selection_count_text: str = DEFAULT_OPTIONS["selection_count_text"]
    max_stack_offset: float = DEFAULT_OPTIONS["max_stack_offset"]
    max_stack_rotation: float = DEFAULT_OPTIONS["max_stack_rotation"]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None = None) -> ListOptions:
        """Validate *data* against the schema and build an options object."""

        try:
            merged = merge_with_defaults(dict(data) if data else None)
        except ValidationError as exc:
            raise OptionsValidationError(exc.message) from exc
        return cls(**merged)

    def replace(self, **changes: Any) -> ListOptions:
        """Return a validated copy with *changes* applied."""

        payload = asdict(self)
        payload.update(changes)
        return ListOptions.from_mapping(payload)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_options(path: Path) -> ListOptions:
    """Read a JSON options file and return validated :class:`ListOptions`."""

    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise OptionsLoadError(f"cannot read options from {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise OptionsLoadError(f"options file {path} must contain a JSON object")
    return ListOptions.from_mapping(payload)


__all__ = ["ListOptions", "load_options"]
