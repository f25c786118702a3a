"""Schema helpers for list engine options."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from .. import config

OPTIONS_SCHEMA: dict[str, Any] = {
    "$id": "multidrag/options.schema.json",
    "type": "object",
    "properties": {
        "page_size": {"type": "integer", "minimum": 1},
        "auto_scroll_speed": {"type": "number", "exclusiveMinimum": 0},
        "auto_scroll_threshold": {"type": "number", "exclusiveMinimum": 0},
        "auto_scroll_interval_ms": {"type": "integer", "minimum": 1},
        "scroll_trigger_fraction": {
            "type": "number",
            "minimum": 0,
            "maximum": 1,
        },
        "item_height": {"type": "number", "exclusiveMinimum": 0},
        "animate_reorder": {"type": "boolean"},
        "drag_animation_ms": {"type": "integer", "minimum": 0},
        "reorder_animation_ms": {"type": "integer", "minimum": 0},
        "selection_count_text": {"type": "string"},
        "max_stack_offset": {"type": "number", "minimum": 0},
        "max_stack_rotation": {"type": "number", "minimum": 0},
    },
    "additionalProperties": False,
}

DEFAULT_OPTIONS: dict[str, Any] = {
    "page_size": config.DEFAULT_PAGE_SIZE,
    "auto_scroll_speed": config.AUTO_SCROLL_SPEED,
    "auto_scroll_threshold": config.AUTO_SCROLL_THRESHOLD,
    "auto_scroll_interval_ms": config.AUTO_SCROLL_INTERVAL_MS,
    "scroll_trigger_fraction": config.SCROLL_TRIGGER_FRACTION,
    "item_height": config.ITEM_HEIGHT,
    "animate_reorder": config.ANIMATE_REORDER,
    "drag_animation_ms": config.DRAG_ANIMATION_MS,
    "reorder_animation_ms": config.REORDER_ANIMATION_MS,
    "selection_count_text": config.SELECTION_COUNT_TEXT,
    "max_stack_offset": config.MAX_STACK_OFFSET,
    "max_stack_rotation": config.MAX_STACK_ROTATION,
}

_validator = Draft202012Validator(OPTIONS_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_OPTIONS` and validate the result.

    ``None`` values are treated as "use the default" so that callers can pass
    keyword arguments straight through.
    """

    merged = deepcopy(DEFAULT_OPTIONS)
    if data:
        for key, value in data.items():
            if value is None:
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


__all__ = ["DEFAULT_OPTIONS", "OPTIONS_SCHEMA", "merge_with_defaults"]
