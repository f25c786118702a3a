"""Default configuration values for multidrag."""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

# Number of items requested per page.  Page numbers start at 1 and are always
# derived from the current list length, see ``PaginationController``.
DEFAULT_PAGE_SIZE: Final[int] = 20

# Fraction of the scrollable extent after which the next page is requested.
# ``0.8`` means "when the viewport is within 20% of one viewport height of the
# end of the list".
SCROLL_TRIGGER_FRACTION: Final[float] = 0.8

# ---------------------------------------------------------------------------
# Drag and auto-scroll
# ---------------------------------------------------------------------------

# Maximum number of pixels scrolled per auto-scroll tick.
AUTO_SCROLL_SPEED: Final[float] = 10.0

# Distance from the top/bottom edge of the list, in pixels, inside which a
# dragged pointer starts auto-scrolling.
AUTO_SCROLL_THRESHOLD: Final[float] = 100.0

# One frame at 60 Hz.
AUTO_SCROLL_INTERVAL_MS: Final[int] = 16

# ---------------------------------------------------------------------------
# Layout and animation hints (forwarded to the renderer, not enforced)
# ---------------------------------------------------------------------------

ITEM_HEIGHT: Final[float] = 80.0
DRAG_ANIMATION_MS: Final[int] = 250
REORDER_ANIMATION_MS: Final[int] = 300

# When ``False`` the reorder is committed as soon as the pointer is released
# instead of waiting for the renderer to finish its settle animation.
ANIMATE_REORDER: Final[bool] = True

MAX_STACK_OFFSET: Final[float] = 8.0
MAX_STACK_ROTATION: Final[float] = 2.0

# ``{}`` is replaced with the number of selected items.
SELECTION_COUNT_TEXT: Final[str] = "{} items selected"
