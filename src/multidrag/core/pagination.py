"""Scroll-driven pagination.

The controller never owns the list.  It reads the current length through
``length_provider`` before and after awaiting the host's page callback, and
derives everything (next page number, end of data) from that.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from ..domain.models import PaginationState, ScrollMetrics
from ..errors import PageRequestError
from ..errors.handler import ErrorHandler, ErrorSeverity
from ..settings.options import ListOptions

LOGGER = logging.getLogger(__name__)

PageRequest = Callable[[int, int], Awaitable[None]]
RefreshRequest = Callable[[], Awaitable[None]]

FOOTER_LOADING = "loading"
FOOTER_END = "end"


def next_page_number(loaded_count: int, page_size: int) -> int:
    """1-based page that follows *loaded_count* items."""
    return loaded_count // page_size + 1


class PaginationController:
    """Decides when to request more items and tracks loading/end-of-data."""

    def __init__(
        self,
        length_provider: Callable[[], int],
        *,
        on_page_request: Optional[PageRequest] = None,
        on_refresh: Optional[RefreshRequest] = None,
        options: Optional[ListOptions] = None,
        error_handler: Optional[ErrorHandler] = None,
        on_state_changed: Optional[Callable[[PaginationState], None]] = None,
        on_page_loaded: Optional[Callable[[int, int, bool], None]] = None,
    ) -> None:
        self._length = length_provider
        self._on_page_request = on_page_request
        self._on_refresh = on_refresh
        self._options = options or ListOptions()
        self._errors = error_handler or ErrorHandler(LOGGER)
        self._on_state_changed = on_state_changed
        self._on_page_loaded = on_page_loaded
        self._state = PaginationState(loaded_count=length_provider())
        self._refreshing = False
        # Bumped by refresh() and reset(); requests started earlier are stale.
        self._generation = 0

    # -- properties --------------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def has_more(self) -> bool:
        return self._state.has_more

    @property
    def loaded_count(self) -> int:
        return self._length()

    @property
    def page_size(self) -> int:
        return self._options.page_size

    @property
    def state(self) -> PaginationState:
        return PaginationState(
            is_loading=self._state.is_loading,
            has_more=self._state.has_more,
            loaded_count=self._length(),
        )

    @property
    def footer_state(self) -> Optional[str]:
        """What the renderer shows below the last row, if anything."""
        if self._state.is_loading:
            return FOOTER_LOADING
        if not self._state.has_more and self._length() > 0:
            return FOOTER_END
        return None

    # -- public API --------------------------------------------------------

    def should_load_more(self, metrics: ScrollMetrics) -> bool:
        if self._on_page_request is None:
            return False
        if not self._state.has_more or self._state.is_loading:
            return False
        remaining_fraction = 1.0 - self._options.scroll_trigger_fraction
        threshold = metrics.max_extent - metrics.viewport * remaining_fraction
        return metrics.offset >= threshold

    async def on_scroll(self, metrics: ScrollMetrics) -> bool:
        """Request the next page when the viewport nears the end of the list."""
        if not self.should_load_more(metrics):
            return False
        return await self.request_next_page()

    async def load_initial(self) -> bool:
        """Fetch page 1 when the list starts out empty."""
        if self._length() > 0:
            return False
        return await self.request_next_page()

    async def request_next_page(self) -> bool:
        """Ask the host for the next page.

        Returns ``True`` when the callback completed.  A short page (fewer new
        items than ``page_size``) is taken as the end of the data.  Failures
        are reported through the error handler and leave ``has_more`` as it
        was; ``is_loading`` is always cleared.

        A request overtaken by :meth:`refresh` or :meth:`reset` is stale: the
        host still applies its items, but it no longer touches ``has_more``
        or ``is_loading``, which now belong to the newer operation.
        """
        if self._on_page_request is None or self._state.is_loading or not self._state.has_more:
            return False

        page_size = self._options.page_size
        before = self._length()
        page = next_page_number(before, page_size)
        generation = self._generation
        self._set_loading(True)
        LOGGER.debug("Requesting page %d (items: %d, page size: %d)", page, before, page_size)
        try:
            await self._on_page_request(page, page_size)
        except Exception as exc:
            self._errors.handle(
                PageRequestError(f"page {page} request failed: {exc}"),
                ErrorSeverity.ERROR,
                {"page": page, "page_size": page_size, "cause": repr(exc)},
            )
            return False
        else:
            if generation != self._generation:
                LOGGER.debug("Page %d completed after a refresh; keeping current state", page)
                return True
            after = self._length()
            added = after - before
            LOGGER.debug("Items before: %d, after: %d, added: %d", before, after, added)
            if added < page_size:
                self._state.has_more = False
                LOGGER.debug("Short page received; no more items to load")
            if self._on_page_loaded is not None:
                self._on_page_loaded(page, added, self._state.has_more)
            return True
        finally:
            if generation == self._generation:
                self._state.loaded_count = self._length()
                self._set_loading(False)

    async def refresh(self, reset_pagination: bool = False) -> None:
        """Reload from the start through ``on_refresh`` or page 1.

        In-flight bookkeeping is dropped first.  A request that was already
        awaiting the host may still complete afterwards; its items are kept.
        """
        self._generation += 1
        generation = self._generation
        self._state.is_loading = False
        if reset_pagination:
            self._state.has_more = True
            LOGGER.debug("Pagination reset: has_more = True")
        self._refreshing = True
        self._set_loading(True)
        try:
            if self._on_refresh is not None:
                await self._on_refresh()
            elif self._on_page_request is not None:
                await self._on_page_request(1, self._options.page_size)
        except Exception as exc:
            self._errors.handle(
                PageRequestError(f"refresh failed: {exc}"),
                ErrorSeverity.ERROR,
                {"refresh": True, "cause": repr(exc)},
            )
        finally:
            if generation == self._generation:
                self._refreshing = False
                self._state.loaded_count = self._length()
                self._set_loading(False)

    def reset(self) -> None:
        """Forget end-of-data and loading flags without calling the host."""
        self._generation += 1
        self._refreshing = False
        self._state.is_loading = False
        self._state.has_more = True
        self._state.loaded_count = self._length()
        self._emit_state()

    def observe_length(self, new_length: int) -> None:
        """Reconcile with a list that changed outside a page request.

        Growth re-arms pagination; a list that did not grow while a request
        was in flight is treated as exhausted, except during a refresh where
        the same length is expected.
        """
        previous = self._state.loaded_count
        if new_length > previous:
            self._state.has_more = True
        elif new_length == previous and self._state.is_loading and not self._refreshing:
            self._state.has_more = False
        self._state.loaded_count = new_length
        self._emit_state()

    # -- internal ----------------------------------------------------------

    def _set_loading(self, loading: bool) -> None:
        self._state.is_loading = loading
        self._emit_state()

    def _emit_state(self) -> None:
        if self._on_state_changed is not None:
            self._on_state_changed(self.state)
