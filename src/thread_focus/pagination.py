"""Request/response slot for loading further replies

One PaginationSession belongs to one thread view session. It holds at most
one in-flight fetch, coalesces "load more" triggers that arrive within the
debounce window, and drops responses that come back after the focus moved.
"""

import asyncio
import logging
import time
from typing import Callable, Optional, Protocol

from .models import FetchPage

logger = logging.getLogger(__name__)


class PaginationError(Exception):
    """Raised by fetchers when a page of replies could not be loaded"""


class ReplyFetcher(Protocol):
    async def fetch_next(self, thread_id: str, cursor: str) -> FetchPage:
        ...


class PaginationSession:
    """Single-slot pagination with leading-edge debounce

    Example:
        >>> session = PaginationSession(fetcher, on_page=view.apply_page)
        >>> session.reset("111", next_cursor="abc")
        >>> task = session.load_more()   # starts a fetch
        >>> session.load_more() is None  # coalesced while in flight
        True
    """

    def __init__(
        self,
        fetcher: ReplyFetcher,
        on_page: Optional[Callable[[str, FetchPage], None]] = None,
        debounce_seconds: float = 0.3,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize pagination session

        Args:
            fetcher: Source of further reply pages
            on_page: Called with (thread_id, page) for every accepted page
            debounce_seconds: Triggers this soon after the last accepted one are dropped
            clock: Monotonic time source (injectable for tests)
        """
        self.fetcher = fetcher
        self.on_page = on_page
        self.debounce_seconds = debounce_seconds
        self.clock = clock

        self.thread_id: Optional[str] = None
        self.next_cursor: Optional[str] = None
        self.last_error: Optional[BaseException] = None

        self._generation = 0
        self._in_flight: Optional[asyncio.Task] = None
        self._last_accepted_at: Optional[float] = None

    @property
    def has_more(self) -> bool:
        return bool(self.next_cursor)

    @property
    def in_flight(self) -> bool:
        return self._in_flight is not None and not self._in_flight.done()

    def reset(self, thread_id: Optional[str], next_cursor: Optional[str] = None) -> None:
        """Start over for a new focus; any response still in flight goes stale"""
        self._generation += 1
        if self.in_flight:
            self._in_flight.cancel()
        self._in_flight = None
        self._last_accepted_at = None
        self.thread_id = thread_id
        self.next_cursor = next_cursor
        self.last_error = None

    def load_more(self) -> Optional[asyncio.Task]:
        """Trigger a fetch of the next page if one is allowed right now

        Must be called from within a running event loop.

        Returns:
            The task running the fetch, or None when the trigger was dropped
            (nothing more to load, a fetch is already running, or it fell
            inside the debounce window)
        """
        if not self.thread_id or not self.has_more:
            return None
        if self.in_flight:
            logger.debug(f"Fetch for {self.thread_id} already in flight; trigger coalesced")
            return None

        now = self.clock()
        if (
            self._last_accepted_at is not None
            and now - self._last_accepted_at < self.debounce_seconds
        ):
            logger.debug(f"Load-more trigger for {self.thread_id} debounced")
            return None

        self._last_accepted_at = now
        self._in_flight = asyncio.create_task(
            self._fetch(self._generation, self.thread_id, self.next_cursor)
        )
        return self._in_flight

    async def _fetch(self, generation: int, thread_id: str, cursor: str) -> Optional[FetchPage]:
        try:
            page = await self.fetcher.fetch_next(thread_id, cursor)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if generation == self._generation:
                self.last_error = e
            logger.warning(f"Failed to fetch replies for {thread_id}: {e}")
            return None

        if generation != self._generation:
            logger.debug(f"Discarding stale page for {thread_id} (focus changed)")
            return None

        self.next_cursor = page.next_cursor
        self.last_error = None
        logger.debug(
            f"Fetched {len(page.appended_children)} replies for {thread_id}; "
            f"more={'yes' if page.next_cursor else 'no'}"
        )
        if self.on_page is not None:
            self.on_page(thread_id, page)
        return page
