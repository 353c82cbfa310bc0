"""Thread view session: focus, snapshot, navigation and paging for one view"""

import asyncio
import logging
from typing import Optional, Protocol

from .config import ThreadFocusConfig
from .models import Direction, FetchPage, RelationSnapshot, ThreadContext
from .navigation import move_focus
from .pagination import PaginationSession, ReplyFetcher
from .thread_assembler import ThreadAssembler

logger = logging.getLogger(__name__)


class Viewport(Protocol):
    """Virtualized list the session drives by linear index"""

    def scroll_to_index(self, index: int) -> None:
        """Bring the row at index into view (used for the focused row)"""
        ...

    def select_index(self, index: int) -> None:
        """Scroll the row at index into view and move keyboard focus to it"""
        ...


class ThreadViewSession:
    """State owned by one open thread view

    Holds the current relation snapshot and focused id, keeps the assembled
    context in step with both, translates navigation requests into viewport
    calls and routes pagination results back into the snapshot.

    Example:
        >>> session = ThreadViewSession(snapshot, viewport=list_view)
        >>> session.focus("focus")
        >>> session.move_up()      # selects the nearest ancestor
        2
    """

    def __init__(
        self,
        snapshot: RelationSnapshot,
        viewport: Optional[Viewport] = None,
        fetcher: Optional[ReplyFetcher] = None,
        config: Optional[ThreadFocusConfig] = None,
        assembler: Optional[ThreadAssembler] = None,
    ):
        self.config = config or ThreadFocusConfig()
        self.snapshot = snapshot
        self.viewport = viewport
        self.assembler = assembler or ThreadAssembler(
            cache_size=self.config.assembler_cache_size,
            tombstone_suffix=self.config.tombstone_suffix,
            pending_prefix=self.config.pending_prefix,
        )
        self.pagination: Optional[PaginationSession] = None
        if fetcher is not None:
            self.pagination = PaginationSession(
                fetcher,
                on_page=self.apply_page,
                debounce_seconds=self.config.debounce_seconds,
            )

        self.focused_id: Optional[str] = None
        self.context: Optional[ThreadContext] = None

    @property
    def is_missing(self) -> bool:
        """True when a focus was requested but the snapshot does not know it"""
        return self.focused_id is not None and self.context is None

    @property
    def has_more(self) -> bool:
        return self.pagination is not None and self.pagination.has_more

    def focus(self, message_id: str, next_cursor: Optional[str] = None) -> Optional[ThreadContext]:
        """Move the view to a new focused message

        Args:
            message_id: Message to focus
            next_cursor: Cursor for further replies, if the initial fetch returned one

        Returns:
            The assembled context, or None if the message is unknown
        """
        self.focused_id = message_id
        if self.pagination is not None:
            self.pagination.reset(message_id, next_cursor)

        self._recompute()
        if self.context is not None and self.viewport is not None:
            self.viewport.scroll_to_index(self.context.focused_index)
        return self.context

    def replace_snapshot(self, snapshot: RelationSnapshot) -> Optional[ThreadContext]:
        """Install a freshly fetched snapshot (refresh) and recompute"""
        self.snapshot = snapshot
        self._recompute()
        return self.context

    def apply_page(self, parent_id: str, page: FetchPage) -> Optional[ThreadContext]:
        """Merge a page of replies under parent_id and recompute"""
        self.snapshot = self.snapshot.with_page(parent_id, page)
        self._recompute()
        return self.context

    def move_up(self, anchor_id: Optional[str] = None) -> Optional[int]:
        return self._move(anchor_id, Direction.UP)

    def move_down(self, anchor_id: Optional[str] = None) -> Optional[int]:
        return self._move(anchor_id, Direction.DOWN)

    def load_more(self) -> Optional[asyncio.Task]:
        if self.pagination is None or self.context is None:
            return None
        return self.pagination.load_more()

    def _move(self, anchor_id: Optional[str], direction: Direction) -> Optional[int]:
        if self.context is None:
            return None

        anchor = anchor_id if anchor_id is not None else self.context.focused_id
        index = move_focus(anchor, direction, self.context)
        if index is None:
            logger.debug(f"Move {direction.value} from {anchor} is a no-op")
            return None

        if self.viewport is not None:
            self.viewport.select_index(index)
        return index

    def _recompute(self) -> None:
        if self.focused_id is None:
            self.context = None
            return

        if not self.snapshot.has_message(self.focused_id):
            logger.info(f"Message {self.focused_id} not found in snapshot v{self.snapshot.version}")
            self.context = None
            return

        self.context = self.assembler.assemble(self.focused_id, self.snapshot)
