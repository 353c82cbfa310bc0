"""Assemble a linear thread view around a focused message

Combines the ancestor chain and the flattened reply tree into a single
render-ordered sequence with no repeated ids.
"""

import logging
from collections import OrderedDict
from typing import List, Mapping, Optional, Sequence, Tuple

from .ancestor_resolver import resolve_ancestors
from .descendant_flattener import resolve_descendants
from .models import (
    DEFAULT_PENDING_PREFIX,
    DEFAULT_TOMBSTONE_SUFFIX,
    RelationSnapshot,
    ThreadContext,
    ThreadEntry,
)

logger = logging.getLogger(__name__)


def assemble(
    focused_id: str,
    parent_of: Mapping[str, str],
    children_of: Mapping[str, Sequence[str]],
    tombstone_suffix: str = DEFAULT_TOMBSTONE_SUFFIX,
    pending_prefix: str = DEFAULT_PENDING_PREFIX,
    snapshot_version: int = 0,
) -> ThreadContext:
    """Build the thread context for focused_id from plain relation mappings

    Ancestors are trimmed against descendants first, then descendants against
    the trimmed ancestors. The focused id is removed from both.

    Example:
        >>> ctx = assemble("focus", {"B": "A", "C": "B", "focus": "C"},
        ...                {"focus": ["D", "E"], "D": ["F"]})
        >>> ctx.sequence
        ['A', 'B', 'C', 'focus', 'D', 'F', 'E']
    """
    ancestors = resolve_ancestors(parent_of.get(focused_id), parent_of)
    descendants = resolve_descendants(focused_id, children_of)

    descendant_set = set(descendants)
    ancestors = [
        message_id for message_id in ancestors
        if message_id != focused_id and message_id not in descendant_set
    ]
    ancestor_set = set(ancestors)
    descendants = [
        message_id for message_id in descendants
        if message_id != focused_id and message_id not in ancestor_set
    ]

    sequence = ancestors + [focused_id] + descendants
    entries = [
        ThreadEntry.classify(message_id, tombstone_suffix, pending_prefix)
        for message_id in sequence
    ]

    return ThreadContext(
        focused_id=focused_id,
        ancestors=ancestors,
        descendants=descendants,
        sequence=sequence,
        entries=entries,
        snapshot_version=snapshot_version,
    )


class ThreadAssembler:
    """Recompute thread contexts from relation snapshots

    Every call works from scratch against the snapshot it is given. The
    optional cache only short-circuits repeated calls for the same focused_id
    against the very same snapshot object.

    Example:
        >>> assembler = ThreadAssembler()
        >>> snapshot = RelationSnapshot(parent_of={"B": "A"}, children_of={"B": ["C"]})
        >>> assembler.assemble("B", snapshot).sequence
        ['A', 'B', 'C']
    """

    def __init__(
        self,
        cache_size: int = 32,
        tombstone_suffix: str = DEFAULT_TOMBSTONE_SUFFIX,
        pending_prefix: str = DEFAULT_PENDING_PREFIX,
    ):
        """Initialize assembler

        Args:
            cache_size: Number of assembled contexts to keep (0 disables caching)
            tombstone_suffix: Id suffix marking withheld/deleted replies
            pending_prefix: Id prefix marking unconfirmed local replies
        """
        if cache_size < 0:
            raise ValueError(f"Invalid cache_size: {cache_size}")

        self.cache_size = cache_size
        self.tombstone_suffix = tombstone_suffix
        self.pending_prefix = pending_prefix
        self._cache: "OrderedDict[Tuple[str, int], Tuple[RelationSnapshot, ThreadContext]]" = OrderedDict()

    def assemble(self, focused_id: str, snapshot: RelationSnapshot) -> ThreadContext:
        """Assemble the thread around focused_id

        Args:
            focused_id: Id of the focused message
            snapshot: Relation snapshot to resolve against

        Returns:
            ThreadContext with ancestors, descendants, sequence and entries
        """
        key = (focused_id, snapshot.version)
        cached = self._cache_get(key, snapshot)
        if cached is not None:
            return cached

        context = assemble(
            focused_id,
            snapshot.parent_of,
            snapshot.children_of,
            tombstone_suffix=self.tombstone_suffix,
            pending_prefix=self.pending_prefix,
            snapshot_version=snapshot.version,
        )
        logger.debug(
            f"Assembled thread for {focused_id} (snapshot v{snapshot.version}): "
            f"{len(context.ancestors)} ancestors, {len(context.descendants)} descendants"
        )

        self._cache_put(key, snapshot, context)
        return context

    def clear_cache(self) -> None:
        self._cache.clear()

    def _cache_get(self, key: Tuple[str, int], snapshot: RelationSnapshot) -> Optional[ThreadContext]:
        if not self.cache_size:
            return None
        cached = self._cache.get(key)
        # Versions restart at 0 for every freshly loaded snapshot
        if cached is None or cached[0] is not snapshot:
            return None
        self._cache.move_to_end(key)
        return cached[1]

    def _cache_put(self, key: Tuple[str, int], snapshot: RelationSnapshot, context: ThreadContext) -> None:
        if not self.cache_size:
            return
        self._cache[key] = (snapshot, context)
        self._cache.move_to_end(key)
        while len(self._cache) > self.cache_size:
            self._cache.popitem(last=False)
