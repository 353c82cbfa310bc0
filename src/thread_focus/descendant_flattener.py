"""Flatten the reply tree below a message into pre-order"""

import logging
from collections import deque
from typing import Deque, List, Mapping, Sequence, Set

logger = logging.getLogger(__name__)


def resolve_descendants(start_id: str, children_of: Mapping[str, Sequence[str]]) -> List[str]:
    """Collect every transitive reply to start_id in pre-order

    A message is emitted before its own replies, and each sibling's whole
    subtree comes before the next sibling. The work list is a deque: a
    message's children go to the front, ahead of siblings still queued.

    The traversal stops entirely the first time it pops an id it has already
    visited (a cycle, or a child listed twice). Later entries are dropped
    rather than risk an unbounded walk over corrupt data.

    Args:
        start_id: Message whose replies to collect (not included in result)
        children_of: Mapping of message id -> direct replies in display order

    Returns:
        Descendant ids in pre-order, without duplicates

    Example:
        >>> resolve_descendants("F", {"F": ["X", "Y"], "X": ["Z"]})
        ['X', 'Z', 'Y']
    """
    descendants: List[str] = []
    seen: Set[str] = set()
    pending: Deque[str] = deque([start_id])

    while pending:
        message_id = pending.popleft()

        if message_id in seen:
            logger.warning(
                f"Reply tree below {start_id} revisits {message_id}; "
                f"truncating after {len(descendants)} descendant(s)"
            )
            break

        seen.add(message_id)
        if message_id != start_id:
            descendants.append(message_id)

        children = children_of.get(message_id)
        if children:
            # extendleft reverses, so feed it reversed to keep display order
            pending.extendleft(reversed(children))

    return descendants
