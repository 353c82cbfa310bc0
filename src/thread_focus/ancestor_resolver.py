"""Resolve the chain of messages a message is replying to"""

import logging
from typing import List, Mapping, Optional, Set

logger = logging.getLogger(__name__)


def resolve_ancestors(start_parent_id: Optional[str], parent_of: Mapping[str, str]) -> List[str]:
    """Walk the reply-to relation up to the thread root

    Args:
        start_parent_id: Parent of the focused message (None for a root)
        parent_of: Mapping of message id -> id it replies to

    Returns:
        Ancestor ids, root first and nearest ancestor last. The walk stops at
        the first id it has already visited, so cyclic data yields a finite
        chain without repeats.

    Example:
        >>> resolve_ancestors("C", {"C": "B", "B": "A"})
        ['A', 'B', 'C']
    """
    chain: List[str] = []
    seen: Set[str] = set()
    current = start_parent_id

    while current:
        if current in seen:
            logger.warning(
                f"Circular reply-to chain detected at {current}; "
                f"truncating ancestors after {len(chain)} message(s)"
            )
            break
        seen.add(current)
        chain.append(current)
        current = parent_of.get(current)

    # Collected nearest-first
    chain.reverse()
    return chain
