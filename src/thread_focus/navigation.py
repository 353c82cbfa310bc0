"""Map up/down focus moves onto linear indices of an assembled thread

The assembled sequence is three segments laid end to end: ancestors, the
single focused slot, then descendants. Moves are requested relative to a
message id, so the mapper translates an id's position inside its own segment
into a position in the whole sequence.
"""

from typing import Optional

from .models import Direction, ThreadContext


def move_focus(anchor_id: str, direction: Direction, context: ThreadContext) -> Optional[int]:
    """Compute the linear index focus should move to

    Args:
        anchor_id: Message the move starts from (may be the focused message)
        direction: Direction.UP or Direction.DOWN
        context: Currently assembled thread

    Returns:
        Target index into context.sequence, or None when the move leaves the
        sequence or the anchor is not part of this thread

    Example:
        >>> # sequence = [A, B, C, focus, D, F, E]
        >>> move_focus("focus", Direction.UP, ctx)
        2
        >>> move_focus("D", Direction.UP, ctx)
        3
    """
    offset = len(context.ancestors)
    up = Direction(direction) is Direction.UP

    if anchor_id == context.focused_id:
        index = offset - 1 if up else offset + 1
    elif anchor_id in context.ancestors:
        position = context.ancestors.index(anchor_id)
        index = position - 1 if up else position + 1
    elif anchor_id in context.descendants:
        position = context.descendants.index(anchor_id)
        # Descendant j sits at offset + 1 + j
        index = offset + position if up else offset + position + 2
    else:
        return None

    if index < 0 or index >= len(context.sequence):
        return None
    return index


def move_up(anchor_id: str, context: ThreadContext) -> Optional[int]:
    return move_focus(anchor_id, Direction.UP, context)


def move_down(anchor_id: str, context: ThreadContext) -> Optional[int]:
    return move_focus(anchor_id, Direction.DOWN, context)
