"""Test fixtures for thread assembly and navigation tests"""

from typing import List

from thread_focus import FetchPage, RelationSnapshot, ThreadMessage


def sample_message(message_id: str, in_reply_to: str = None, reply_count: int = 0, **extra) -> ThreadMessage:
    """Create a ThreadMessage with predictable content"""
    return ThreadMessage(
        message_id=message_id,
        in_reply_to=in_reply_to,
        reply_count=reply_count,
        text=f"Message {message_id}",
        user_real_name="John Doe",
        timestamp="2023-10-20T10:00:00Z",
        **extra,
    )


def sample_example_snapshot() -> RelationSnapshot:
    """The worked example thread

    A <- B <- C <- focus, with focus -> [D, E] and D -> [F]
    """
    parent_of = {"B": "A", "C": "B", "focus": "C", "D": "focus", "E": "focus", "F": "D"}
    children_of = {"A": ["B"], "B": ["C"], "C": ["focus"], "focus": ["D", "E"], "D": ["F"]}
    messages = {
        message_id: sample_message(message_id, parent_of.get(message_id))
        for message_id in ["A", "B", "C", "focus", "D", "E", "F"]
    }
    messages["focus"] = sample_message("focus", "C", reply_count=2)
    return RelationSnapshot(parent_of=parent_of, children_of=children_of, messages=messages)


def sample_root_with_unloaded_replies(reply_count: int = 3) -> RelationSnapshot:
    """A root message that reports replies none of which are loaded yet"""
    return RelationSnapshot(
        messages={"root": sample_message("root", reply_count=reply_count)},
    )


def sample_cyclic_snapshot() -> RelationSnapshot:
    """X and Y reply to each other, and each lists the other as a child"""
    return RelationSnapshot(
        parent_of={"X": "Y", "Y": "X"},
        children_of={"X": ["Y"], "Y": ["X"]},
        messages={"X": sample_message("X", "Y"), "Y": sample_message("Y", "X")},
    )


def sample_page(children: List[str], next_cursor: str = None, parent_id: str = "focus") -> FetchPage:
    """Create a FetchPage of replies under parent_id"""
    return FetchPage(
        appended_children=list(children),
        next_cursor=next_cursor,
        messages=[sample_message(child, parent_id) for child in children],
    )
