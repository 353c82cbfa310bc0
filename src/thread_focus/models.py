"""Data model for thread views

Relation snapshots (who replies to whom), the messages they reference, and the
value types produced by the assembler and consumed by the render boundary.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field


DEFAULT_TOMBSTONE_SUFFIX = "-tombstone"
DEFAULT_PENDING_PREFIX = "末pending-"


class Direction(str, Enum):
    """Navigation direction within the assembled thread"""

    UP = "up"
    DOWN = "down"


class EntryKind(str, Enum):
    """What a sequence entry stands for at the render boundary"""

    NORMAL = "normal"
    TOMBSTONE = "tombstone"
    PENDING = "pending"


@dataclass(frozen=True)
class ThreadEntry:
    """Tagged message id, classified once when the thread is assembled"""

    kind: EntryKind
    message_id: str
    pending_prefix: str = DEFAULT_PENDING_PREFIX

    @classmethod
    def classify(
        cls,
        message_id: str,
        tombstone_suffix: str = DEFAULT_TOMBSTONE_SUFFIX,
        pending_prefix: str = DEFAULT_PENDING_PREFIX,
    ) -> "ThreadEntry":
        """Tag a raw message id by its reserved suffix/prefix

        Tombstone suffix wins over pending prefix when both are present.
        """
        if tombstone_suffix and message_id.endswith(tombstone_suffix):
            kind = EntryKind.TOMBSTONE
        elif pending_prefix and message_id.startswith(pending_prefix):
            kind = EntryKind.PENDING
        else:
            kind = EntryKind.NORMAL
        return cls(kind=kind, message_id=message_id, pending_prefix=pending_prefix)

    @property
    def idempotency_key(self) -> Optional[str]:
        """Key of the locally submitted reply behind a pending entry"""
        if self.kind is not EntryKind.PENDING:
            return None
        return self.message_id[len(self.pending_prefix):]


class ThreadMessage(BaseModel):
    """A message as far as the thread view cares about it"""

    message_id: str
    in_reply_to: Optional[str] = None
    reply_count: int = 0
    text: str = ""
    user_real_name: Optional[str] = None
    timestamp: Optional[str] = None  # ISO 8601

    class Config:
        extra = "allow"


@dataclass
class FetchPage:
    """One page of replies returned by a pagination fetcher"""

    appended_children: List[str]
    next_cursor: Optional[str] = None
    messages: List[ThreadMessage] = field(default_factory=list)


class RelationSnapshot(BaseModel):
    """Immutable view of the reply relations at one point in time

    Updates never mutate a snapshot; `with_page` returns a new one with a
    bumped `version`, which is what assembler caches key on.
    """

    parent_of: Dict[str, str] = Field(default_factory=dict)
    children_of: Dict[str, List[str]] = Field(default_factory=dict)
    messages: Dict[str, ThreadMessage] = Field(default_factory=dict)
    version: int = 0

    def get_parent_of(self, message_id: str) -> Optional[str]:
        return self.parent_of.get(message_id)

    def get_children_of(self, message_id: str) -> Optional[List[str]]:
        return self.children_of.get(message_id)

    def get_message(self, message_id: str) -> Optional[ThreadMessage]:
        return self.messages.get(message_id)

    def has_message(self, message_id: str) -> bool:
        """True if the id was ever fetched or appears anywhere in the relations"""
        if (
            message_id in self.messages
            or message_id in self.parent_of
            or message_id in self.children_of
        ):
            return True
        if message_id in self.parent_of.values():
            return True
        return any(message_id in children for children in self.children_of.values())

    def with_page(self, parent_id: str, page: FetchPage) -> "RelationSnapshot":
        """Return a new snapshot with a page of replies appended under parent_id

        Children already listed under the parent are not appended twice.
        """
        children_of = {key: list(value) for key, value in self.children_of.items()}
        parent_of = dict(self.parent_of)
        messages = dict(self.messages)

        siblings = children_of.setdefault(parent_id, [])
        for child_id in page.appended_children:
            if child_id not in siblings:
                siblings.append(child_id)
            parent_of.setdefault(child_id, parent_id)

        for message in page.messages:
            messages[message.message_id] = message

        return RelationSnapshot(
            parent_of=parent_of,
            children_of=children_of,
            messages=messages,
            version=self.version + 1,
        )

    @classmethod
    def from_rows(cls, rows: Iterable[Dict[str, Any]], version: int = 0) -> "RelationSnapshot":
        """Build a snapshot from flat message rows

        Each row needs a ``message_id``. The parent is taken from
        ``in_reply_to`` or ``parent_id``; failing that, Slack-style rows with
        ``is_thread_reply`` set use ``thread_ts``. Children are ordered by
        ``timestamp`` within each parent, ties keeping input order.

        Example:
            >>> snapshot = RelationSnapshot.from_rows([
            ...     {"message_id": "111", "timestamp": "2023-10-20T10:00:00Z"},
            ...     {"message_id": "112", "in_reply_to": "111", "timestamp": "2023-10-20T10:01:00Z"},
            ... ])
            >>> snapshot.get_children_of("111")
            ['112']
        """
        messages: Dict[str, ThreadMessage] = {}
        parent_of: Dict[str, str] = {}
        grouped: Dict[str, List[ThreadMessage]] = defaultdict(list)

        for row in rows:
            message_id = row.get("message_id")
            if not message_id:
                continue

            parent_id = row.get("in_reply_to") or row.get("parent_id")
            if not parent_id and row.get("is_thread_reply"):
                thread_ts = row.get("thread_ts")
                if thread_ts and thread_ts != message_id:
                    parent_id = thread_ts

            fields = {k: v for k, v in row.items() if v is not None}
            fields["in_reply_to"] = parent_id
            fields["reply_count"] = row.get("reply_count") or 0
            message = ThreadMessage(**fields)
            messages[message_id] = message

            if parent_id:
                parent_of[message_id] = parent_id
                grouped[parent_id].append(message)

        children_of = {
            parent_id: [
                m.message_id for m in sorted(replies, key=lambda m: m.timestamp or "")
            ]
            for parent_id, replies in grouped.items()
        }

        return cls(
            parent_of=parent_of,
            children_of=children_of,
            messages=messages,
            version=version,
        )


@dataclass
class ThreadContext:
    """Assembled thread around one focused message

    Attributes:
        focused_id: The message the view is centred on
        ancestors: Root-first chain above the focused message
        descendants: Pre-order flattened replies below it
        sequence: ancestors + [focused_id] + descendants (render order)
        entries: Tagged entry for every item of `sequence`
        snapshot_version: Version of the snapshot this was built from
    """

    focused_id: str
    ancestors: List[str]
    descendants: List[str]
    sequence: List[str]
    entries: List[ThreadEntry] = field(default_factory=list)
    snapshot_version: int = 0

    @property
    def focused_index(self) -> int:
        return len(self.ancestors)

    @property
    def has_ancestors(self) -> bool:
        return len(self.ancestors) > 0

    @property
    def has_descendants(self) -> bool:
        return len(self.descendants) > 0

    def index_of(self, message_id: str) -> Optional[int]:
        try:
            return self.sequence.index(message_id)
        except ValueError:
            return None

    def __len__(self) -> int:
        return len(self.sequence)
