"""thread-focus - Linear, navigable views of reply threads"""

from .models import (
    Direction,
    EntryKind,
    ThreadEntry,
    ThreadMessage,
    FetchPage,
    RelationSnapshot,
    ThreadContext,
)
from .ancestor_resolver import resolve_ancestors
from .descendant_flattener import resolve_descendants
from .thread_assembler import ThreadAssembler, assemble
from .navigation import move_focus, move_up, move_down
from .pagination import PaginationSession, PaginationError, ReplyFetcher
from .thread_session import ThreadViewSession, Viewport
from .thread_view_formatter import ThreadViewFormatter, ThreadRow
from .config import ThreadFocusConfig, load_config
from .parquet_relation_reader import ParquetRelationReader
from .relation_loader import load_relations, snapshot_from_mapping
from .slack_reply_fetcher import SlackReplyFetcher

__all__ = [
    "Direction",
    "EntryKind",
    "ThreadEntry",
    "ThreadMessage",
    "FetchPage",
    "RelationSnapshot",
    "ThreadContext",
    "resolve_ancestors",
    "resolve_descendants",
    "ThreadAssembler",
    "assemble",
    "move_focus",
    "move_up",
    "move_down",
    "PaginationSession",
    "PaginationError",
    "ReplyFetcher",
    "ThreadViewSession",
    "Viewport",
    "ThreadViewFormatter",
    "ThreadRow",
    "ThreadFocusConfig",
    "load_config",
    "ParquetRelationReader",
    "load_relations",
    "snapshot_from_mapping",
    "SlackReplyFetcher",
]
