"""Load relation snapshots from files on disk"""

import json
from pathlib import Path
from typing import Any, Dict

import yaml

from .models import RelationSnapshot, ThreadMessage
from .parquet_relation_reader import ParquetRelationReader


def load_relations(path: str) -> RelationSnapshot:
    """Load a relation snapshot from Parquet, YAML or JSON

    YAML/JSON files hold a mapping with ``parent_of``, ``children_of`` and
    optionally ``messages`` (either id -> fields, or a list of message dicts).

    Raises:
        FileNotFoundError: If the path does not exist
        ValueError: For unknown extensions or malformed content
    """
    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Relation source not found: {source}")

    suffix = source.suffix.lower()
    if suffix == ".parquet" or source.is_dir():
        return ParquetRelationReader(str(source)).read_snapshot()

    with open(source, encoding="utf-8") as f:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported relation source: {source}")

    return snapshot_from_mapping(data)


def snapshot_from_mapping(data: Any) -> RelationSnapshot:
    """Build a snapshot from a parsed YAML/JSON document"""
    if not isinstance(data, dict):
        raise ValueError("Relation file must contain a mapping")

    parent_of = data.get("parent_of") or {}
    children_of = data.get("children_of") or {}
    if not isinstance(parent_of, dict) or not isinstance(children_of, dict):
        raise ValueError("'parent_of' and 'children_of' must be mappings")

    raw_messages = data.get("messages") or {}
    messages: Dict[str, ThreadMessage] = {}
    if isinstance(raw_messages, dict):
        for message_id, fields in raw_messages.items():
            fields = dict(fields or {})
            fields["message_id"] = str(message_id)
            messages[str(message_id)] = ThreadMessage(**fields)
    elif isinstance(raw_messages, list):
        for fields in raw_messages:
            message = ThreadMessage(**fields)
            messages[message.message_id] = message
    else:
        raise ValueError("'messages' must be a mapping or a list")

    # null/empty parents mark roots; null children are dropped
    return RelationSnapshot(
        parent_of={str(k): str(v) for k, v in parent_of.items() if v is not None and v != ""},
        children_of={
            str(k): [str(c) for c in (v or []) if c is not None and c != ""]
            for k, v in children_of.items()
        },
        messages=messages,
    )
