"""Read reply relations from flat Parquet message exports

Expects one row per message with at least ``message_id`` and a parent
column (``in_reply_to``/``parent_id``, or Slack-style ``thread_ts`` with
``is_thread_reply``). See RelationSnapshot.from_rows for the rules.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import pyarrow.parquet as pq

from .models import RelationSnapshot

logger = logging.getLogger(__name__)


class ParquetRelationReader:
    """Build relation snapshots from Parquet files

    Supports:
    - A single Parquet file
    - A directory tree of Parquet files (e.g. dt=YYYY-MM-DD/channel=name partitions)

    Example:
        >>> reader = ParquetRelationReader("cache/raw/messages")
        >>> snapshot = reader.read_snapshot()
        >>> snapshot.get_children_of("1697654321.123456")
    """

    def __init__(self, base_path: str):
        """Initialize reader

        Args:
            base_path: Parquet file, or directory searched recursively for *.parquet
        """
        self.base_path = Path(base_path)

    def read_rows(self) -> List[Dict[str, Any]]:
        """Read all message rows, in file order"""
        if not self.base_path.exists():
            logger.warning(f"No Parquet data at {self.base_path}")
            return []

        if self.base_path.is_file():
            files = [self.base_path]
        else:
            files = sorted(self.base_path.rglob("*.parquet"))

        rows: List[Dict[str, Any]] = []
        for parquet_file in files:
            table = pq.read_table(str(parquet_file))
            rows.extend(table.to_pylist())

        logger.debug(f"Read {len(rows)} message rows from {len(files)} Parquet file(s)")
        return rows

    def read_snapshot(self) -> RelationSnapshot:
        """Read all rows and build a relation snapshot"""
        return RelationSnapshot.from_rows(self.read_rows())
