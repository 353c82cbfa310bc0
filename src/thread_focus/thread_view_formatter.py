"""Turn an assembled thread into render rows and a readable text view

The rows are what a virtualized list would render: ancestors above the
focused message, replies below it, and loading placeholders when the focused
message is known to have replies that have not been fetched yet.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from .models import EntryKind, RelationSnapshot, ThreadContext, ThreadEntry

ROLE_ANCESTOR = "ancestor"
ROLE_FOCUSED = "focused"
ROLE_DESCENDANT = "descendant"
ROLE_PLACEHOLDER = "placeholder"


@dataclass
class ThreadRow:
    """One rendered row

    Attributes:
        index: Position in the rendered list
        role: ancestor, focused, descendant or placeholder
        entry: Tagged message id (None for placeholders)
    """
    index: int
    role: str
    entry: Optional[ThreadEntry] = None


class ThreadViewFormatter:
    """Format an assembled thread for display

    Example:
        >>> formatter = ThreadViewFormatter()
        >>> rows = formatter.build_rows(context, snapshot)
        >>> print(formatter.format(context, snapshot))
    """

    def __init__(self, placeholder_limit: int = 20):
        """Initialize formatter

        Args:
            placeholder_limit: Cap on loading placeholders shown for unfetched replies
        """
        self.placeholder_limit = placeholder_limit

    def build_rows(self, context: ThreadContext, snapshot: RelationSnapshot) -> List[ThreadRow]:
        """Lay out rows for the virtualized list

        Rows for real entries keep the entry's linear index, so navigation
        results can be used directly. Placeholders only appear when there are
        no descendants, so they never shift a real row.
        """
        rows: List[ThreadRow] = []
        offset = context.focused_index

        for i, entry in enumerate(context.entries):
            if i < offset:
                role = ROLE_ANCESTOR
            elif i == offset:
                role = ROLE_FOCUSED
            else:
                role = ROLE_DESCENDANT
            rows.append(ThreadRow(index=i, role=role, entry=entry))

        if not context.has_descendants:
            for _ in range(self._expected_replies(context, snapshot)):
                rows.append(ThreadRow(index=len(rows), role=ROLE_PLACEHOLDER))

        return rows

    def format(self, context: ThreadContext, snapshot: RelationSnapshot, title: Optional[str] = None) -> str:
        """Format the thread into a text view

        Args:
            context: Assembled thread
            snapshot: Snapshot the context was built from (for message content)
            title: Optional header title (defaults to the focused id)

        Returns:
            Multi-line text view
        """
        rows = self.build_rows(context, snapshot)
        lines: List[str] = []

        lines.append("=" * 80)
        lines.append(f"🧵 THREAD: {title or context.focused_id}")
        lines.append(f"📍 FOCUSED: #{context.focused_index} of {len(context)}")
        lines.append("=" * 80)
        lines.append("")

        for row in rows:
            lines.append(self._format_row(row, snapshot))

            if row.role == ROLE_FOCUSED:
                lines.append("-" * 60)

        lines.append("")
        lines.extend(self._format_summary(context, rows))
        return "\n".join(lines)

    def _expected_replies(self, context: ThreadContext, snapshot: RelationSnapshot) -> int:
        message = snapshot.get_message(context.focused_id)
        if message is None or message.reply_count <= 0:
            return 0
        return min(message.reply_count, self.placeholder_limit)

    def _format_row(self, row: ThreadRow, snapshot: RelationSnapshot) -> str:
        if row.role == ROLE_PLACEHOLDER:
            return "    ⏳ (loading reply...)"

        entry = row.entry
        if entry.kind is EntryKind.TOMBSTONE:
            return f"[{row.index}] 🪦 Reply unavailable"
        if entry.kind is EntryKind.PENDING:
            return f"[{row.index}] 📤 Sending reply ({entry.idempotency_key})"

        message = snapshot.get_message(entry.message_id)
        user_name = (message.user_real_name if message else None) or "Unknown User"
        timestamp = self._format_timestamp(message.timestamp if message else None)
        text = message.text if message else ""

        if row.role == ROLE_FOCUSED:
            header = f"[{row.index}] 💬 {user_name} at {timestamp}:"
            indent = "   "
        elif row.role == ROLE_ANCESTOR:
            header = f"[{row.index}] ↑ {user_name} at {timestamp}:"
            indent = "   "
        else:
            header = f"[{row.index}]   ↳ {user_name} at {timestamp}:"
            indent = "       "

        lines = [header]
        if text:
            lines.append(f"{indent}{text}")
        return "\n".join(lines)

    def _format_summary(self, context: ThreadContext, rows: List[ThreadRow]) -> List[str]:
        placeholders = sum(1 for row in rows if row.role == ROLE_PLACEHOLDER)
        tombstones = sum(1 for entry in context.entries if entry.kind is EntryKind.TOMBSTONE)

        lines = []
        lines.append("📊 THREAD SUMMARY:")
        lines.append(f"   • Ancestors: {len(context.ancestors)}")
        lines.append(f"   • Replies: {len(context.descendants)}")
        if tombstones:
            lines.append(f"   • Unavailable replies: {tombstones}")
        if placeholders:
            lines.append(f"   • Replies still loading: {placeholders}")
        return lines

    def _format_timestamp(self, timestamp_str: Optional[str]) -> str:
        """Format ISO timestamp as YYYY-MM-DD HH:MM"""
        if not timestamp_str:
            return "unknown time"

        try:
            ts = timestamp_str.replace("Z", "+00:00")
            dt = datetime.fromisoformat(ts)
            return dt.strftime("%Y-%m-%d %H:%M")
        except (ValueError, AttributeError):
            # Fallback for malformed timestamps
            return timestamp_str[:16] if len(timestamp_str) >= 16 else timestamp_str
