"""Fetch thread replies page by page from the Slack API"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from .models import FetchPage, ThreadMessage
from .pagination import PaginationError

logger = logging.getLogger(__name__)


class SlackReplyFetcher:
    """ReplyFetcher backed by conversations.replies

    Slack threads are one level deep, so every reply is appended as a child
    of the thread parent. The parent row Slack returns with each page is
    passed along in ``messages`` but never as a child.

    Example:
        >>> fetcher = SlackReplyFetcher(AsyncWebClient(token=token), "C0123456789")
        >>> page = await fetcher.fetch_next("1697654321.123456", None)
        >>> page.appended_children
        ['1697654400.123457', '1697654500.123458']
    """

    def __init__(self, client: AsyncWebClient, channel_id: str, page_size: int = 200):
        self.client = client
        self.channel_id = channel_id
        self.page_size = page_size

    async def fetch_next(self, thread_id: str, cursor: Optional[str]) -> FetchPage:
        """Fetch one page of replies

        Args:
            thread_id: Thread parent ts
            cursor: Cursor from the previous page (None for the first page)

        Raises:
            PaginationError: If the Slack API call fails
        """
        params: Dict[str, Any] = {
            "channel": self.channel_id,
            "ts": thread_id,
            "limit": self.page_size,
        }
        if cursor:
            params["cursor"] = cursor

        try:
            result = await self.client.conversations_replies(**params)
        except SlackApiError as e:
            raise PaginationError(
                f"Slack API error fetching replies for {thread_id}: {e.response['error']}"
            ) from e

        data = result.data if hasattr(result, "data") and isinstance(result.data, dict) else {}
        raw_messages: List[Dict[str, Any]] = data.get("messages", [])

        messages = [self._to_thread_message(raw) for raw in raw_messages if raw.get("ts")]
        children = [m.message_id for m in messages if m.message_id != thread_id]

        next_cursor = (data.get("response_metadata") or {}).get("next_cursor") or None

        logger.debug(
            f"Fetched {len(children)} replies for {thread_id} in {self.channel_id}"
        )
        return FetchPage(appended_children=children, next_cursor=next_cursor, messages=messages)

    @staticmethod
    def _to_thread_message(raw: Dict[str, Any]) -> ThreadMessage:
        ts = raw["ts"]
        thread_ts = raw.get("thread_ts")
        profile = raw.get("user_profile") or {}

        try:
            timestamp = datetime.fromtimestamp(float(ts), tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        except (TypeError, ValueError):
            timestamp = None

        return ThreadMessage(
            message_id=ts,
            in_reply_to=thread_ts if thread_ts and thread_ts != ts else None,
            reply_count=raw.get("reply_count", 0) or 0,
            text=raw.get("text", "") or "",
            user_real_name=profile.get("real_name"),
            timestamp=timestamp,
            user_id=raw.get("user"),
        )
