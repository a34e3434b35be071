"""
Inbox Notifier — Notification text

Title and body rendering for new-item and reply notifications.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from inbox_notifier.inbox import InboxItem

log = logging.getLogger("inbox_notifier.formatters")

ELLIPSIS = "..."
SINGLE_ITEM_LIMIT = 120
LIST_ITEM_LIMIT = 60
REPLY_LIMIT = 80
LISTED_ITEMS = 2

REPLY_TITLE = "New reply in inbox"
FALLBACK_BODY = "New items in your inbox"
DEFAULT_RESPONDER_NAME = "Claude"


def truncate(text: str, limit: int) -> str:
    """
    Cut text to limit characters and append "...".
    Slicing a str works on code points, so multi-byte characters stay whole.
    """
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def new_items_title(count: int) -> str:
    return f"{count} new inbox item{'s' if count > 1 else ''}"


def build_new_items_summary(items: Sequence[InboxItem], new_ids: Iterable[str]) -> str:
    """
    Body for a new-items notification.

    1 item  -> its text
    2 items -> "• a\\n• b"
    3+      -> first two bulleted plus "+N more"
    """
    wanted = set(new_ids)
    new_items = [item for item in items if item.id in wanted]

    if not new_items:
        return FALLBACK_BODY

    if len(new_items) == 1:
        return truncate(new_items[0].text, SINGLE_ITEM_LIMIT)

    lines = [f"• {truncate(item.text, LIST_ITEM_LIMIT)}" for item in new_items[:LISTED_ITEMS]]
    remaining = len(new_items) - LISTED_ITEMS
    if remaining > 0:
        lines.append(f"+{remaining} more")
    return "\n".join(lines)


def build_reply_summary(
    item_id: str,
    reply_text: str,
    responder_name: str = DEFAULT_RESPONDER_NAME,
) -> str:
    log.debug(f"Building reply summary for item {item_id}")
    return f"{responder_name} replied: {truncate(reply_text, REPLY_LIMIT)}"
