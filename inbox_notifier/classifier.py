"""
Inbox Notifier — Change classifier

Diffs the current inbox read against the previous one.

Two kinds of change are recognised:
  - new items: ids present now that were absent from the previous read
  - a new responder reply: the first unread item carrying a reply from the
    responder identity that has not been seen before

Reply scanning only runs when there are no new items; a new item already
explains the file change.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass, field

from inbox_notifier.inbox import InboxItem

DEFAULT_RESPONDER = "claude"

# Replies are identified within their item: (item id, reply id)
ReplyKey = tuple[str, str]


@dataclass(frozen=True)
class ReplyNotice:
    item_id: str
    reply_id: str
    author: str
    text: str


@dataclass(frozen=True)
class ChangeSet:
    new_item_ids: list[str] = field(default_factory=list)
    reply_notice: ReplyNotice | None = None
    item_count: int = 0

    @property
    def has_new_items(self) -> bool:
        return bool(self.new_item_ids)

    @property
    def is_empty(self) -> bool:
        return not self.new_item_ids and self.reply_notice is None


def find_new_item_ids(current_ids: Iterable[str], previous_ids: Iterable[str]) -> list[str]:
    """Ids in current_ids not present in previous_ids, in current read order."""
    previous = set(previous_ids)
    return [item_id for item_id in current_ids if item_id not in previous]


def responder_reply_ids(items: Iterable[InboxItem], responder: str = DEFAULT_RESPONDER) -> set[ReplyKey]:
    """Keys of all replies authored by the responder, read or unread."""
    return {
        (item.id, reply.id)
        for item in items
        for reply in item.replies
        if reply.author == responder
    }


def find_reply_notice(
    items: Iterable[InboxItem],
    seen_reply_ids: Collection[ReplyKey] = (),
    responder: str = DEFAULT_RESPONDER,
) -> ReplyNotice | None:
    """First unseen responder reply on an unread item, in file order."""
    for item in items:
        if item.read:
            continue
        for reply in item.replies:
            if reply.author == responder and (item.id, reply.id) not in seen_reply_ids:
                return ReplyNotice(
                    item_id=item.id,
                    reply_id=reply.id,
                    author=reply.author,
                    text=reply.text,
                )
    return None


def classify(
    items: Sequence[InboxItem],
    current_ids: Sequence[str],
    previous_ids: Iterable[str],
    seen_reply_ids: Collection[ReplyKey] = (),
    responder: str = DEFAULT_RESPONDER,
) -> ChangeSet:
    new_ids = find_new_item_ids(current_ids, previous_ids)
    notice = None
    if not new_ids:
        notice = find_reply_notice(items, seen_reply_ids, responder)
    return ChangeSet(new_item_ids=new_ids, reply_notice=notice, item_count=len(current_ids))
