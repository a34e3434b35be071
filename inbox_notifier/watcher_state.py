"""
Inbox Notifier — WatcherState

Last observed inbox: item count, item ids and the (item id, reply id)
keys of responder replies already accounted for. Shared between the
watcher thread and any reader, so every access goes through the lock.
The lock covers only the compare-and-update step; file reads and
notifications happen outside it.
"""

from __future__ import annotations

import logging
import threading

from inbox_notifier.classifier import (
    DEFAULT_RESPONDER,
    ChangeSet,
    ReplyKey,
    classify,
    responder_reply_ids,
)
from inbox_notifier.inbox import InboxSnapshot

log = logging.getLogger("inbox_notifier.watcher_state")


class WatcherState:

    def __init__(
        self,
        item_count: int = 0,
        item_ids: list[str] | None = None,
        seen_reply_ids: set[ReplyKey] | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._item_count = item_count
        self._item_ids: list[str] = list(item_ids or [])
        self._seen_reply_ids: set[ReplyKey] = set(seen_reply_ids or ())
        self._updates = 0

    @classmethod
    def from_snapshot(
        cls, snapshot: InboxSnapshot, responder: str = DEFAULT_RESPONDER
    ) -> WatcherState:
        """
        Startup baseline. A degraded snapshot is already empty, so an
        absent or malformed file gives an empty baseline.
        """
        return cls(
            item_count=snapshot.item_count,
            item_ids=snapshot.item_ids,
            seen_reply_ids=responder_reply_ids(snapshot.items, responder),
        )

    def advance(self, snapshot: InboxSnapshot, responder: str = DEFAULT_RESPONDER) -> ChangeSet:
        """
        Classify snapshot against the stored state and replace the state
        with it, atomically.

        A degraded snapshot leaves the state untouched and reports no
        changes, so a half-written file cannot make every item look new.
        """
        if not snapshot.valid:
            return ChangeSet(item_count=self.item_count)

        current_ids = snapshot.item_ids
        reply_ids = responder_reply_ids(snapshot.items, responder)

        with self._lock:
            changes = classify(
                snapshot.items,
                current_ids,
                self._item_ids,
                self._seen_reply_ids,
                responder,
            )
            self._item_count = snapshot.item_count
            self._item_ids = current_ids
            self._seen_reply_ids = reply_ids
            self._updates += 1

        log.debug(
            f"State advanced: {snapshot.item_count} item(s), "
            f"{len(changes.new_item_ids)} new, reply={'yes' if changes.reply_notice else 'no'}"
        )
        return changes

    @property
    def item_count(self) -> int:
        with self._lock:
            return self._item_count

    @property
    def item_ids(self) -> list[str]:
        with self._lock:
            return list(self._item_ids)

    @property
    def seen_reply_ids(self) -> set[ReplyKey]:
        with self._lock:
            return set(self._seen_reply_ids)

    def get_stats(self) -> dict:
        with self._lock:
            return {
                "item_count": self._item_count,
                "tracked_ids": len(self._item_ids),
                "seen_replies": len(self._seen_reply_ids),
                "updates": self._updates,
            }
