"""
Inbox Notifier — Dispatcher

Binds filesystem events to the reader, classifier, summary builder and
sinks. Two logical states:

  idle-watching --event--> filter
  filter: other file                      -> ignored
  filter: inbox file, created / modified  -> process
  filter: inbox file, moved onto it       -> process
  filter: inbox file, deleted / moved off -> ignored

process: re-read the whole file, classify against WatcherState (which is
replaced in the same locked step), build the notification text, notify,
emit the UI event. Bursts of events collapse into repeated re-reads;
the last read wins.

Nothing here raises into the watcher thread.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from inbox_notifier.classifier import DEFAULT_RESPONDER, ChangeSet
from inbox_notifier.event_bus import INBOX_UPDATED
from inbox_notifier.formatters import (
    DEFAULT_RESPONDER_NAME,
    REPLY_TITLE,
    build_new_items_summary,
    build_reply_summary,
    new_items_title,
)
from inbox_notifier.inbox import InboxSnapshot, read_inbox
from inbox_notifier.watcher_state import WatcherState

log = logging.getLogger("inbox_notifier.dispatcher")


class ChangeKind(Enum):
    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"
    MOVED = "moved"
    OTHER = "other"


class Notifier(Protocol):
    def notify(self, title: str, body: str) -> bool: ...


class UiEventSink(Protocol):
    def emit(self, event_name: str, data: dict | None = None) -> bool: ...


@dataclass
class DispatchResult:
    """What one processed event produced."""
    changes: ChangeSet = field(default_factory=ChangeSet)
    degraded: bool = False
    title: str | None = None
    body: str | None = None
    notified: bool = False
    ui_emitted: bool = False


def _normalize(path: Any) -> Path:
    return Path(os.fsdecode(path)).expanduser().resolve()


class InboxDispatcher:

    def __init__(
        self,
        inbox_path: Path | str,
        state: WatcherState,
        notifier: Notifier | None = None,
        ui_sink: UiEventSink | None = None,
        responder: str = DEFAULT_RESPONDER,
        responder_name: str = DEFAULT_RESPONDER_NAME,
        ui_event: str = INBOX_UPDATED,
    ) -> None:
        self._inbox_path = _normalize(inbox_path)
        self._state = state
        self._notifier = notifier
        self._ui_sink = ui_sink
        self._responder = responder
        self._responder_name = responder_name
        self._ui_event = ui_event

        self._stats = {
            "events_received": 0,
            "events_ignored": 0,
            "events_processed": 0,
            "degraded_reads": 0,
            "new_item_notices": 0,
            "reply_notices": 0,
            "notifications_sent": 0,
            "notification_failures": 0,
            "ui_events_emitted": 0,
            "ui_event_failures": 0,
            "errors": 0,
        }

    @property
    def inbox_path(self) -> Path:
        return self._inbox_path

    @property
    def state(self) -> WatcherState:
        return self._state

    def matches(self, path: Any) -> bool:
        if not path:
            return False
        try:
            return _normalize(path) == self._inbox_path
        except (OSError, ValueError):
            return False

    def on_event(
        self, kind: ChangeKind, src_path: Any, dest_path: Any = None
    ) -> DispatchResult | None:
        """
        Filter one filesystem event. Returns the processing result, or None
        when the event was ignored.
        """
        self._stats["events_received"] += 1

        if kind is ChangeKind.MOVED and self.matches(dest_path):
            log.debug(f"Inbox replaced by rename from {src_path}")
            return self.process()

        if not self.matches(src_path):
            self._stats["events_ignored"] += 1
            return None

        if kind in (ChangeKind.CREATED, ChangeKind.MODIFIED):
            return self.process()

        log.debug(f"Ignoring {kind.value} event on inbox file")
        self._stats["events_ignored"] += 1
        return None

    def process(self) -> DispatchResult:
        """Re-read the inbox and react to what changed. Never raises."""
        try:
            return self._process()
        except Exception as e:
            self._stats["errors"] += 1
            log.error(f"Unexpected error while processing inbox change: {e}", exc_info=True)
            return DispatchResult(degraded=True)

    def _process(self) -> DispatchResult:
        self._stats["events_processed"] += 1
        snapshot = read_inbox(self._inbox_path)

        if not snapshot.valid:
            self._stats["degraded_reads"] += 1
            log.debug("Inbox unreadable or malformed; keeping last known state")
            return DispatchResult(
                changes=ChangeSet(item_count=self._state.item_count),
                degraded=True,
            )

        changes = self._state.advance(snapshot, self._responder)
        result = DispatchResult(changes=changes)

        rendered = self._render(snapshot, changes)
        if rendered is not None:
            result.title, result.body = rendered
            log.info(f"{result.title}: {result.body!r:.120}")
            result.notified = self._notify(result.title, result.body)

        result.ui_emitted = self._emit(changes.item_count)
        return result

    def _render(self, snapshot: InboxSnapshot, changes: ChangeSet) -> tuple[str, str] | None:
        if changes.new_item_ids:
            self._stats["new_item_notices"] += 1
            return (
                new_items_title(len(changes.new_item_ids)),
                build_new_items_summary(snapshot.items, changes.new_item_ids),
            )
        if changes.reply_notice is not None:
            self._stats["reply_notices"] += 1
            notice = changes.reply_notice
            return (
                REPLY_TITLE,
                build_reply_summary(notice.item_id, notice.text, self._responder_name),
            )
        return None

    def _notify(self, title: str, body: str) -> bool:
        if self._notifier is None:
            return False
        try:
            delivered = bool(self._notifier.notify(title, body))
        except Exception as e:
            log.warning(f"Notification sink failed: {e}")
            delivered = False
        self._stats["notifications_sent" if delivered else "notification_failures"] += 1
        return delivered

    def _emit(self, item_count: int) -> bool:
        if self._ui_sink is None:
            return False
        try:
            emitted = bool(self._ui_sink.emit(self._ui_event, {"count": item_count}))
        except Exception as e:
            log.warning(f"UI event sink failed: {e}")
            emitted = False
        self._stats["ui_events_emitted" if emitted else "ui_event_failures"] += 1
        return emitted

    def get_stats(self) -> dict:
        return {
            **self._stats,
            "inbox_path": str(self._inbox_path),
            "state": self._state.get_stats(),
        }
