"""Inbox change detection and notification dispatch."""

from inbox_notifier.classifier import ChangeSet, ReplyNotice, classify
from inbox_notifier.dispatcher import ChangeKind, DispatchResult, InboxDispatcher
from inbox_notifier.event_bus import BusEventSink, EventBus
from inbox_notifier.exceptions import InboxNotifierError, WatcherSetupError
from inbox_notifier.file_monitor import FileMonitor
from inbox_notifier.inbox import InboxItem, InboxSnapshot, Reply, parse_inbox, read_inbox
from inbox_notifier.watcher_state import WatcherState

__all__ = [
    "BusEventSink",
    "ChangeKind",
    "ChangeSet",
    "DispatchResult",
    "EventBus",
    "FileMonitor",
    "InboxDispatcher",
    "InboxItem",
    "InboxNotifierError",
    "InboxSnapshot",
    "Reply",
    "ReplyNotice",
    "WatcherSetupError",
    "WatcherState",
    "classify",
    "parse_inbox",
    "read_inbox",
]
