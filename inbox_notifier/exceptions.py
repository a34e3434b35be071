"""
Inbox Notifier — Exceptions

Only watcher setup failures are allowed to reach the host process.
Read, parse and sink failures are absorbed where they happen.
"""

from __future__ import annotations


class InboxNotifierError(Exception):
    """Base class for inbox notifier errors."""


class WatcherSetupError(InboxNotifierError):
    """The inbox directory could not be subscribed to."""

    def __init__(self, watch_path: str, reason: str) -> None:
        self.watch_path = watch_path
        self.reason = reason
        super().__init__(f"Cannot watch '{watch_path}': {reason}")
