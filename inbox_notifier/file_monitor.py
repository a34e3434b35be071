"""
Inbox Notifier — FileMonitor
Filesystem watcher for the inbox file using watchdog.

Subscribes non-recursively to the directory holding the inbox file and
hands every event to the dispatcher, which filters it down to the inbox.
watchdog runs its own background observer thread, which blocks waiting
for events and runs the dispatcher synchronously.
"""

from __future__ import annotations

import logging
from pathlib import Path

from watchdog.events import (
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from inbox_notifier.dispatcher import ChangeKind, InboxDispatcher
from inbox_notifier.exceptions import WatcherSetupError

log = logging.getLogger("inbox_notifier.file_monitor")


class _InboxEventHandler(FileSystemEventHandler):
    """Translates watchdog events into dispatcher calls."""

    def __init__(self, dispatcher: InboxDispatcher) -> None:
        super().__init__()
        self._dispatcher = dispatcher

    def on_created(self, event: FileCreatedEvent) -> None:     # type: ignore[override]
        if not event.is_directory:
            self._dispatcher.on_event(ChangeKind.CREATED, event.src_path)

    def on_modified(self, event: FileModifiedEvent) -> None:   # type: ignore[override]
        if not event.is_directory:
            self._dispatcher.on_event(ChangeKind.MODIFIED, event.src_path)

    def on_deleted(self, event: FileDeletedEvent) -> None:     # type: ignore[override]
        if not event.is_directory:
            self._dispatcher.on_event(ChangeKind.DELETED, event.src_path)

    def on_moved(self, event: FileMovedEvent) -> None:         # type: ignore[override]
        if not event.is_directory:
            self._dispatcher.on_event(ChangeKind.MOVED, event.src_path, event.dest_path)


class FileMonitor:
    """
    Starts a watchdog Observer on the inbox directory.
    start() raises WatcherSetupError when the directory cannot be watched.
    """

    def __init__(self, dispatcher: InboxDispatcher) -> None:
        self._dispatcher = dispatcher
        self._watch_path = dispatcher.inbox_path.parent
        self._observer: Observer | None = None

    @property
    def watch_path(self) -> Path:
        return self._watch_path

    def start(self) -> None:
        if not self._watch_path.is_dir():
            raise WatcherSetupError(str(self._watch_path), "directory does not exist")

        observer = Observer()
        try:
            observer.schedule(
                _InboxEventHandler(self._dispatcher),
                str(self._watch_path),
                recursive=False,
            )
            observer.start()
        except OSError as e:
            raise WatcherSetupError(str(self._watch_path), str(e)) from e

        self._observer = observer
        log.info(f"FileMonitor started. Watching: {self._dispatcher.inbox_path}")

    def is_alive(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

    def stop(self) -> None:
        if self._observer and self._observer.is_alive():
            self._observer.stop()
            self._observer.join(timeout=5)
            log.info("FileMonitor stopped.")
        self._observer = None
