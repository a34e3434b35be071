"""
Inbox Notifier — Notification sinks

Best-effort delivery of (title, body) notifications. Every sink reports
success as a bool and never raises; failures are logged and dropped.

Sinks:
  - OutboxNotifier: appends a timestamped line to an outbox text file
  - DesktopNotifier: Windows toast via win10toast
  - MultiNotifier: fans out to several sinks
"""

from __future__ import annotations

import logging
import platform
import time
from abc import ABC, abstractmethod
from pathlib import Path

log = logging.getLogger("inbox_notifier.notifications")


class BaseNotifier(ABC):
    """Subclasses implement _send(); notify() wraps it so nothing propagates."""

    name = "base"

    def __init__(self) -> None:
        self._stats = {"sent": 0, "failed": 0}

    def notify(self, title: str, body: str) -> bool:
        try:
            delivered = self._send(title, body)
        except Exception as e:
            log.warning(f"{self.name} notification failed: {e}")
            delivered = False

        self._stats["sent" if delivered else "failed"] += 1
        return delivered

    @abstractmethod
    def _send(self, title: str, body: str) -> bool:
        """Deliver one notification; return False when it was not shown."""

    def get_stats(self) -> dict:
        return {"name": self.name, **self._stats}


class OutboxNotifier(BaseNotifier):
    """Append notifications to a text file, one line per notification."""

    name = "outbox"

    def __init__(self, outbox_path: Path | str) -> None:
        super().__init__()
        self._outbox_path = Path(outbox_path)

    def _send(self, title: str, body: str) -> bool:
        self._outbox_path.parent.mkdir(parents=True, exist_ok=True)
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
        flat_body = body.replace("\n", " | ")
        with self._outbox_path.open("a", encoding="utf-8") as f:
            f.write(f"[{timestamp}] 📥 {title}: {flat_body}\n")
        log.debug(f"Outbox notification written: {title}")
        return True


class DesktopNotifier(BaseNotifier):
    """Windows 10/11 toast notifications. Reports failure on other platforms."""

    name = "desktop"

    def __init__(self, duration: int = 5) -> None:
        super().__init__()
        self._duration = duration
        self._toaster = None

    def _send(self, title: str, body: str) -> bool:
        if platform.system() != "Windows":
            log.debug("Desktop notifications only work on Windows")
            return False

        if self._toaster is None:
            try:
                from win10toast import ToastNotifier
            except ImportError:
                log.warning("Install win10toast: pip install win10toast")
                return False
            self._toaster = ToastNotifier()

        self._toaster.show_toast(title, body, duration=self._duration, threaded=True)
        return True


class MultiNotifier(BaseNotifier):
    """Delivers to every child; succeeds if at least one child did."""

    name = "multi"

    def __init__(self, notifiers: list[BaseNotifier]) -> None:
        super().__init__()
        self._notifiers = list(notifiers)

    def _send(self, title: str, body: str) -> bool:
        results = [n.notify(title, body) for n in self._notifiers]
        return any(results)

    def get_stats(self) -> dict:
        return {
            **super().get_stats(),
            "children": [n.get_stats() for n in self._notifiers],
        }


def build_notifier(cfg: dict) -> BaseNotifier:
    """Build the notifier combination described by the 'notifications' config section."""
    section = cfg.get("notifications", {})
    notifiers: list[BaseNotifier] = []

    if section.get("desktop", True):
        notifiers.append(DesktopNotifier(duration=int(section.get("desktop_duration", 5))))
    if section.get("outbox", True):
        notifiers.append(OutboxNotifier(Path(cfg["paths"]["outbox"]).expanduser()))

    if not notifiers:
        log.warning("No notification sinks enabled; notifications will be dropped")
    return MultiNotifier(notifiers)
