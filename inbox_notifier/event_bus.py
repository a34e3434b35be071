"""
Inbox Notifier — EventBus

Async pub/sub used as the UI event sink. The watcher thread does not run
on the event loop, so it publishes through BusEventSink, which schedules
the coroutine on the host loop and returns without waiting.

Features:
  - Concurrent handler execution
  - Per-handler error isolation and tracking
  - Health reporting
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Any, Callable, Coroutine

log = logging.getLogger("inbox_notifier.event_bus")

INBOX_UPDATED = "inbox-updated"

# Handler is an async function that receives event data
Handler = Callable[[dict], Coroutine[Any, Any, None]]


@dataclass
class ErrorRecord:
    """Record of a handler error for tracking."""
    timestamp: float
    event_name: str
    handler_name: str
    error: Exception


class EventBus:
    """
    Usage:
        bus = EventBus()
        bus.subscribe("inbox-updated", on_inbox_updated)
        await bus.publish("inbox-updated", {"count": 3})
    """

    def __init__(self, max_error_history: int = 100) -> None:
        self._subscribers: dict[str, list[Handler]] = defaultdict(list)
        self._error_history: deque[ErrorRecord] = deque(maxlen=max_error_history)
        self._handler_error_counts: dict[str, int] = defaultdict(int)
        self._published = 0

    def subscribe(self, event_name: str, handler: Handler) -> None:
        """Register an async handler for the given event name."""
        self._subscribers[event_name].append(handler)
        log.debug(f"Subscribed '{handler.__name__}' to '{event_name}'")

    async def publish(self, event_name: str, data: dict | None = None) -> None:
        """
        Publish an event to all subscribers concurrently.
        A failing handler is recorded and never affects the others.
        """
        if data is None:
            data = {}

        self._published += 1
        handlers = self._subscribers.get(event_name, [])
        if not handlers:
            log.debug(f"Event '{event_name}' published but no subscribers.")
            return

        results = await asyncio.gather(
            *[h(data) for h in handlers],
            return_exceptions=True,
        )

        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                self._handle_error(event_name, handler, result)

    def _handle_error(self, event_name: str, handler: Handler, error: Exception) -> None:
        handler_name = handler.__name__
        self._error_history.append(ErrorRecord(
            timestamp=time.time(),
            event_name=event_name,
            handler_name=handler_name,
            error=error,
        ))
        self._handler_error_counts[handler_name] += 1
        log.error(
            f"Handler '{handler_name}' failed on '{event_name}'. "
            f"Total failures: {self._handler_error_counts[handler_name]}",
            exc_info=error,
        )

    def get_health_report(self) -> dict:
        one_hour_ago = time.time() - 3600
        errors_last_hour = [e for e in self._error_history if e.timestamp > one_hour_ago]
        return {
            "published": self._published,
            "total_errors": len(self._error_history),
            "errors_last_hour": len(errors_last_hour),
            "failing_handlers": dict(self._handler_error_counts),
            "recent_errors": [
                {
                    "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime(e.timestamp)),
                    "event_name": e.event_name,
                    "handler_name": e.handler_name,
                    "error": str(e.error),
                }
                for e in list(self._error_history)[-5:]
            ],
        }


class BusEventSink:
    """Thread-safe, fire-and-forget bridge from the watcher thread into the bus."""

    def __init__(self, bus: EventBus, loop: asyncio.AbstractEventLoop) -> None:
        self._bus = bus
        self._loop = loop

    def emit(self, event_name: str, data: dict | None = None) -> bool:
        if self._loop.is_closed():
            log.warning(f"Event loop closed; dropping '{event_name}'")
            return False
        coro = self._bus.publish(event_name, data)
        try:
            asyncio.run_coroutine_threadsafe(coro, self._loop)
        except RuntimeError as e:
            coro.close()
            log.warning(f"Could not schedule '{event_name}': {e}")
            return False
        return True
