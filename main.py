"""
Inbox Notifier — Entry Point
Watches the inbox file and raises notifications for new items and replies.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from pathlib import Path

import yaml

from inbox_notifier.dispatcher import InboxDispatcher
from inbox_notifier.event_bus import INBOX_UPDATED, BusEventSink, EventBus
from inbox_notifier.exceptions import WatcherSetupError
from inbox_notifier.file_monitor import FileMonitor
from inbox_notifier.inbox import read_inbox
from inbox_notifier.notifications import build_notifier
from inbox_notifier.watcher_state import WatcherState


# ────────────────────────────────────────────────────────────────────
ROOT_DIR    = Path(__file__).parent.resolve()
CONFIG_PATH = ROOT_DIR / "config.yaml"


# ────────────────────────────────────────────────────────────────────
# Config / logging
# ────────────────────────────────────────────────────────────────────
def load_yaml(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Required file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def setup_logging(cfg: dict) -> logging.Logger:
    log_dir = Path(cfg["logging"]["dir"])
    log_dir.mkdir(parents=True, exist_ok=True)
    log_level = getattr(logging, cfg["logging"].get("level", "INFO").upper(), logging.INFO)
    fmt     = "%(asctime)s [%(levelname)s] %(name)s — %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    logging.basicConfig(
        level=log_level, format=fmt, datefmt=datefmt,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_dir / "inbox_notifier.log", encoding="utf-8"),
        ],
    )
    return logging.getLogger("inbox_notifier")


def inbox_path_from(cfg: dict) -> Path:
    return Path(cfg["paths"]["inbox"]).expanduser()


def ensure_directories(cfg: dict) -> None:
    inbox_path_from(cfg).parent.mkdir(parents=True, exist_ok=True)
    Path(cfg["paths"]["outbox"]).expanduser().parent.mkdir(parents=True, exist_ok=True)


# ────────────────────────────────────────────────────────────────────
# EventBus handler factories
# ────────────────────────────────────────────────────────────────────
def make_ui_handlers(logger: logging.Logger) -> dict:
    async def on_inbox_updated(data: dict) -> None:
        logger.info(f"[EVENT] {INBOX_UPDATED} → {data.get('count', '?')} item(s)")
    return {INBOX_UPDATED: on_inbox_updated}


def build_dispatcher(
    cfg: dict, bus: EventBus, loop: asyncio.AbstractEventLoop
) -> InboxDispatcher:
    watcher = cfg.get("watcher", {})
    responder = watcher.get("responder", "claude")
    inbox_path = inbox_path_from(cfg)

    state = WatcherState.from_snapshot(read_inbox(inbox_path), responder)
    return InboxDispatcher(
        inbox_path=inbox_path,
        state=state,
        notifier=build_notifier(cfg),
        ui_sink=BusEventSink(bus, loop),
        responder=responder,
        responder_name=watcher.get("responder_name", "Claude"),
        ui_event=watcher.get("ui_event", INBOX_UPDATED),
    )


# ────────────────────────────────────────────────────────────────────
# Async main
# ────────────────────────────────────────────────────────────────────
async def async_main(cfg: dict, logger: logging.Logger) -> int:
    loop = asyncio.get_running_loop()

    # 1. EventBus
    bus = EventBus()
    for event_name, handler in make_ui_handlers(logger).items():
        bus.subscribe(event_name, handler)

    # 2. Dispatcher, seeded from the current file
    dispatcher = build_dispatcher(cfg, bus, loop)
    logger.info(
        f"Baseline: {dispatcher.state.item_count} item(s) in {dispatcher.inbox_path}"
    )

    # 3. FileMonitor
    monitor = FileMonitor(dispatcher)
    try:
        monitor.start()
    except WatcherSetupError as e:
        logger.error(f"Inbox watcher could not start: {e}")
        return 1

    logger.info("Running... (Ctrl+C to stop)")

    stop_event = asyncio.Event()

    def _signal_handler():
        logger.info("Shutdown signal received.")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            signal.signal(sig, lambda s, f: loop.call_soon_threadsafe(stop_event.set))

    await stop_event.wait()

    # 4. Shutdown
    monitor.stop()
    logger.info(f"Dispatcher stats: {dispatcher.get_stats()}")
    logger.info(f"EventBus health: {bus.get_health_report()}")
    logger.info("Inbox notifier shut down cleanly.")
    return 0


def main() -> None:
    cfg = load_yaml(CONFIG_PATH)
    ensure_directories(cfg)

    logger = setup_logging(cfg)
    logger.info("=" * 60)
    logger.info("  Inbox Notifier — starting up")
    logger.info(f"  Version   : {cfg.get('system', {}).get('version', '?')}")
    logger.info(f"  Inbox     : {inbox_path_from(cfg)}")
    logger.info(f"  Responder : {cfg.get('watcher', {}).get('responder', 'claude')}")
    logger.info("=" * 60)

    try:
        code = asyncio.run(async_main(cfg, logger))
    except KeyboardInterrupt:
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    main()
