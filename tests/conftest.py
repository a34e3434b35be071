"""
Pytest Configuration & Shared Fixtures
"""

import json
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest


# ============================================================
# Pytest Configuration
# ============================================================

def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers",
        "unit: Unit tests (fast, isolated)"
    )
    config.addinivalue_line(
        "markers",
        "integration: Integration tests (real filesystem watcher)"
    )
    config.addinivalue_line(
        "markers",
        "slow: Slow tests (skip with -m 'not slow')"
    )


# ============================================================
# Configuration Fixtures
# ============================================================

@pytest.fixture
def test_config(temp_dir: Path) -> dict:
    """Minimal test configuration."""
    return {
        "system": {"name": "inbox-notifier", "version": "test"},
        "paths": {
            "inbox": str(temp_dir / "inbox.json"),
            "outbox": str(temp_dir / "io" / "outbox.txt"),
        },
        "watcher": {
            "responder": "claude",
            "responder_name": "Claude",
            "ui_event": "inbox-updated",
        },
        "notifications": {
            "desktop": False,
            "outbox": True,
        },
        "logging": {
            "level": "ERROR",  # Quiet during tests
            "dir": str(temp_dir / "logs"),
        },
    }


# ============================================================
# Temporary Directory Fixtures
# ============================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory, cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def inbox_path(temp_dir: Path) -> Path:
    return temp_dir / "inbox.json"


@pytest.fixture
def write_inbox(inbox_path: Path) -> Callable[[list], Path]:
    """Write a list of item dicts as the inbox file."""
    def _write(items: list) -> Path:
        inbox_path.write_text(json.dumps({"items": items}), encoding="utf-8")
        return inbox_path
    return _write


# ============================================================
# Fake sinks
# ============================================================

class RecordingNotifier:
    def __init__(self, fail: bool = False) -> None:
        self.calls: list[tuple[str, str]] = []
        self.fail = fail

    def notify(self, title: str, body: str) -> bool:
        self.calls.append((title, body))
        if self.fail:
            raise RuntimeError("notification backend down")
        return True


class RecordingUiSink:
    def __init__(self, fail: bool = False) -> None:
        self.events: list[tuple[str, dict]] = []
        self.fail = fail

    def emit(self, event_name: str, data: dict | None = None) -> bool:
        self.events.append((event_name, data or {}))
        if self.fail:
            raise RuntimeError("ui bus gone")
        return True


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def ui_sink() -> RecordingUiSink:
    return RecordingUiSink()
