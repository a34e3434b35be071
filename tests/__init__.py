"""
Test Suite for Inbox Notifier

Structure:
  tests/
    ├── unit/                  # Reader, classifier, formatters, state, sinks, bus
    ├── test_dispatcher.py     # Event filtering and processing
    ├── test_file_monitor.py   # watchdog translation + live observer (integration, slow)
    ├── test_main.py           # Config and wiring
    └── conftest.py            # Pytest configuration

Run:
  pytest tests/
  pytest tests/ -m "not slow"
"""
