"""
Inbox Notifier — Inbox reader

Parses the watched inbox file into a minimal structural view.

The reader is total: a missing file, an unreadable file and content that
is not the expected shape all come back as the canonical empty snapshot
(valid=False), never as an exception.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

log = logging.getLogger("inbox_notifier.inbox")


@dataclass(frozen=True)
class Reply:
    id: str
    author: str
    text: str


@dataclass(frozen=True)
class InboxItem:
    id: str
    text: str
    author: str = ""
    read: bool = False
    replies: tuple[Reply, ...] = ()


@dataclass(frozen=True)
class InboxSnapshot:
    """
    Result of one file read.

    valid is False only for the degraded empty result; a well-formed file
    with no items is a valid empty snapshot.
    """
    items: tuple[InboxItem, ...] = ()
    valid: bool = True

    @property
    def item_ids(self) -> list[str]:
        return [item.id for item in self.items]

    @property
    def item_count(self) -> int:
        return len(self.items)

    @classmethod
    def empty(cls) -> InboxSnapshot:
        return cls(items=(), valid=False)

    def as_tuple(self) -> tuple[int, list[str], list[InboxItem]]:
        """(item_count, item_ids, items), the reader's contract shape."""
        return self.item_count, self.item_ids, list(self.items)


class _ShapeError(ValueError):
    pass


def _require_str(obj: dict, key: str, where: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str):
        raise _ShapeError(f"{where}: '{key}' must be a string")
    return value


def _optional_str(obj: dict, key: str, where: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _ShapeError(f"{where}: '{key}' must be a string")
    return value


def _parse_reply(raw: Any, where: str) -> Reply:
    if not isinstance(raw, dict):
        raise _ShapeError(f"{where}: reply must be an object")
    return Reply(
        id=_require_str(raw, "id", where),
        author=_require_str(raw, "author", where),
        text=_require_str(raw, "text", where),
    )


def _parse_item(raw: Any, index: int) -> InboxItem:
    where = f"items[{index}]"
    if not isinstance(raw, dict):
        raise _ShapeError(f"{where}: item must be an object")

    read = raw.get("read", False)
    if read is None:
        read = False
    if not isinstance(read, bool):
        raise _ShapeError(f"{where}: 'read' must be a boolean")

    raw_replies = raw.get("replies")
    if raw_replies is None:
        raw_replies = []
    if not isinstance(raw_replies, list):
        raise _ShapeError(f"{where}: 'replies' must be an array")

    return InboxItem(
        id=_require_str(raw, "id", where),
        text=_require_str(raw, "text", where),
        author=_optional_str(raw, "author", where),
        read=read,
        replies=tuple(
            _parse_reply(r, f"{where}.replies[{i}]") for i, r in enumerate(raw_replies)
        ),
    )


def parse_inbox(content: str | bytes | None) -> InboxSnapshot:
    """Parse raw inbox content. Anything malformed yields InboxSnapshot.empty()."""
    if content is None:
        return InboxSnapshot.empty()
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as e:
            log.debug(f"Inbox content is not UTF-8: {e}")
            return InboxSnapshot.empty()

    try:
        data = json.loads(content)
    except ValueError as e:
        log.debug(f"Inbox content is not valid JSON: {e}")
        return InboxSnapshot.empty()

    if not isinstance(data, dict) or not isinstance(data.get("items"), list):
        log.debug("Inbox content has no 'items' array")
        return InboxSnapshot.empty()

    try:
        items = tuple(_parse_item(raw, i) for i, raw in enumerate(data["items"]))
    except _ShapeError as e:
        log.debug(f"Inbox content does not conform: {e}")
        return InboxSnapshot.empty()

    return InboxSnapshot(items=items)


def read_inbox(path: Path | str) -> InboxSnapshot:
    """Read and parse the inbox file; never raises."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        log.debug(f"Inbox file not found: {path}")
        return InboxSnapshot.empty()
    except (OSError, UnicodeDecodeError) as e:
        log.debug(f"Cannot read inbox file {path}: {e}")
        return InboxSnapshot.empty()
    return parse_inbox(content)
