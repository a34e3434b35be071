"""
Unit Tests for notification text
"""

import pytest
from inbox_notifier.formatters import (
    FALLBACK_BODY,
    REPLY_TITLE,
    build_new_items_summary,
    build_reply_summary,
    new_items_title,
    truncate,
)
from inbox_notifier.inbox import InboxItem


def items_from(*texts):
    return [InboxItem(id=f"id{i}", text=t) for i, t in enumerate(texts)]


class TestTruncate:
    """Test truncation."""

    @pytest.mark.parametrize("text, limit", [("", 5), ("abc", 5), ("abcde", 5)])
    def test_short_text_unchanged(self, text, limit):
        """Test short text is returned as is."""
        assert truncate(text, limit) == text

    @pytest.mark.parametrize("text, limit", [("abcdef", 5), ("x" * 500, 120), ("hello world", 1)])
    def test_long_text_cut_with_ellipsis(self, text, limit):
        """Test long text is cut and ends with an ellipsis."""
        result = truncate(text, limit)

        assert len(result) <= limit + 3
        assert result.endswith("...")
        assert result[:limit] == text[:limit]

    def test_multibyte_characters_stay_whole(self):
        """Test truncation keeps multi-byte characters whole."""
        text = "ü" * 10 + "漢字" * 10

        result = truncate(text, 11)

        assert result == "ü" * 10 + "漢" + "..."


class TestTitles:
    """Test titles."""

    def test_singular(self):
        """Test the singular title."""
        assert new_items_title(1) == "1 new inbox item"

    def test_plural(self):
        """Test the plural title."""
        assert new_items_title(2) == "2 new inbox items"
        assert new_items_title(5) == "5 new inbox items"

    def test_reply_title_differs(self):
        """Test the reply title differs from the new-item title."""
        assert REPLY_TITLE != new_items_title(1)


class TestNewItemsSummary:
    """Test new-item body aggregation."""

    def test_single_item_full_text(self):
        """Test one new item shows its full text."""
        items = items_from("Buy milk")

        assert build_new_items_summary(items, ["id0"]) == "Buy milk"

    def test_single_item_truncated_at_120(self):
        """Test one new item is cut at 120 characters."""
        items = items_from("y" * 200)

        assert build_new_items_summary(items, ["id0"]) == "y" * 120 + "..."

    def test_two_items_bulleted(self):
        """Test two new items are bulleted."""
        items = items_from("Call mom", "Fix bug")

        assert build_new_items_summary(items, ["id0", "id1"]) == "• Call mom\n• Fix bug"

    def test_two_items_truncated_at_60(self):
        """Test bulleted items are cut at 60 characters."""
        items = items_from("a" * 61, "b" * 60)

        body = build_new_items_summary(items, ["id0", "id1"])

        assert body == f"• {'a' * 60}...\n• {'b' * 60}"

    def test_five_items_shows_two_and_more(self):
        """Test five new items show two bullets and "+3 more"."""
        items = items_from("one", "two", "three", "four", "z" * 70)

        body = build_new_items_summary(items, [i.id for i in items])

        assert body == "• one\n• two\n+3 more"

    def test_only_new_ids_are_listed(self):
        """Test only new items are listed."""
        items = items_from("old", "new one", "new two", "new three")

        body = build_new_items_summary(items, ["id1", "id2", "id3"])

        assert body == "• new one\n• new two\n+1 more"

    def test_unknown_ids_fall_back(self):
        """Test unknown ids fall back to the generic body."""
        assert build_new_items_summary(items_from("x"), ["missing"]) == FALLBACK_BODY


class TestReplySummary:
    """Test reply body."""

    def test_reply_body(self):
        """Test the reply body."""
        assert build_reply_summary("a", "All done") == "Claude replied: All done"

    def test_reply_truncated_at_80(self):
        """Test reply text is cut at 80 characters."""
        body = build_reply_summary("a", "r" * 100)

        assert body == "Claude replied: " + "r" * 80 + "..."

    def test_custom_responder_name(self):
        """Test a custom responder display name."""
        assert build_reply_summary("a", "ok", responder_name="Bot") == "Bot replied: ok"
