"""Tests for ConversationSummarizer."""

import pytest

from chat_memory.conversation import ConversationSummarizer
from chat_memory.errors import ConfigError
from chat_memory.models import Role, Turn


def _turn(role, content):
    return Turn(role=Role(role), content=content, timestamp=0)


class TestConversationSummarizer:
    """Test cases for ConversationSummarizer."""

    def test_summarize_empty_turns(self):
        """Summarizing nothing should return an empty string."""
        assert ConversationSummarizer().summarize([]) == ""

    def test_render_labels_roles(self):
        turns = [_turn("user", "Do you have red shoes?"), _turn("assistant", "Yes, size 42.")]

        rendered = ConversationSummarizer.render_turns(turns)

        assert rendered == "User: Do you have red shoes? Assistant: Yes, size 42."

    def test_summarize_truncates_to_chunk_limit(self):
        summarizer = ConversationSummarizer(chunk_limit=12)

        chunk = summarizer.summarize([_turn("assistant", "a long answer")])

        assert chunk == "Assistant: a"
        assert len(chunk) == 12

    def test_default_chunk_limit(self):
        summarizer = ConversationSummarizer()

        chunk = summarizer.summarize([_turn("user", "x" * 5000)])

        assert len(chunk) == 1200

    def test_fold_onto_empty_summary(self):
        summary = ConversationSummarizer()([_turn("user", "hi")], "")

        assert summary == "User: hi"

    def test_fold_appends_with_single_space(self):
        summary = ConversationSummarizer()([_turn("assistant", "ok")], "User: hi")

        assert summary == "User: hi Assistant: ok"

    def test_fold_strips_whitespace(self):
        summary = ConversationSummarizer()([_turn("user", "  ")], "")

        assert summary == "User:"

    def test_max_summary_chars_keeps_latest(self):
        summarizer = ConversationSummarizer(max_summary_chars=8)

        summary = summarizer([_turn("user", "newest")], "older stuff")

        assert summary == ": newest"

    def test_negative_limits_rejected(self):
        with pytest.raises(ConfigError):
            ConversationSummarizer(chunk_limit=-1)
        with pytest.raises(ConfigError):
            ConversationSummarizer(max_summary_chars=-5)
