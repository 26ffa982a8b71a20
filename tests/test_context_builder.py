"""Tests for ContextBuilder."""

from chat_memory.config import StoreSettings
from chat_memory.conversation import ContextBuilder, SessionStore
from chat_memory.models import Role, Turn


class TestContextBuilder:
    """Test cases for ContextBuilder."""

    def test_empty_history_no_summary(self):
        """No history and no summary gives no messages."""
        assert ContextBuilder.build_prompt_messages([], "") == []

    def test_user_turns_carry_timestamp(self):
        history = [
            Turn(Role.USER, "Do you deliver?", 1000),
            Turn(Role.ASSISTANT, "Yes, everywhere.", 2000),
        ]

        messages = ContextBuilder.build_prompt_messages(history)

        assert messages == [
            {"role": "user", "content": "[Time: 1000] Do you deliver?"},
            {"role": "assistant", "content": "Yes, everywhere."},
        ]

    def test_summary_becomes_system_message(self):
        history = [Turn(Role.USER, "And the price?", 5)]

        messages = ContextBuilder.build_prompt_messages(history, "User: red shoes")

        assert messages[0] == {
            "role": "system",
            "content": "Conversation memory summary: User: red shoes",
        }
        assert messages[1]["role"] == "user"
        assert len(messages) == 2

    def test_for_user_reads_store(self, timers, clock):
        store = SessionStore(StoreSettings(retention_limit=2), timer_factory=timers, clock=clock)
        store.record_turn("u1", "user", "one")
        store.record_turn("u1", "assistant", "two")
        store.record_turn("u1", "user", "three")
        scheduled = len(timers.timers)

        messages = ContextBuilder.for_user(store, "u1")

        assert messages[0]["content"] == "Conversation memory summary: User: one"
        assert [m["role"] for m in messages] == ["system", "assistant", "user"]
        assert messages[2]["content"].endswith("three")
        assert len(timers.timers) == scheduled

    def test_for_unknown_user(self, store):
        assert ContextBuilder.for_user(store, "ghost") == []
