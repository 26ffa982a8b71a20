"""Build chat-completion context messages from a stored session."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Sequence

from ..models import Role

if TYPE_CHECKING:
    from ..models import Turn
    from .session_store import SessionStore

LOGGER = logging.getLogger(__name__)

SUMMARY_PREFIX = "Conversation memory summary: "


class ContextBuilder:
    """Builds the message list handed to a chat model before it replies."""

    @staticmethod
    def build_prompt_messages(
        history: Sequence[Turn],
        summary: str = "",
    ) -> List[Dict[str, str]]:
        """
        Build context messages from a summary and the live history.

        The summary, when present, becomes a leading system message.
        User turns carry their timestamp so the model can reason about
        elapsed time; assistant turns are passed through unchanged.

        Args:
            history: Live turns, oldest first
            summary: Rolling summary of evicted turns (may be empty)

        Returns:
            List of {"role", "content"} dicts
        """
        messages: List[Dict[str, str]] = []
        if summary:
            messages.append({"role": "system", "content": f"{SUMMARY_PREFIX}{summary}"})

        for turn in history:
            content = turn.content
            if turn.role is Role.USER:
                content = f"[Time: {turn.timestamp}] {content}"
            messages.append({"role": turn.role.value, "content": content})

        return messages

    @staticmethod
    def for_user(store: SessionStore, user_id: str) -> List[Dict[str, str]]:
        """Read summary and history for ``user_id`` without touching its expiry."""
        summary = store.get_summary(user_id)
        history = store.get_history(user_id)
        LOGGER.debug(
            "Built context for %s: %d turn(s), summary=%s",
            user_id,
            len(history),
            bool(summary),
        )
        return ContextBuilder.build_prompt_messages(history, summary)
