"""Fold evicted conversation turns into a rolling text summary."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from ..config import DEFAULT_SUMMARY_CHUNK_LIMIT
from ..errors import ConfigError

if TYPE_CHECKING:
    from ..models import Turn

LOGGER = logging.getLogger(__name__)

# (evicted turns, previous summary) -> new summary
SummaryStrategy = Callable[[Sequence["Turn"], str], str]


class ConversationSummarizer:
    """Deterministic truncating summarizer.

    Evicted turns are rendered as ``"User: ..."`` / ``"Assistant: ..."``,
    joined with single spaces and cut to ``chunk_limit`` characters. The
    chunk is then appended to whatever summary already exists.

    By default the summary grows without bound, one chunk per overflow.
    Pass ``max_summary_chars`` to keep only the most recent characters.
    """

    def __init__(
        self,
        chunk_limit: int = DEFAULT_SUMMARY_CHUNK_LIMIT,
        max_summary_chars: Optional[int] = None,
    ) -> None:
        if chunk_limit < 0:
            raise ConfigError(f"chunk_limit must be >= 0, got {chunk_limit}")
        if max_summary_chars is not None and max_summary_chars < 0:
            raise ConfigError(f"max_summary_chars must be >= 0, got {max_summary_chars}")
        self.chunk_limit = chunk_limit
        self.max_summary_chars = max_summary_chars

    def __call__(self, turns: Sequence[Turn], previous_summary: str = "") -> str:
        chunk = self.summarize(turns)
        folded = f"{previous_summary} {chunk}".strip()
        if self.max_summary_chars is not None and len(folded) > self.max_summary_chars:
            LOGGER.debug(
                "Summary capped from %d to %d characters",
                len(folded),
                self.max_summary_chars,
            )
            folded = folded[len(folded) - self.max_summary_chars :].lstrip()
        return folded

    def summarize(self, turns: Sequence[Turn]) -> str:
        """Render ``turns`` and truncate the result to ``chunk_limit``."""
        return self.render_turns(turns)[: self.chunk_limit]

    @staticmethod
    def render_turns(turns: Sequence[Turn]) -> str:
        return " ".join(turn.render() for turn in turns)
