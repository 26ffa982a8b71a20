"""Conversation management - session state, context, and summarization."""

from .context_builder import ContextBuilder
from .session_store import SessionStore
from .summarizer import ConversationSummarizer, SummaryStrategy

__all__ = [
    "ContextBuilder",
    "SessionStore",
    "ConversationSummarizer",
    "SummaryStrategy",
]
