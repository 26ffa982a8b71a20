"""In-memory per-user chat session store with rolling summaries."""

from .config import StoreSettings, load_settings
from .conversation import ContextBuilder, ConversationSummarizer, SessionStore
from .errors import (
    ChatMemoryError,
    ConfigError,
    InvalidRoleError,
    InvalidUserIdError,
)
from .logging_setup import configure_logging
from .models import Role, Turn
from .timers import ThreadingTimer

__all__ = [
    "StoreSettings",
    "load_settings",
    "ContextBuilder",
    "ConversationSummarizer",
    "SessionStore",
    "ChatMemoryError",
    "ConfigError",
    "InvalidRoleError",
    "InvalidUserIdError",
    "configure_logging",
    "Role",
    "Turn",
    "ThreadingTimer",
]
