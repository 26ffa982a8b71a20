"""Custom exception hierarchy for Chat Memory."""


class ChatMemoryError(Exception):
    """Base error type."""


class ConfigError(ChatMemoryError):
    pass


class InvalidRoleError(ChatMemoryError, ValueError):
    """Raised when a turn is recorded with a role other than user/assistant."""


class InvalidUserIdError(ChatMemoryError, ValueError):
    """Raised when a turn is recorded without a user identifier."""
