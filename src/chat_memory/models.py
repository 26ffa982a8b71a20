"""Domain models for Chat Memory."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from threading import Lock
from typing import List, Optional

from .errors import InvalidRoleError
from .timers import TimerHandle


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"

    @property
    def label(self) -> str:
        """Capitalized name used when rendering a turn ("User", "Assistant")."""
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: Role | str) -> Role:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise InvalidRoleError(
                f"role must be one of {[r.value for r in cls]}, got {value!r}"
            ) from exc


@dataclass(frozen=True)
class Turn:
    role: Role
    content: str
    timestamp: int  # epoch milliseconds

    def render(self) -> str:
        return f"{self.role.label}: {self.content}"


@dataclass
class SessionRecord:
    """Mutable per-user state owned by the store.

    The expiry timer lives on the record so it is torn down together with
    the session. ``closed`` is set once the record has been removed from the
    store; writers that still hold a reference must not touch it afterwards.
    ``generation`` identifies the current expiry timer and is bumped before
    each new timer is scheduled.
    """

    history: List[Turn] = field(default_factory=list)
    summary: str = ""
    timer: Optional[TimerHandle] = None
    generation: int = 0
    closed: bool = False
    lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    def cancel_timer(self) -> None:
        timer, self.timer = self.timer, None
        if timer is not None:
            timer.cancel()
