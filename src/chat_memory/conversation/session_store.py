"""Manage per-user conversation sessions."""

from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Callable, Dict, Optional

from ..config import StoreSettings
from ..errors import InvalidUserIdError
from ..models import Role, SessionRecord, Turn
from ..timers import ThreadingTimer, TimerFactory
from .summarizer import ConversationSummarizer, SummaryStrategy

LOGGER = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class SessionStore:
    """Thread-safe in-memory store of recent turns and rolling summaries per user.

    Every recorded turn restarts the user's inactivity timer; when it fires
    the whole session is dropped. Turns beyond ``retention_limit`` are
    evicted oldest-first and folded into the summary.

    ``_lock`` only guards the user id -> record mapping. All per-user
    mutation happens under the record's own lock, and ``_lock`` is never
    held while waiting for a record lock.
    """

    def __init__(
        self,
        settings: Optional[StoreSettings] = None,
        *,
        summarizer: Optional[SummaryStrategy] = None,
        timer_factory: Optional[TimerFactory] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self._settings = settings or StoreSettings()
        self._summarizer: SummaryStrategy = summarizer or ConversationSummarizer(
            chunk_limit=self._settings.summary_chunk_limit,
            max_summary_chars=self._settings.max_summary_chars,
        )
        self._timer_factory: TimerFactory = timer_factory or ThreadingTimer
        self._clock = clock or _now_ms
        self._sessions: Dict[str, SessionRecord] = {}
        self._lock = Lock()

    @property
    def settings(self) -> StoreSettings:
        return self._settings

    def record_turn(self, user_id: str, role: Role | str, content: str) -> None:
        """Append a turn for ``user_id`` and restart its inactivity timer."""
        if not isinstance(user_id, str) or not user_id:
            raise InvalidUserIdError("user_id must be a non-empty string")
        parsed_role = Role.parse(role)
        if not isinstance(content, str):
            raise TypeError(f"content must be a string, got {type(content).__name__}")

        while True:
            record = self._get_or_create(user_id)
            with record.lock:
                if record.closed:
                    # Cleared or expired between lookup and lock; start over.
                    continue
                record.history.append(
                    Turn(role=parsed_role, content=content, timestamp=self._clock())
                )
                self._apply_retention_locked(user_id, record)
                self._reset_timer_locked(user_id, record)
                return

    def get_history(self, user_id: str) -> tuple[Turn, ...]:
        record = self._lookup(user_id)
        if record is None:
            return ()
        with record.lock:
            if record.closed:
                return ()
            return tuple(record.history)

    def get_summary(self, user_id: str) -> str:
        record = self._lookup(user_id)
        if record is None:
            return ""
        with record.lock:
            if record.closed:
                return ""
            return record.summary

    def clear_session(self, user_id: str) -> None:
        """Drop the session for ``user_id``. Unknown users are ignored."""
        with self._lock:
            record = self._sessions.pop(user_id, None)
        if record is None:
            return
        with record.lock:
            self._close_locked(record)
        LOGGER.info("Cleared session for %s", user_id)

    def clear_all(self) -> int:
        """Remove all sessions, cancelling their timers."""
        with self._lock:
            records = list(self._sessions.values())
            self._sessions.clear()
        for record in records:
            with record.lock:
                self._close_locked(record)
        if records:
            LOGGER.info("Cleared %d session(s)", len(records))
        return len(records)

    def has_session(self, user_id: str) -> bool:
        return self._lookup(user_id) is not None

    def active_users(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _lookup(self, user_id: str) -> Optional[SessionRecord]:
        with self._lock:
            return self._sessions.get(user_id)

    def _get_or_create(self, user_id: str) -> SessionRecord:
        with self._lock:
            record = self._sessions.get(user_id)
            if record is None:
                record = SessionRecord()
                self._sessions[user_id] = record
                LOGGER.info("Session created for %s", user_id)
            return record

    def _apply_retention_locked(self, user_id: str, record: SessionRecord) -> None:
        overflow = len(record.history) - self._settings.retention_limit
        if overflow <= 0:
            return
        evicted = record.history[:overflow]
        del record.history[:overflow]
        record.summary = self._summarizer(evicted, record.summary)
        LOGGER.debug(
            "Folded %d turn(s) into summary for %s (summary now %d chars)",
            len(evicted),
            user_id,
            len(record.summary),
        )

    def _reset_timer_locked(self, user_id: str, record: SessionRecord) -> None:
        record.cancel_timer()
        record.generation += 1
        generation = record.generation

        def _on_expire() -> None:
            self._expire(user_id, record, generation)

        # The timer may fire before the factory returns; ``generation`` is
        # already bound so the callback still matches this record.
        record.timer = self._timer_factory(self._settings.inactivity_timeout, _on_expire)
        LOGGER.debug(
            "Expiry for %s scheduled in %.1fs", user_id, self._settings.inactivity_timeout
        )

    def _expire(self, user_id: str, record: SessionRecord, generation: int) -> None:
        with record.lock:
            if record.closed or record.generation != generation:
                # Superseded by a newer turn, or already torn down.
                return
            self._close_locked(record)
            with self._lock:
                if self._sessions.get(user_id) is record:
                    del self._sessions[user_id]
        LOGGER.info(
            "Session for %s expired after %.0fs of inactivity",
            user_id,
            self._settings.inactivity_timeout,
        )

    @staticmethod
    def _close_locked(record: SessionRecord) -> None:
        record.closed = True
        record.cancel_timer()
        record.history.clear()
        record.summary = ""
