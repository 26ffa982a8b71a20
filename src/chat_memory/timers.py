"""One-shot cancelable timers used for session expiry."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Protocol

LOGGER = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


class ThreadingTimer:
    """Daemon ``threading.Timer`` that starts as soon as it is created.

    Cancelling after the callback has fired, or cancelling twice, does nothing.
    """

    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self._timer = threading.Timer(delay, self._run, args=(callback,))
        self._timer.daemon = True
        self._timer.start()

    @staticmethod
    def _run(callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception:
            LOGGER.exception("Expiry callback failed")

    def cancel(self) -> None:
        self._timer.cancel()
