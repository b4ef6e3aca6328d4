"""Cooperative cancellation for long inclusion walks."""

from __future__ import annotations

import threading
import time

from refcompose.domain.errors import Cancelled


class CancellationToken:
    """Signal checked by the resolver between repository lookups.

    A token trips either when ``cancel`` is called (from any thread) or when
    its optional ``timeout`` in seconds has elapsed since construction.
    """

    def __init__(self, *, timeout: float | None = None) -> None:
        if timeout is not None and timeout < 0:
            raise ValueError("Timeout must be non-negative")
        self._event = threading.Event()
        self._reason = "cancelled"
        self._deadline = None if timeout is None else time.monotonic() + timeout

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._reason = "deadline exceeded"
            self._event.set()
            return True
        return False

    def cancel(self, reason: str = "cancelled") -> None:
        self._reason = reason
        self._event.set()

    def check(self) -> None:
        """Raise ``Cancelled`` if the token has tripped."""

        if self.cancelled:
            raise Cancelled(self._reason)
