"""Search-as-you-type plumbing: debounce keystrokes, then gate the query.

Input changes closer than ``delay_seconds`` apart collapse into a single
call carrying the latest value. The gate then trims the query, drops it if
it is shorter than the minimum, and drops it if it equals the last query
that went through.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_DEBOUNCE_SECONDS = 0.3
DEFAULT_MIN_QUERY_LENGTH = 2


class Debouncer(Generic[T]):
    """Calls ``callback(value)`` once input has been quiet for ``delay_seconds``."""

    def __init__(
        self,
        callback: Callable[[T], None],
        delay_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self._callback = callback
        self.delay_seconds = delay_seconds
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending: tuple[T] | None = None

    def submit(self, value: T) -> None:
        """Record ``value`` and restart the quiet-period timer."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = (value,)
            self._timer = threading.Timer(self.delay_seconds, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        """Deliver the pending value now instead of waiting for the timer."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        self._fire()

    def cancel(self) -> None:
        """Drop the pending value without delivering it."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = None

    @property
    def has_pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def _fire(self) -> None:
        with self._lock:
            pending, self._pending = self._pending, None
            self._timer = None
        if pending is not None:
            self._callback(pending[0])


class QueryGate:
    """Lets a search query through only if it is long enough and new."""

    def __init__(self, min_length: int = DEFAULT_MIN_QUERY_LENGTH) -> None:
        self.min_length = min_length
        self._last: str | None = None
        self._lock = threading.Lock()

    def admit(self, raw: str) -> str | None:
        """Return the trimmed query if it should be searched, else None."""
        query = raw.strip()
        if len(query) < self.min_length:
            return None
        with self._lock:
            if query == self._last:
                return None
            self._last = query
        return query

    def reset(self) -> None:
        """Forget the last query so the same text can be searched again."""
        with self._lock:
            self._last = None
