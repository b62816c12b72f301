"""Thread-safe "current value plus updates" subject.

New subscribers receive the current value first, then every later ``set()``
in order, exactly once. Callbacks never run under the observable's lock:
values are queued and one thread at a time drains the queue. Usually that is
the thread calling ``set()``; if another thread is already delivering, the
new value is handed to it and ``set()`` returns at once. A callback that
calls ``set()`` on the same observable has its value delivered after the
current round, not nested inside it.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Observable(Generic[T]):
    """Holds one value and notifies subscribers on every change."""

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: list[Callable[[T], None]] = []
        self._pending: deque[tuple[list[Callable[[T], None]], T]] = deque()
        self._draining = False
        self._lock = threading.Lock()

    @property
    def value(self) -> T:
        with self._lock:
            return self._value

    def set(self, value: T) -> None:
        """Replace the value and notify every subscriber, even if unchanged."""
        with self._lock:
            self._value = value
            self._pending.append((list(self._subscribers), value))
        self._drain()

    def update(self, fn: Callable[[T], T]) -> T:
        """Atomically replace the value with ``fn(current)``; returns the new value.

        ``fn`` runs under the lock and must not touch this observable.
        """
        with self._lock:
            new = fn(self._value)
            self._value = new
            self._pending.append((list(self._subscribers), new))
        self._drain()
        return new

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""
        with self._lock:
            self._subscribers.append(callback)
            self._pending.append(([callback], self._value))
        self._drain()

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _drain(self) -> None:
        with self._lock:
            if self._draining:
                return
            self._draining = True
        while True:
            with self._lock:
                if not self._pending:
                    self._draining = False
                    return
                callbacks, value = self._pending.popleft()
            for callback in callbacks:
                self._deliver(callback, value)

    @staticmethod
    def _deliver(callback: Callable[[T], None], value: T) -> None:
        try:
            callback(value)
        except Exception:
            logger.exception("Observable subscriber %r failed", callback)
