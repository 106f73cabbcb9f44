"""Live line notifications.

A LineEvent is fired from the reader threads while the child is still running,
so subscribers see each line as it is produced rather than after the run.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)

LineCallback = Callable[[str], None]


class LineEvent:
    """Thread-safe list of callbacks that each receive one output line."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._lock = threading.Lock()
        self._subscribers: list[LineCallback] = []

    def subscribe(self, callback: LineCallback) -> LineCallback:
        """Register a callback. Returns it so this can be used as a decorator."""
        if not callable(callback):
            error_msg = f"callback must be callable, got {type(callback).__name__}"
            raise TypeError(error_msg)
        with self._lock:
            self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback: LineCallback) -> None:
        with self._lock:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                logger.debug("Callback %r was not subscribed to %s", callback, self.name)

    def emit(self, line: str) -> None:
        """Deliver a line to every subscriber on the calling thread.

        A subscriber that raises is logged and skipped so the stream keeps
        draining.
        """
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(line)
            except Exception as e:  # noqa: BLE001
                logger.warning("%s subscriber %r failed: %s", self.name, callback, e)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)
