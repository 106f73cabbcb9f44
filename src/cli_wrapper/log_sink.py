"""Log file shared by the stdout and stderr readers.

Both reader threads write through the same LogSink, so every write and the
final close happen under one lock. Line-to-line interleaving between the two
streams is not defined: stderr output may be written before stdout output that
the child produced first.
"""

from __future__ import annotations

import logging
import threading
from typing import IO

logger = logging.getLogger(__name__)


class LogSink:
    """Line-oriented writer around an open text stream."""

    def __init__(self, stream: IO[str], path: str | None = None) -> None:
        self._stream: IO[str] | None = stream
        self._lock = threading.Lock()
        self.path = path

    @classmethod
    def open(cls, path: str) -> LogSink:
        """Create or truncate ``path`` for writing.

        Raises:
            OSError: If the file cannot be opened.
        """
        stream = open(path, "w", encoding="utf-8")  # noqa: SIM115
        return cls(stream, path=path)

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._stream is None

    def write_line(self, line: str) -> None:
        """Append one line. Failures are logged, never raised."""
        with self._lock:
            if self._stream is None:
                return
            try:
                self._stream.write(line + "\n")
            except (OSError, ValueError) as e:
                logger.warning("Failed to write to log %s: %s", self.path, e)

    def close(self, outcome: str) -> None:
        """Write the exit footer, flush and close.

        Each step is attempted even if an earlier one failed, so as much as
        possible ends up on disk without an error reaching the caller. Safe to
        call more than once; only the first call has any effect.
        """
        with self._lock:
            stream = self._stream
            if stream is None:
                return
            self._stream = None

            try:
                stream.write(f"Process exited with {outcome}\n")
            except Exception as e:  # noqa: BLE001
                logger.warning("Failed to write log footer to %s: %s", self.path, e)
            try:
                stream.flush()
            except Exception as e:  # noqa: BLE001
                logger.warning("Failed to flush log %s: %s", self.path, e)
            try:
                stream.close()
            except Exception as e:  # noqa: BLE001
                logger.warning("Failed to close log %s: %s", self.path, e)

    def close_with_exit_code(self, exit_code: int) -> None:
        self.close(f"exit code = {exit_code}")

    def close_with_exception(self, error: BaseException) -> None:
        self.close(f"exception: {str(error) or type(error).__name__}")
