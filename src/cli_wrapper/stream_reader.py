"""Stream reader module.

This module contains the StreamReader class, which drains one redirected pipe of
a child process on a dedicated thread so the child never blocks on a full pipe
buffer.
"""

from __future__ import annotations

import logging
import threading
import warnings
from collections.abc import Callable
from typing import IO

logger = logging.getLogger(__name__)


class StreamReader:
    """Dedicated reader that drains one output pipe and forwards its lines.

    Lines are forwarded in the order the child wrote them, with the trailing
    newline removed. Blank lines are forwarded as empty strings.
    """

    def __init__(
        self,
        stream: IO[str],
        name: str,
        on_line: Callable[[str], None],
    ) -> None:
        self._stream = stream
        self.name = name
        self._on_line = on_line
        self._thread: threading.Thread | None = None
        self.line_count = 0

    def start(self) -> None:
        """Start draining on a daemon thread."""
        assert self._thread is None, "StreamReader already started"
        self._thread = threading.Thread(target=self.run, name=f"StreamReader-{self.name}", daemon=True)
        self._thread.start()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the reader to finish. Returns True if it has finished."""
        if self._thread is None:
            return True
        self._thread.join(timeout=timeout)
        return not self._thread.is_alive()

    def _process_lines(self) -> None:
        while True:
            line = self._stream.readline()
            if not line:  # EOF reached
                break
            self.line_count += 1
            self._on_line(line.rstrip("\r\n"))

    def _handle_io_error(self, e: ValueError | OSError) -> None:
        # Closed descriptors are expected when the run is torn down early
        error_str = str(e)
        if any(msg in error_str for msg in ["closed file", "Bad file descriptor"]):
            warnings.warn(f"{self.name} reader encountered closed file: {e}", stacklevel=2)
        else:
            logger.warning("%s reader encountered error: %s", self.name, e)

    def _close_stream(self) -> None:
        if self._stream.closed:
            return
        try:
            self._stream.close()
        except (ValueError, OSError) as err:
            warnings.warn(f"{self.name} reader failed to close pipe: {err}", stacklevel=2)

    def run(self) -> None:
        """Read lines until EOF, then close the pipe."""
        try:
            self._process_lines()
        except (ValueError, OSError) as e:
            self._handle_io_error(e)
        finally:
            self._close_stream()
            logger.debug("%s reader finished after %d lines", self.name, self.line_count)
