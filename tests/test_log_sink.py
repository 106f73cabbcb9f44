"""Unit tests for LogSink."""

import tempfile
import threading
import unittest
from pathlib import Path
from unittest import mock

from cli_wrapper.log_sink import LogSink


class TestLogSink(unittest.TestCase):
    """Test writing and closing the log file."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "out.log"

    def tearDown(self):
        self._tmp.cleanup()

    def test_write_and_close(self):
        """Test lines followed by the exit-code footer."""
        sink = LogSink.open(str(self.path))
        sink.write_line("prog -x")
        sink.write_line("hello")
        sink.close_with_exit_code(0)

        self.assertTrue(sink.closed)
        self.assertEqual(
            self.path.read_text(encoding="utf-8").splitlines(),
            ["prog -x", "hello", "Process exited with exit code = 0"],
        )

    def test_open_truncates(self):
        """Test an existing file is replaced."""
        self.path.write_text("old content\n", encoding="utf-8")
        LogSink.open(str(self.path)).close_with_exit_code(1)
        self.assertEqual(self.path.read_text(encoding="utf-8"), "Process exited with exit code = 1\n")

    def test_open_in_missing_directory(self):
        """Test opening under a missing directory raises OSError."""
        with self.assertRaises(OSError):
            LogSink.open(str(Path(self._tmp.name) / "nope" / "out.log"))

    def test_exception_footer(self):
        """Test the footer written for a failure."""
        sink = LogSink.open(str(self.path))
        sink.close_with_exception(FileNotFoundError("no such file"))
        self.assertEqual(
            self.path.read_text(encoding="utf-8"),
            "Process exited with exception: no such file\n",
        )

    def test_close_is_idempotent_and_writes_after_close_are_dropped(self):
        """Test only the first close has an effect."""
        sink = LogSink.open(str(self.path))
        sink.close_with_exit_code(0)
        sink.close_with_exit_code(5)
        sink.write_line("late")
        self.assertEqual(self.path.read_text(encoding="utf-8"), "Process exited with exit code = 0\n")

    def test_close_steps_are_independent(self):
        """Test flush and close still happen when the footer write fails."""
        stream = mock.MagicMock()
        stream.write.side_effect = OSError("disk full")
        stream.flush.side_effect = ValueError("flush failed")
        sink = LogSink(stream, path="mock.log")

        with self.assertLogs("cli_wrapper.log_sink", level="WARNING") as logs:
            sink.close_with_exit_code(0)

        stream.write.assert_called_once()
        stream.flush.assert_called_once()
        stream.close.assert_called_once()
        self.assertEqual(len(logs.records), 2)

    def test_write_failure_is_not_raised(self):
        """Test a failing write is logged instead of raised."""
        stream = mock.MagicMock()
        stream.write.side_effect = OSError("disk full")
        sink = LogSink(stream, path="mock.log")

        with self.assertLogs("cli_wrapper.log_sink", level="WARNING"):
            sink.write_line("hello")

    def test_concurrent_writers(self):
        """Test lines from several threads are never torn."""
        sink = LogSink.open(str(self.path))

        def _writer(tag: str) -> None:
            for i in range(500):
                sink.write_line(f"{tag}-{i}-" + "x" * 200)

        threads = [threading.Thread(target=_writer, args=(f"t{n}",)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        sink.close_with_exit_code(0)

        lines = self.path.read_text(encoding="utf-8").splitlines()
        self.assertEqual(len(lines), 2001)
        expected = {f"t{n}-{i}-" + "x" * 200 for n in range(4) for i in range(500)}
        self.assertEqual(set(lines[:-1]), expected)


if __name__ == "__main__":
    unittest.main()
