"""Unit tests for RunResult."""

import subprocess
import unittest

from cli_wrapper import EXIT_CODE_SENTINEL, RunResult, SpawnError


class TestRunResult(unittest.TestCase):
    """Test the result value type."""

    def test_sentinel_is_int_min(self):
        """Test the sentinel matches a 32-bit int minimum."""
        self.assertEqual(EXIT_CODE_SENTINEL, -2147483648)

    def test_failure_requires_sentinel(self):
        """Test a failed result with a real exit code is rejected."""
        with self.assertRaises(ValueError):
            RunResult(failure=SpawnError("nope"), exit_code=0)

    def test_lists_become_tuples(self):
        """Test line sequences are stored immutably."""
        result = RunResult(None, 0, ["a", "b"], ["c"])  # type: ignore[arg-type]
        self.assertEqual(result.output_lines, ("a", "b"))
        self.assertEqual(result.error_lines, ("c",))
        self.assertEqual(result.stdout, "a\nb")
        self.assertEqual(result.stderr, "c")
        with self.assertRaises(AttributeError):
            result.exit_code = 1  # type: ignore[misc]

    def test_check_success(self):
        """Test check returns the result on success."""
        result = RunResult(None, 0, ("ok",))
        self.assertTrue(result.ok)
        self.assertIs(result.check(), result)

    def test_check_non_zero(self):
        """Test check raises CalledProcessError with captured output."""
        result = RunResult(None, 3, ("out",), ("err",))
        with self.assertRaises(subprocess.CalledProcessError) as cm:
            result.check("prog -x")
        self.assertEqual(cm.exception.returncode, 3)
        self.assertEqual(cm.exception.cmd, "prog -x")
        self.assertEqual(cm.exception.output, "out")
        self.assertEqual(cm.exception.stderr, "err")

    def test_check_failure(self):
        """Test check re-raises the captured failure."""
        failure = SpawnError("cannot start", FileNotFoundError("missing"))
        result = RunResult(failure, EXIT_CODE_SENTINEL)
        self.assertFalse(result.ok)
        with self.assertRaises(SpawnError) as cm:
            result.check()
        self.assertIsInstance(cm.exception.__cause__, FileNotFoundError)


if __name__ == "__main__":
    unittest.main()
