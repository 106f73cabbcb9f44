"""Run an external program, stream its stdout/stderr lines live and collect a unified result."""

from __future__ import annotations

__version__ = "1.0.0"

from cli_wrapper.errors import LogOpenError, NotFoundError, RunnerError, SpawnError, WaitError
from cli_wrapper.events import LineEvent
from cli_wrapper.launch_descriptor import LaunchDescriptor, find_in_search_path, quote_argument
from cli_wrapper.process_runner import ProcessRunner
from cli_wrapper.run_result import EXIT_CODE_SENTINEL, RunResult
from cli_wrapper.subprocess_runner import run, run_async

__all__ = [
    "EXIT_CODE_SENTINEL",
    "LaunchDescriptor",
    "LineEvent",
    "LogOpenError",
    "NotFoundError",
    "ProcessRunner",
    "RunResult",
    "RunnerError",
    "SpawnError",
    "WaitError",
    "find_in_search_path",
    "quote_argument",
    "run",
    "run_async",
]
