"""One-call helpers around ProcessRunner.

These build a fresh ProcessRunner per call, attach the given callbacks to its
live channels and run the descriptor.
"""

from __future__ import annotations

from cli_wrapper.events import LineCallback
from cli_wrapper.launch_descriptor import LaunchDescriptor
from cli_wrapper.process_runner import ProcessRunner
from cli_wrapper.run_result import RunResult


def _make_runner(on_output: LineCallback | None, on_error: LineCallback | None) -> ProcessRunner:
    runner = ProcessRunner()
    if on_output is not None:
        runner.output_received.subscribe(on_output)
    if on_error is not None:
        runner.error_received.subscribe(on_error)
    return runner


def run(
    descriptor: LaunchDescriptor,
    on_output: LineCallback | None = None,
    on_error: LineCallback | None = None,
    check: bool = False,
) -> RunResult:
    """Run ``descriptor`` and block until it finishes.

    Args:
        descriptor: What to run.
        on_output: Called with each stdout line while the process runs.
        on_error: Called with each stderr line while the process runs.
        check: If True, raise instead of returning a failed or non-zero result.

    Returns:
        The RunResult of the run.

    Raises:
        RunnerError: If check=True and the run failed.
        CalledProcessError: If check=True and the process exited non-zero.
    """
    result = _make_runner(on_output, on_error).run(descriptor)
    if check:
        result.check(descriptor.command_line)
    return result


async def run_async(
    descriptor: LaunchDescriptor,
    on_output: LineCallback | None = None,
    on_error: LineCallback | None = None,
    check: bool = False,
) -> RunResult:
    """Awaitable version of ``run``; the blocking work happens on a worker thread."""
    result = await _make_runner(on_output, on_error).run_async(descriptor)
    if check:
        result.check(descriptor.command_line)
    return result
