"""Run an external executable and collect its output while it runs.

## Basic Usage

### Blocking run
```python
descriptor = LaunchDescriptor.from_path("/usr/bin/git").add_arguments("status", "--short")
result = ProcessRunner().run(descriptor)
if result.failure is not None:
    print(f"Could not run git: {result.failure}")
elif result.exit_code != 0:
    print(f"git exited with {result.exit_code}")
else:
    print(result.stdout)
```

### Live output
```python
runner = ProcessRunner()
runner.error_received.subscribe(lambda line: print(f"progress: {line}"))
result = runner.run(LaunchDescriptor.from_search_path("ffmpeg").add_arguments("-i", "in.vob", "out.mp4"))
```

### Awaitable run
```python
result = await ProcessRunner().run_async(descriptor)
```

## Behaviour

- stdout and stderr are drained on two reader threads while the calling thread
  blocks on the child, so a chatty child never stalls on a full pipe.
- Each line is appended to its buffer, emitted on ``output_received`` or
  ``error_received``, and written to the log file if one is configured.
- Order is preserved within a stream. There is no ordering between the two
  streams, in the buffers or in the log file.
- ``run`` does not raise: spawn, wait and log-open failures come back in
  ``RunResult.failure`` together with whatever output was captured. The one
  exception is KeyboardInterrupt, which kills the child's process tree and
  propagates.
- There is no way to cancel a run. Abandoning ``run_async`` leaves the child
  running in the background until it exits on its own.
"""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from cli_wrapper.errors import LogOpenError, RunnerError, SpawnError, WaitError
from cli_wrapper.events import LineEvent
from cli_wrapper.launch_descriptor import LaunchDescriptor
from cli_wrapper.log_sink import LogSink
from cli_wrapper.process_utils import describe_process, kill_process_tree
from cli_wrapper.run_result import EXIT_CODE_SENTINEL, RunResult
from cli_wrapper.stream_reader import StreamReader

logger = logging.getLogger(__name__)


@dataclass
class RunState:
    """Per-run buffers and log handle, owned by a single run."""

    output_lines: list[str] = field(default_factory=list)
    error_lines: list[str] = field(default_factory=list)
    log: LogSink | None = None

    def close_log(self, outcome: int | BaseException) -> None:
        """Best-effort log close; a no-op when logging is disabled."""
        if self.log is None:
            return
        if isinstance(outcome, BaseException):
            self.log.close_with_exception(outcome)
        else:
            self.log.close_with_exit_code(outcome)
        self.log = None

    def result(self, failure: Exception | None, exit_code: int = EXIT_CODE_SENTINEL) -> RunResult:
        return RunResult(
            failure=failure,
            exit_code=exit_code,
            output_lines=tuple(self.output_lines),
            error_lines=tuple(self.error_lines),
        )


class ProcessRunner:
    """Executes LaunchDescriptors one at a time and reports a RunResult.

    Subscribe to ``output_received`` / ``error_received`` before calling
    ``run`` to receive lines while the child is still running. Callbacks are
    invoked on the reader threads.
    """

    def __init__(self) -> None:
        self.output_received = LineEvent("output_received")
        self.error_received = LineEvent("error_received")

    def run(self, descriptor: LaunchDescriptor) -> RunResult:
        """Run the descriptor to completion and return what was observed."""
        state = RunState()

        if descriptor.log_path is not None:
            try:
                state.log = LogSink.open(descriptor.log_path)
            except OSError as e:
                logger.debug("Could not open log %s: %s", descriptor.log_path, e)
                return state.result(LogOpenError("Failed to open log file.", e))
            state.log.write_line(descriptor.command_line)

        try:
            proc = self._spawn(descriptor)
        except (OSError, ValueError, NotImplementedError) as e:
            state.close_log(e)
            return state.result(SpawnError("The system cannot find the specified file/command.", e))
        except Exception as e:  # noqa: BLE001
            state.close_log(e)
            return state.result(RunnerError(f"Failed to start process: {e}", e))

        try:
            readers = self._start_readers(proc, state)
        except Exception as e:  # noqa: BLE001
            logger.warning("Could not start output readers for %s, killing it: %s", proc.pid, e)
            self._kill_child(proc)
            state.close_log(e)
            return state.result(RunnerError(f"Failed to start output readers: {e}", e))

        try:
            exit_code = self._wait_for_exit(proc, readers)
        except KeyboardInterrupt as e:
            self._handle_keyboard_interrupt(proc, state, e)
            raise
        except (OSError, subprocess.SubprocessError) as e:
            state.close_log(e)
            return state.result(WaitError("Waiting for the process failed.", e))
        except Exception as e:  # noqa: BLE001
            state.close_log(e)
            return state.result(RunnerError(f"Failed while waiting for process: {e}", e))

        logger.debug("Process %s exited with %s", proc.pid, exit_code)
        state.close_log(exit_code)
        return state.result(None, exit_code)

    async def run_async(self, descriptor: LaunchDescriptor) -> RunResult:
        """Same as ``run``, executed on a worker thread so the event loop keeps going."""
        return await asyncio.to_thread(self.run, descriptor)

    def _spawn(self, descriptor: LaunchDescriptor) -> subprocess.Popen[str]:
        """Create the child process with both output streams redirected."""
        argv = descriptor.build_argv()

        # Force unbuffered output for Python children so lines arrive as they are printed
        env = os.environ.copy()
        env["PYTHONUNBUFFERED"] = "1"

        kwargs: dict[str, Any] = {}
        creationflags = descriptor.creation_flags()
        if creationflags:
            kwargs["creationflags"] = creationflags

        proc = subprocess.Popen(  # noqa: S603
            argv,
            cwd=descriptor.working_directory,
            stdin=None,  # inherited, the child cannot be fed input
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
            env=env,
            **kwargs,
        )
        logger.debug("Started process pid=%s: %s", proc.pid, descriptor.command_line)
        return proc

    def _line_handler(self, lines: list[str], event: LineEvent, state: RunState) -> Callable[[str], None]:
        log = state.log

        def _on_line(line: str) -> None:
            lines.append(line)
            event.emit(line)
            if log is not None:
                log.write_line(line)

        return _on_line

    def _start_readers(self, proc: subprocess.Popen[str], state: RunState) -> list[StreamReader]:
        assert proc.stdout is not None
        assert proc.stderr is not None
        readers = [
            StreamReader(
                proc.stdout,
                name=f"stdout-{proc.pid}",
                on_line=self._line_handler(state.output_lines, self.output_received, state),
            ),
            StreamReader(
                proc.stderr,
                name=f"stderr-{proc.pid}",
                on_line=self._line_handler(state.error_lines, self.error_received, state),
            ),
        ]
        for reader in readers:
            reader.start()
        return readers

    def _wait_for_exit(self, proc: subprocess.Popen[str], readers: list[StreamReader]) -> int:
        """Block until the child exits and both pipes have been drained."""
        exit_code = proc.wait()
        # Readers stop at EOF, which can trail the exit slightly
        for reader in readers:
            reader.join()
        return exit_code

    def _kill_child(self, proc: subprocess.Popen[str]) -> None:
        """Kill the child's process tree, falling back to killing the child alone."""
        try:
            kill_process_tree(proc.pid)
        except Exception as kill_error:  # noqa: BLE001
            logger.warning("Failed to kill process tree for %s: %s", proc.pid, kill_error)
            try:
                proc.kill()
            except OSError as e:
                logger.warning("Failed to kill process %s: %s", proc.pid, e)

    def _handle_keyboard_interrupt(
        self, proc: subprocess.Popen[str], state: RunState, error: KeyboardInterrupt
    ) -> None:
        logger.info("Keyboard interrupt while waiting on %s, killing process tree", describe_process(proc.pid))
        self._kill_child(proc)
        state.close_log(error)
