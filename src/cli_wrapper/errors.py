"""Error types reported by cli_wrapper.

Runs never raise these past ``ProcessRunner.run``; they are placed in
``RunResult.failure`` instead. Only ``NotFoundError`` is raised directly, by
``LaunchDescriptor.from_search_path``.
"""

from __future__ import annotations


class RunnerError(Exception):
    """Base class for every cli_wrapper failure.

    Also used as-is for unexpected failures during spawn or wait.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause
        self.__cause__ = cause


class NotFoundError(RunnerError):
    """The executable could not be located in any PATH directory."""


class LogOpenError(RunnerError):
    """The log file could not be created or opened for writing."""


class SpawnError(RunnerError):
    """The child process could not be created."""


class WaitError(RunnerError):
    """Waiting for the child process to terminate failed."""
