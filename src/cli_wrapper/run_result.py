"""Result value produced by a single run."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass

# int.MinValue of a 32-bit signed integer; never a real exit status
EXIT_CODE_SENTINEL = -(2**31)


@dataclass(frozen=True)
class RunResult:
    """Everything observed during one run of a LaunchDescriptor.

    Check ``failure`` first, then ``exit_code``. Lines captured before a failure
    are kept, so ``output_lines`` and ``error_lines`` may be partial when
    ``failure`` is set.
    """

    failure: Exception | None
    exit_code: int
    output_lines: tuple[str, ...] = ()
    error_lines: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.failure is not None and self.exit_code != EXIT_CODE_SENTINEL:
            error_msg = f"A failed run must report the sentinel exit code, got {self.exit_code}"
            raise ValueError(error_msg)
        # Accept lists from callers but always expose immutable sequences
        object.__setattr__(self, "output_lines", tuple(self.output_lines))
        object.__setattr__(self, "error_lines", tuple(self.error_lines))

    @property
    def ok(self) -> bool:
        return self.failure is None and self.exit_code == 0

    @property
    def stdout(self) -> str:
        return "\n".join(self.output_lines)

    @property
    def stderr(self) -> str:
        return "\n".join(self.error_lines)

    def check(self, command: str = "") -> RunResult:
        """Raise if the run failed or exited non-zero, otherwise return self.

        Raises:
            RunnerError: The captured failure, if any.
            subprocess.CalledProcessError: If the process exited with a non-zero code.
        """
        if self.failure is not None:
            raise self.failure
        if self.exit_code != 0:
            raise subprocess.CalledProcessError(
                returncode=self.exit_code,
                cmd=command,
                output=self.stdout,
                stderr=self.stderr,
            )
        return self
