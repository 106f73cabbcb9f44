"""Launch descriptor: what to run and how.

## Basic Usage

```python
descriptor = (
    LaunchDescriptor.from_search_path("ffmpeg")
    .set_working_directory("/videos")
    .add_argument("-i input.vob")
    .add_arguments("-c:v libx264", "-crf 16")
    .add_arguments(["-f mp4", "out.mp4", "-y"])
    .set_log_path("ffmpeg_log.txt")
)
result = ProcessRunner().run(descriptor)
```

Arguments are kept as one string, exactly as the caller wrote them. Quoting and
escaping are the caller's job: on POSIX the string is split with shell rules,
on Windows it is passed to the OS as the command line.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from collections.abc import Iterable

from cli_wrapper.errors import NotFoundError

logger = logging.getLogger(__name__)

EXECUTABLE_SUFFIX = ".exe" if sys.platform == "win32" else ""


def _candidate_names(name: str) -> list[str]:
    if EXECUTABLE_SUFFIX and not name.lower().endswith(EXECUTABLE_SUFFIX):
        return [name, name + EXECUTABLE_SUFFIX]
    return [name]


def quote_argument(arg: str) -> str:
    """Quote one argument so it survives the platform's command line parsing."""
    if sys.platform == "win32":
        return subprocess.list2cmdline([arg])
    return shlex.quote(arg)


def find_in_search_path(name: str, search_path: str | None = None) -> str:
    """Locate ``name`` in the directories of ``search_path``.

    Directories are tried in listed order. Within each directory ``name`` is
    tried first, then ``name`` with the platform executable suffix.

    Args:
        name: Executable name, e.g. "ffmpeg".
        search_path: os.pathsep-separated directory list. Defaults to $PATH.

    Returns:
        Full path of the first match.

    Raises:
        NotFoundError: If no directory contains a match, or the search path is
            not set.
    """
    try:
        if search_path is None:
            search_path = os.environ["PATH"]
        for folder in search_path.split(os.pathsep):
            if not folder:
                continue
            for candidate in _candidate_names(name):
                path = os.path.join(folder, candidate)
                if os.path.isfile(path):
                    logger.debug("Resolved %s to %s", name, path)
                    return path
    except (KeyError, OSError, UnicodeError) as e:
        error_msg = f"Failed to find {name} in PATH."
        raise NotFoundError(error_msg, e) from e

    error_msg = f"Failed to find {name} in PATH."
    raise NotFoundError(error_msg)


class LaunchDescriptor:
    """Builder describing a single executable invocation.

    Every configuration method returns the descriptor itself so calls can be
    chained. A descriptor can be run any number of times; each run starts from
    empty buffers.
    """

    def __init__(self, executable_path: str) -> None:
        self.executable_path = executable_path
        self.arguments = ""
        self.working_directory: str | None = None
        self.window_visible = False
        self.log_path: str | None = None

    @classmethod
    def from_path(cls, executable_path: str | os.PathLike[str]) -> LaunchDescriptor:
        """Use the executable at ``executable_path`` as-is."""
        return cls(os.fspath(executable_path))

    @classmethod
    def from_search_path(cls, name: str) -> LaunchDescriptor:
        """Use the first executable called ``name`` found on PATH.

        Raises:
            NotFoundError: If the program could not be found in PATH.
        """
        return cls(find_in_search_path(name))

    # Settings

    def add_argument(self, arg: str) -> LaunchDescriptor:
        """Append one argument. Empty or blank arguments are ignored."""
        if not arg.strip():
            return self
        if self.arguments.strip():
            arg = " " + arg
        self.arguments += arg
        return self

    def add_arguments(self, *args: str | Iterable[str]) -> LaunchDescriptor:
        """Append several arguments, given either as varargs or one iterable."""
        if len(args) == 1 and not isinstance(args[0], str):
            items = [arg for arg in args[0] if arg.strip()]
        else:
            items = [arg for arg in args if arg.strip()]  # type: ignore[union-attr]
        if not items:
            return self
        if self.arguments.strip():
            self.arguments += " "
        self.arguments += " ".join(items)
        return self

    def set_log_path(self, path: str | os.PathLike[str]) -> LaunchDescriptor:
        """Mirror the child's output to ``path`` during each run.

        The file is truncated at the start of every run. When both stdout and
        stderr are used there is no guarantee they are written in the order the
        child produced them.
        """
        self.log_path = os.fspath(path)
        return self

    def show_window(self) -> LaunchDescriptor:
        """Show the console window while the process runs (Windows only).

        By default the window is hidden.
        """
        self.window_visible = True
        return self

    def set_working_directory(self, directory: str | os.PathLike[str]) -> LaunchDescriptor:
        """Run the process from ``directory`` instead of the current directory.

        The log path is not affected; it stays relative to the caller's
        working directory.
        """
        self.working_directory = os.fspath(directory)
        return self

    # Derived values

    @property
    def command_line(self) -> str:
        """The resolved command line, ``<executable> <arguments>``."""
        executable = subprocess.list2cmdline([self.executable_path])
        if self.arguments:
            return f"{executable} {self.arguments}"
        return executable

    def build_argv(self) -> str | list[str]:
        """Return the command in the form subprocess.Popen expects on this platform.

        Raises:
            ValueError: If the argument string cannot be split (unbalanced quotes).
        """
        if sys.platform == "win32":
            return self.command_line
        return [self.executable_path, *shlex.split(self.arguments)]

    def creation_flags(self) -> int:
        if not self.window_visible:
            return getattr(subprocess, "CREATE_NO_WINDOW", 0)
        return 0

    def __repr__(self) -> str:
        return f"LaunchDescriptor({self.command_line!r}, cwd={self.working_directory!r}, log={self.log_path!r})"
