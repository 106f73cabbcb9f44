"""Command line entry point.

    cli-wrapper [--search-path] [--log PATH] [--cwd DIR] [--show-window] [-v] program [args ...]

Child stdout is echoed to stdout and child stderr to stderr as the lines arrive.
The exit status is the child's, or 1 if the child could not be run.
"""

from __future__ import annotations

import argparse
import logging
import sys

from cli_wrapper.errors import NotFoundError
from cli_wrapper.launch_descriptor import LaunchDescriptor, quote_argument
from cli_wrapper.subprocess_runner import run

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cli-wrapper",
        description="Run a program, stream its output and optionally log it to a file.",
    )
    parser.add_argument("program", help="Executable path, or name to look up with --search-path")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments passed to the program")
    parser.add_argument("--search-path", action="store_true", help="Resolve program using the PATH variable")
    parser.add_argument("--log", metavar="PATH", help="Mirror the program's output to this file")
    parser.add_argument("--cwd", metavar="DIR", help="Working directory for the program")
    parser.add_argument("--show-window", action="store_true", help="Show the console window (Windows)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _echo_stdout(line: str) -> None:
    print(line, flush=True)


def _echo_stderr(line: str) -> None:
    print(line, file=sys.stderr, flush=True)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        if args.search_path:
            descriptor = LaunchDescriptor.from_search_path(args.program)
        else:
            descriptor = LaunchDescriptor.from_path(args.program)
    except NotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    descriptor.add_arguments([quote_argument(arg) for arg in args.args])
    if args.log:
        descriptor.set_log_path(args.log)
    if args.cwd:
        descriptor.set_working_directory(args.cwd)
    if args.show_window:
        descriptor.show_window()

    result = run(descriptor, on_output=_echo_stdout, on_error=_echo_stderr)
    if result.failure is not None:
        cause = f" ({result.failure.__cause__})" if result.failure.__cause__ else ""
        print(f"Error: {result.failure}{cause}", file=sys.stderr)
        return 1
    if result.exit_code != 0:
        logger.info("Non-zero exit code: %s", result.exit_code)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
