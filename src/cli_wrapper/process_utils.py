"""Process tree helpers used when a blocking run is interrupted."""

from __future__ import annotations

import contextlib
import logging

import psutil

logger = logging.getLogger(__name__)


def describe_process(pid: int) -> str:
    """One-line summary of a process and how many children it has."""
    try:
        process = psutil.Process(pid)
        children = process.children(recursive=True)
        return f"pid={pid} name={process.name()} status={process.status()} children={len(children)}"
    except psutil.Error:
        return f"pid={pid} (no longer running)"


def kill_process_tree(pid: int, timeout: float = 3.0) -> list[int]:
    """Terminate a process and all of its descendants.

    Children are asked to terminate first, then killed if they outlive
    ``timeout``; the parent goes last so it cannot respawn them.

    Returns:
        The pids that were signalled. Empty if ``pid`` was already gone.
    """
    try:
        parent = psutil.Process(pid)
    except psutil.NoSuchProcess:
        return []

    try:
        children = parent.children(recursive=True)
    except psutil.Error as e:
        logger.warning("Could not list children of %s: %s", pid, e)
        children = []

    for child in children:
        with contextlib.suppress(psutil.NoSuchProcess):
            child.terminate()
    _, alive = psutil.wait_procs(children, timeout=timeout)
    for child in alive:
        with contextlib.suppress(psutil.NoSuchProcess):
            child.kill()

    with contextlib.suppress(psutil.NoSuchProcess, psutil.TimeoutExpired):
        parent.terminate()
        parent.wait(timeout)
    with contextlib.suppress(psutil.NoSuchProcess):
        parent.kill()

    signalled = [pid, *(child.pid for child in children)]
    logger.debug("Killed process tree %s", signalled)
    return signalled
