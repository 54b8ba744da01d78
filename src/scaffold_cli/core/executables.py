"""
Executable Detection
====================

Checks whether external tools (git, npm, ...) can be resolved on the host
``PATH``. Lookups go through the platform's own resolver (``where`` on
Windows, ``command -v`` elsewhere) so shell-visible commands behave the same
way they would for the user.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Iterable

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 5


def _is_windows() -> bool:
    """Return True when running on Windows."""
    return os.name == "nt"


def executable_exists(name: str) -> bool:
    """
    Check if an executable can be resolved on this host.

    Returns:
        True if the lookup command exits with status 0, False otherwise.
        Lookup failures are never raised.
    """
    if _is_windows():
        cmd: str | list[str] = ["where", name]
        shell = False
    else:
        cmd = f"command -v {shlex.quote(name)}"
        shell = True

    try:
        result = subprocess.run(
            cmd,
            shell=shell,
            capture_output=True,
            timeout=PROBE_TIMEOUT,
        )
    except (subprocess.TimeoutExpired, OSError) as exc:
        logger.debug("Probe for %s failed: %s", name, exc)
        return False

    found = result.returncode == 0
    logger.debug("Probe for %s: %s", name, "found" if found else "not found")
    return found


def find_first_available_executable(names: Iterable[str]) -> str | None:
    """
    Return the first name in ``names`` that resolves on this host.

    Stops probing at the first match. Returns None if nothing matches.
    """
    for name in names:
        if executable_exists(name):
            return name
    return None


__all__ = ["executable_exists", "find_first_available_executable"]
