# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import logging

# Bandit: subprocess usage is intentional. Arguments are passed as a list and
# ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

LOGGER = logging.getLogger(__name__)


class ProcessRunner(Protocol):
    """Capability that launches an external command and waits for it."""

    def run(self, args: Sequence[str]) -> int:
        """Run ``args`` to completion and return the exit status.

        Args:
            args: Executable followed by its arguments.

        Returns:
            int: Exit status reported by the process.
        """

        raise NotImplementedError


class SubprocessRunner:
    """Run commands with inherited standard streams and no timeout."""

    def __init__(self, *, cwd: Path | None = None) -> None:
        self._cwd = cwd

    def run(self, args: Sequence[str]) -> int:
        """Launch ``args`` and block until the child exits.

        Args:
            args: Executable followed by its arguments.

        Returns:
            int: Exit status reported by the child process.

        Raises:
            ValueError: If ``args`` is empty.
            OSError: If the executable cannot be launched.
        """

        if not args:
            raise ValueError("subprocess command requires at least one argument")
        command = [str(arg) for arg in args]
        LOGGER.debug("running %s", command)
        # Bandit: the command is built from the cached engine path and resolved
        # paths; no shell expansion takes place.
        completed = subprocess.run(command, cwd=self._cwd, check=False)  # nosec B603
        LOGGER.debug("%s exited with status %d", command[0], completed.returncode)
        return completed.returncode


__all__ = ["ProcessRunner", "SubprocessRunner"]
