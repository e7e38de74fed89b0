# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Invoke the InspectCode engine against a solution."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .errors import ExecutionError
from .process_utils import ProcessRunner

OUTPUT_FILE_PREFIX: Final[str] = "CodeCutter-InspectCode-Output-"

LOGGER = logging.getLogger(__name__)


def report_output_path(temp_dir: Path) -> Path:
    """Return a fresh, collision-resistant report path inside ``temp_dir``.

    Args:
        temp_dir: Directory that receives the engine report.

    Returns:
        Path: Unique XML report path for this run.
    """

    token = uuid.uuid4().hex[:8]
    return temp_dir / f"{OUTPUT_FILE_PREFIX}{token}.xml"


def build_engine_command(tool: Path, solution: Path, output: Path) -> list[str]:
    """Return the argument vector for an InspectCode run.

    Args:
        tool: Engine executable.
        solution: Solution file to analyse.
        output: Report destination.

    Returns:
        list[str]: Command suitable for a shell-free launch.
    """

    return [str(tool), str(solution), f"-o={output}"]


@dataclass(frozen=True, slots=True)
class AnalysisRunner:
    """Run the engine synchronously and hand back its report location."""

    process_runner: ProcessRunner
    temp_dir: Path

    def run(self, tool: Path, solution: Path) -> Path:
        """Run ``tool`` on ``solution`` and return the report path.

        The engine's exit status is only logged; the report file decides
        whether the run produced anything usable.

        Args:
            tool: Cached engine executable.
            solution: Solution file to analyse.

        Returns:
            Path: Location of the XML report written by the engine.

        Raises:
            ExecutionError: If the engine cannot be started or writes no report.
        """

        output = report_output_path(self.temp_dir)
        command = build_engine_command(tool, solution, output)
        try:
            status = self.process_runner.run(command)
        except OSError as exc:
            raise ExecutionError(f"Unable to start {tool}: {exc}") from exc
        LOGGER.debug("engine exited with status %s", status)
        if not output.is_file():
            raise ExecutionError(f"InspectCode did not produce a report at {output} (exit status {status})")
        return output


__all__ = ["AnalysisRunner", "build_engine_command", "report_output_path"]
