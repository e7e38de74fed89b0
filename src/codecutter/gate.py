# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""End-to-end quality gate pipeline."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from rich.console import Console
from rich.progress import BarColumn, DownloadColumn, Progress, TaskID, TextColumn, TransferSpeedColumn

from .aggregation import QualityVerdict, aggregate
from .config import resolve_config
from .context import RunContext
from .errors import CodeCutterError
from .logging import echo, fail, info
from .provisioning import ProgressCallback
from .report import load_report
from .reporting import render_verdict
from .runner import AnalysisRunner

LOGGER = logging.getLogger(__name__)


class DownloadProgress:
    """Adapt provisioning progress callbacks onto a Rich progress bar."""

    def __init__(self, progress: Progress, task: TaskID) -> None:
        self._progress = progress
        self._task = task

    def __call__(self, done: int, total: int | None) -> None:
        self._progress.update(self._task, completed=done, total=total)


@contextmanager
def download_progress(console: Console) -> Iterator[ProgressCallback]:
    """Yield a progress callback rendering a transfer bar on ``console``."""

    progress = Progress(
        TextColumn("Downloading"),
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        console=console,
    )
    with progress:
        task = progress.add_task("download", total=None)
        yield DownloadProgress(progress, task)


def evaluate(context: RunContext, config_path: Path | None) -> QualityVerdict:
    """Run every pipeline stage and return the verdict.

    Args:
        context: Run-scoped dependencies.
        config_path: Optional explicit configuration file.

    Returns:
        QualityVerdict: Aggregated result of the engine run.

    Raises:
        CodeCutterError: If any stage fails.
    """

    console = context.console
    config = resolve_config(
        config_path,
        search_root=context.search_root,
        working_dir=context.working_dir,
        console=console,
    )
    solution = config.solution_path(context.working_dir)
    echo(f"Using solution file {solution.name} for analysis...\n", style="green", console=console)

    provisioner = context.provisioner()
    if not provisioner.is_cached():
        echo(
            f"JetBrains InspectTool Missing. Downloading from {provisioner.download_url}\n",
            style="bright_black",
            console=console,
        )
        with download_progress(console) as progress:
            tool = provisioner.ensure(progress)
        echo(f"Tools extracted to {provisioner.cache_dir}", style="green", console=console)
    else:
        tool = provisioner.ensure()

    info("\nStarting InspectTool Process...", console=console)
    report_path = AnalysisRunner(context.process_runner, context.temp_dir).run(tool, solution)
    info("\nInspectCode Tool Finished Running.", console=console)
    LOGGER.debug("loading report %s", report_path)

    report = load_report(report_path)
    return aggregate(report, config)


def run_quality_gate(context: RunContext, config_path: Path | None = None) -> int:
    """Run the gate and return the process exit code.

    Args:
        context: Run-scoped dependencies.
        config_path: Optional explicit configuration file.

    Returns:
        int: ``0`` when the gate passes, ``-1`` on failure or fatal error.
    """

    try:
        verdict = evaluate(context, config_path)
    except CodeCutterError as exc:
        fail(str(exc), console=context.console)
        return exc.exit_code
    render_verdict(verdict, context.console)
    return verdict.exit_code


__all__ = ["DownloadProgress", "download_progress", "evaluate", "run_quality_gate"]
