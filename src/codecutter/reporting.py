# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console rendering for aggregated gate results."""

from __future__ import annotations

from rich.console import Console

from .aggregation import CategoryGroup, ProjectSummary, QualityVerdict
from .logging import echo, fail, ok

FAILED_MESSAGE = "Code Quality Test Failed"
PASSED_MESSAGE = "Code Quality Test Passed"


def render_project(summary: ProjectSummary, console: Console) -> None:
    """Print the header and grouped issue listing for one project."""

    echo(f"\nProject: {summary.name} · {summary.count} Issues\n", style="cyan", console=console)
    for category in summary.categories:
        _render_category(category, console)


def _render_category(category: CategoryGroup, console: Console) -> None:
    echo(category.category, style=category.severity.style, console=console)
    console.print()
    for group in category.files:
        echo(f"{group.file} · {len(group.issues)} Issues", style="magenta", console=console)
        for issue in group.issues:
            echo(f"-> {issue.message} (L#{issue.line})", style="bright_black", console=console)
        console.print()
    console.print()


def render_verdict(verdict: QualityVerdict, console: Console) -> None:
    """Print every project followed by the overall total and verdict.

    Args:
        verdict: Aggregated gate result.
        console: Destination console.
    """

    for summary in verdict.projects:
        render_project(summary, console)
    echo(f"Overall\nTotal Issues: {verdict.total_issues:,}", style="cyan", console=console)
    if verdict.failed:
        fail(FAILED_MESSAGE, console=console)
    else:
        ok(PASSED_MESSAGE, console=console)


__all__ = ["FAILED_MESSAGE", "PASSED_MESSAGE", "render_project", "render_verdict"]
