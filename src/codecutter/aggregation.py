# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Join, filter and group report issues into a pass/fail verdict."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .config import CodeCutterConfig
from .errors import FAILURE_EXIT_CODE, SUCCESS_EXIT_CODE
from .report import IssueType, ProjectIssues, RawIssue, Report
from .severity import Severity


@dataclass(frozen=True, slots=True)
class CodeIssue:
    """Raw issue joined with the metadata of its issue type."""

    issue: RawIssue
    issue_type: IssueType

    @property
    def severity(self) -> Severity:
        return self.issue_type.severity

    @property
    def category(self) -> str:
        return self.issue_type.category

    @property
    def file(self) -> str:
        return self.issue.file

    @property
    def line(self) -> int:
        return self.issue.line

    @property
    def message(self) -> str:
        return self.issue.message


@dataclass(frozen=True, slots=True)
class FileGroup:
    """Issues of one category located in one file."""

    file: str
    issues: tuple[CodeIssue, ...]


@dataclass(frozen=True, slots=True)
class CategoryGroup:
    """Issues of one category, split per file in first-seen order."""

    category: str
    files: tuple[FileGroup, ...]

    @property
    def severity(self) -> Severity:
        """Return the severity of the first issue, used to colour the category."""

        return self.files[0].issues[0].severity

    @property
    def issues(self) -> tuple[CodeIssue, ...]:
        return tuple(issue for group in self.files for issue in group.issues)


@dataclass(frozen=True, slots=True)
class ProjectSummary:
    """Filtered, severity-sorted view of one project's issues."""

    name: str
    issues: tuple[CodeIssue, ...]
    categories: tuple[CategoryGroup, ...]

    @property
    def count(self) -> int:
        return len(self.issues)


@dataclass(frozen=True, slots=True)
class QualityVerdict:
    """Outcome of a gate run.

    Attributes:
        projects: Per-project summaries in report order.
        total_issues: Number of issues at or above the display threshold.
        failed: ``True`` when any shown issue meets the error threshold.
    """

    projects: tuple[ProjectSummary, ...]
    total_issues: int
    failed: bool

    @property
    def exit_code(self) -> int:
        return FAILURE_EXIT_CODE if self.failed else SUCCESS_EXIT_CODE


def join_issues(project: ProjectIssues, report: Report) -> list[CodeIssue]:
    """Attach issue type metadata to every issue of ``project``.

    Raises:
        ReportParseError: If an issue references an unknown issue type.
    """

    return [CodeIssue(issue=issue, issue_type=report.issue_type(issue.type_id)) for issue in project.issues]


def filter_issues(issues: Iterable[CodeIssue], display_level: Severity) -> tuple[CodeIssue, ...]:
    """Return issues at or above ``display_level``, most severe first.

    Ties keep their original order.

    Args:
        issues: Joined issues in report order.
        display_level: Minimum severity to keep.

    Returns:
        tuple[CodeIssue, ...]: Filtered issues sorted by descending severity.
    """

    kept = [issue for issue in issues if issue.severity >= display_level]
    return tuple(sorted(kept, key=lambda issue: issue.severity.rank, reverse=True))


def group_issues(issues: Sequence[CodeIssue]) -> tuple[CategoryGroup, ...]:
    """Group ``issues`` by category, then by file, both in first-seen order.

    Args:
        issues: Issues to partition.

    Returns:
        tuple[CategoryGroup, ...]: Category groups covering every issue exactly once.
    """

    by_category: dict[str, dict[str, list[CodeIssue]]] = {}
    for issue in issues:
        by_category.setdefault(issue.category, {}).setdefault(issue.file, []).append(issue)
    return tuple(
        CategoryGroup(
            category=category,
            files=tuple(FileGroup(file=file, issues=tuple(entries)) for file, entries in files.items()),
        )
        for category, files in by_category.items()
    )


def summarise_project(project: ProjectIssues, report: Report, display_level: Severity) -> ProjectSummary:
    """Build the filtered and grouped summary for ``project``."""

    issues = filter_issues(join_issues(project, report), display_level)
    return ProjectSummary(name=project.name, issues=issues, categories=group_issues(issues))


def aggregate(report: Report, config: CodeCutterConfig) -> QualityVerdict:
    """Compute the gate verdict for ``report`` under ``config``.

    Args:
        report: Parsed engine report.
        config: Gate configuration providing both thresholds.

    Returns:
        QualityVerdict: Per-project summaries, issue total and pass/fail flag.
    """

    summaries: list[ProjectSummary] = []
    total = 0
    failed = False
    for project in report.projects:
        summary = summarise_project(project, report, config.display_level)
        summaries.append(summary)
        if not summary.issues:
            continue
        total += summary.count
        failed |= any(issue.severity >= config.error_level for issue in summary.issues)
    return QualityVerdict(projects=tuple(summaries), total_issues=total, failed=failed)


__all__ = [
    "CategoryGroup",
    "CodeIssue",
    "FileGroup",
    "ProjectSummary",
    "QualityVerdict",
    "aggregate",
    "filter_issues",
    "group_issues",
    "join_issues",
    "summarise_project",
]
