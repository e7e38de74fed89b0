# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""InspectCode report models and XML deserialisation.

An InspectCode report has the following shape::

    <Report>
      <IssueTypes>
        <IssueType Id="..." Category="..." Severity="WARNING" Description="..." />
      </IssueTypes>
      <Issues>
        <Project Name="...">
          <Issue TypeId="..." File="..." Line="12" Message="..." />
        </Project>
      </Issues>
    </Report>

Every ``Issue/@TypeId`` must resolve to an ``IssueType``. Duplicate issue type
ids are rejected rather than silently overwritten.
"""

from __future__ import annotations

from pathlib import Path
from typing import Final
from xml.etree.ElementTree import Element, ParseError

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ReportParseError
from .severity import Severity

_ISSUE_TYPES_TAG: Final[str] = "IssueTypes"
_ISSUE_TYPE_TAG: Final[str] = "IssueType"
_ISSUES_TAG: Final[str] = "Issues"
_PROJECT_TAG: Final[str] = "Project"
_ISSUE_TAG: Final[str] = "Issue"


class IssueType(BaseModel):
    """Catalog entry describing one inspection rule."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(alias="Id", min_length=1)
    category: str = Field(alias="Category")
    severity: Severity = Field(alias="Severity")
    description: str = Field(default="", alias="Description")
    category_id: str | None = Field(default=None, alias="CategoryId")
    wiki_url: str | None = Field(default=None, alias="WikiUrl")

    @field_validator("severity", mode="before")
    @classmethod
    def _parse_severity(cls, value: object) -> object:
        if isinstance(value, str):
            return Severity.parse(value)
        return value


class RawIssue(BaseModel):
    """Single issue as emitted by the engine, before joining with its type."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type_id: str = Field(alias="TypeId", min_length=1)
    file: str = Field(alias="File")
    # InspectCode omits ``Line`` for issues on the first line of a file.
    line: int = Field(default=1, alias="Line")
    message: str = Field(alias="Message")
    offset: str | None = Field(default=None, alias="Offset")


class ProjectIssues(BaseModel):
    """Issues reported for one project of the solution."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(alias="Name")
    issues: tuple[RawIssue, ...] = ()


class Report(BaseModel):
    """Parsed engine report: issue type catalog plus per-project issues."""

    model_config = ConfigDict(frozen=True)

    issue_types: dict[str, IssueType]
    projects: tuple[ProjectIssues, ...] = ()

    def issue_type(self, type_id: str) -> IssueType:
        """Return the catalog entry for ``type_id``.

        Raises:
            ReportParseError: If the id is not part of the catalog.
        """

        try:
            return self.issue_types[type_id]
        except KeyError as exc:
            raise ReportParseError(f"Issue references unknown issue type '{type_id}'") from exc


def parse_report(text: str | bytes) -> Report:
    """Deserialize an InspectCode XML report.

    Args:
        text: XML document produced by the engine. Bytes are decoded by the
            XML parser according to the BOM or the encoding declaration.

    Returns:
        Report: Validated, read-only report.

    Raises:
        ReportParseError: If the document is malformed, incomplete or inconsistent.
    """

    try:
        root = fromstring(text)
    except (ParseError, DefusedXmlException, ValueError) as exc:
        raise ReportParseError(f"Malformed InspectCode report: {exc}") from exc

    types_section = _require_section(root, _ISSUE_TYPES_TAG)
    issues_section = _require_section(root, _ISSUES_TAG)

    try:
        issue_types = _parse_issue_types(types_section)
        projects = tuple(_parse_project(element) for element in issues_section.findall(_PROJECT_TAG))
    except ValidationError as exc:
        raise ReportParseError(f"Invalid InspectCode report: {exc}") from exc

    report = Report(issue_types=issue_types, projects=projects)
    for project in report.projects:
        for issue in project.issues:
            report.issue_type(issue.type_id)
    return report


def load_report(path: Path) -> Report:
    """Read and parse the report stored at ``path``.

    Raises:
        ReportParseError: If the file cannot be read or parsed.
    """

    try:
        payload = path.read_bytes()
    except OSError as exc:
        raise ReportParseError(f"Unable to read InspectCode report {path}: {exc}") from exc
    return parse_report(payload)


def _require_section(root: Element, tag: str) -> Element:
    """Return the direct child ``tag`` of ``root``.

    Raises:
        ReportParseError: If the section is missing.
    """

    section = root.find(tag)
    if section is None:
        raise ReportParseError(f"InspectCode report is missing the <{tag}> section")
    return section


def _parse_issue_types(section: Element) -> dict[str, IssueType]:
    catalog: dict[str, IssueType] = {}
    for element in section.findall(_ISSUE_TYPE_TAG):
        issue_type = IssueType.model_validate(dict(element.attrib))
        if issue_type.id in catalog:
            raise ReportParseError(f"Duplicate issue type id '{issue_type.id}' in InspectCode report")
        catalog[issue_type.id] = issue_type
    return catalog


def _parse_project(element: Element) -> ProjectIssues:
    issues = tuple(RawIssue.model_validate(dict(issue.attrib)) for issue in element.findall(_ISSUE_TAG))
    return ProjectIssues.model_validate({"Name": element.get("Name"), "issues": issues})


__all__ = [
    "IssueType",
    "ProjectIssues",
    "RawIssue",
    "Report",
    "load_report",
    "parse_report",
]
