# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Test doubles and builders for InspectCode reports and tool archives."""

from __future__ import annotations

import io
import zipfile
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from codecutter.provisioning import WINDOWS_64_BINARY, ProgressCallback

IssueTypeRow = tuple[str, str, str]
IssueRow = tuple[str, str, int, str]


def build_report_xml(
    issue_types: Sequence[IssueTypeRow],
    projects: Sequence[tuple[str, Sequence[IssueRow]]],
) -> str:
    """Return an InspectCode style report.

    ``issue_types`` holds ``(id, category, severity)`` triples and each project
    holds ``(type_id, file, line, message)`` issues.
    """

    lines = ['<?xml version="1.0" encoding="utf-8"?>', '<Report ToolsVersion="203.0.20210129.95143">']
    lines.append("  <IssueTypes>")
    for type_id, category, severity in issue_types:
        lines.append(
            f'    <IssueType Id="{type_id}" Category="{category}" CategoryId="{category}"'
            f' Description="{type_id} rule" Severity="{severity}" />'
        )
    lines.append("  </IssueTypes>")
    lines.append("  <Issues>")
    for name, issues in projects:
        lines.append(f'    <Project Name="{name}">')
        for type_id, file, line, message in issues:
            lines.append(
                f'      <Issue TypeId="{type_id}" File="{file}" Offset="0-1" Line="{line}" Message="{message}" />'
            )
        lines.append("    </Project>")
    lines.append("  </Issues>")
    lines.append("</Report>")
    return "\n".join(lines)


def build_tools_archive(members: Sequence[str] = (WINDOWS_64_BINARY,)) -> bytes:
    """Return zip bytes containing ``members`` as small files."""

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as bundle:
        for member in members:
            bundle.writestr(member, "#!/bin/sh\n")
    return buffer.getvalue()


class FakeTransport:
    """In-memory transport recording every fetch."""

    def __init__(self, payload: bytes | None = None, *, error: Exception | None = None) -> None:
        self.payload = build_tools_archive() if payload is None else payload
        self.error = error
        self.calls: list[str] = []

    def fetch(self, url: str, destination: Path, progress: ProgressCallback | None = None) -> Path:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        if progress is not None:
            progress(len(self.payload) // 2, len(self.payload))
            progress(len(self.payload), len(self.payload))
        destination.write_bytes(self.payload)
        return destination


class FakeProcessRunner:
    """Process runner that writes a canned report instead of launching InspectCode."""

    def __init__(self, report: str | bytes | None = None, *, status: int = 0) -> None:
        self.report = report
        self.status = status
        self.calls: list[list[str]] = []

    def run(self, args: Sequence[str]) -> int:
        self.calls.append(list(args))
        if self.report is not None:
            output = next(arg for arg in args if arg.startswith("-o="))[len("-o=") :]
            if isinstance(self.report, bytes):
                Path(output).write_bytes(self.report)
            else:
                Path(output).write_text(self.report, encoding="utf-8")
        return self.status


def console_text(console: Console) -> str:
    """Return everything written to a memory-backed console."""

    file = console.file
    assert isinstance(file, io.StringIO)
    return file.getvalue()
