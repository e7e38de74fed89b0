# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console

from codecutter.context import RunContext
from codecutter.provisioning import WINDOWS_64_BINARY
from helpers.fakes import FakeProcessRunner, FakeTransport


@pytest.fixture
def console() -> Console:
    """Return a plain, wide console writing to memory."""

    return Console(file=io.StringIO(), width=200, color_system=None, highlight=False, emoji=False)


@pytest.fixture
def make_context(tmp_path: Path, console: Console) -> Callable[..., RunContext]:
    """Return a factory building isolated run contexts under ``tmp_path``."""

    def factory(
        *,
        transport: FakeTransport | None = None,
        runner: FakeProcessRunner | None = None,
    ) -> RunContext:
        temp_dir = tmp_path / "tmp"
        project = tmp_path / "project"
        temp_dir.mkdir(exist_ok=True)
        project.mkdir(exist_ok=True)
        return RunContext(
            temp_dir=temp_dir,
            search_root=project,
            working_dir=project,
            transport=transport if transport is not None else FakeTransport(),
            process_runner=runner if runner is not None else FakeProcessRunner(),
            console=console,
            tools_version="2020.3.2",
            binary_name=WINDOWS_64_BINARY,
        )

    return factory
