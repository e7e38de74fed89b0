# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-invocation state threaded through the gate pipeline."""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from .console import default_console
from .process_utils import ProcessRunner, SubprocessRunner
from .provisioning import (
    TOOLS_DIR_NAME,
    HttpTransport,
    RequestsTransport,
    ToolProvisioner,
    engine_binary_name,
    resolve_tools_version,
)


@dataclass(frozen=True, slots=True)
class RunContext:
    """Explicit run-scoped dependencies for a single gate invocation.

    Attributes:
        temp_dir: System temporary directory hosting the cache and reports.
        search_root: Directory searched for ``codecutter.json`` and solutions.
        working_dir: Directory the engine runs from and default configs land in.
        transport: HTTP transport used to fetch the engine archive.
        process_runner: Capability used to launch the engine.
        console: Console receiving user-facing output.
        tools_version: Version of the engine archive to provision.
        binary_name: Platform-specific engine executable name.
    """

    temp_dir: Path
    search_root: Path
    working_dir: Path
    transport: HttpTransport
    process_runner: ProcessRunner
    console: Console
    tools_version: str = field(default_factory=resolve_tools_version)
    binary_name: str = field(default_factory=engine_binary_name)

    @property
    def cache_dir(self) -> Path:
        """Return the directory the engine is cached in."""

        return self.temp_dir / TOOLS_DIR_NAME

    def provisioner(self) -> ToolProvisioner:
        """Return a provisioner bound to this context's cache and transport."""

        return ToolProvisioner(
            cache_dir=self.cache_dir,
            transport=self.transport,
            version=self.tools_version,
            binary_name=self.binary_name,
        )

    @classmethod
    def create(
        cls,
        *,
        search_root: Path | None = None,
        working_dir: Path | None = None,
        temp_dir: Path | None = None,
        console: Console | None = None,
    ) -> RunContext:
        """Build the default context for a command-line invocation.

        Args:
            search_root: Directory searched for configuration; defaults to the
                current working directory.
            working_dir: Directory the engine runs from; defaults to the
                current working directory.
            temp_dir: Temporary directory root; defaults to the system one.
            console: Output console; defaults to the shared Rich console.

        Returns:
            RunContext: Context wired with real transport and process runner.
        """

        cwd = Path.cwd()
        run_dir = working_dir if working_dir is not None else cwd
        return cls(
            temp_dir=temp_dir if temp_dir is not None else Path(tempfile.gettempdir()),
            search_root=search_root if search_root is not None else cwd,
            working_dir=run_dir,
            transport=RequestsTransport(),
            process_runner=SubprocessRunner(cwd=run_dir),
            console=console if console is not None else default_console(),
        )


__all__ = ["RunContext"]
