# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and resolution for the quality gate.

Resolution order mirrors how the gate is dropped into a CI job:

1. an explicit configuration path, when it exists;
2. a ``codecutter.json`` file beside the invocation directory;
3. the first ``*.sln`` solution in that directory, from which a default
   configuration is derived and persisted for subsequent runs.

When none of these succeed there is nothing to analyse and :class:`ConfigError`
is raised.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from rich.console import Console

from .errors import ConfigError
from .logging import ok, warn
from .severity import Severity

CONFIG_FILE_NAME: Final[str] = "codecutter.json"
SOLUTION_PATTERN: Final[str] = "*.sln"

LOGGER = logging.getLogger(__name__)


class CodeCutterConfig(BaseModel):
    """Immutable gate configuration loaded from ``codecutter.json``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    solution_file: str = Field(alias="solutionFile", min_length=1)
    display_level: Severity = Field(default=Severity.SUGGESTION, alias="displayLevel")
    error_level: Severity = Field(default=Severity.ERROR, alias="errorLevel")

    @field_validator("display_level", "error_level", mode="before")
    @classmethod
    def _coerce_severity(cls, value: object) -> object:
        """Accept severities in any letter case.

        Args:
            value: Raw value supplied for a severity field.

        Returns:
            object: Parsed :class:`Severity` for strings, otherwise ``value`` unchanged.
        """

        if isinstance(value, str):
            return Severity.parse(value)
        return value

    def solution_path(self, working_dir: Path) -> Path:
        """Return the solution path anchored at ``working_dir`` when relative.

        Args:
            working_dir: Directory the engine is launched from.

        Returns:
            Path: Absolute or ``working_dir``-relative solution path.
        """

        candidate = Path(self.solution_file)
        if candidate.is_absolute():
            return candidate
        return working_dir / candidate

    def to_json(self) -> str:
        """Serialise the configuration using its on-disk camelCase keys.

        Returns:
            str: Pretty-printed JSON document.
        """

        payload = self.model_dump(mode="json", by_alias=True)
        return json.dumps(payload, indent=2) + "\n"


def load_config(path: Path) -> CodeCutterConfig:
    """Read and validate the configuration stored at ``path``.

    Args:
        path: Location of a JSON configuration file.

    Returns:
        CodeCutterConfig: Validated configuration.

    Raises:
        ConfigError: If the file cannot be read, is not JSON or fails validation.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc
    try:
        return CodeCutterConfig.model_validate_json(text)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc


def save_config(config: CodeCutterConfig, path: Path) -> Path:
    """Write ``config`` to ``path`` as JSON.

    Args:
        config: Configuration to persist.
        path: Destination file.

    Returns:
        Path: The written path.

    Raises:
        ConfigError: If the file cannot be written.
    """

    try:
        path.write_text(config.to_json(), encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to write config file {path}: {exc}") from exc
    return path


def discover_solution(search_root: Path) -> Path | None:
    """Return the first solution file directly inside ``search_root``.

    Args:
        search_root: Directory scanned non-recursively.

    Returns:
        Path | None: First match in sorted order, or ``None`` when absent.
    """

    matches = sorted(path for path in search_root.glob(SOLUTION_PATTERN) if path.is_file())
    return matches[0] if matches else None


def resolve_config(
    explicit_path: Path | None,
    *,
    search_root: Path,
    working_dir: Path,
    console: Console | None = None,
) -> CodeCutterConfig:
    """Return the configuration for this run.

    Args:
        explicit_path: Path supplied on the command line, if any.
        search_root: Directory searched for a config file or solution.
        working_dir: Directory receiving a derived default configuration.
        console: Optional console used for progress messages.

    Returns:
        CodeCutterConfig: Loaded or derived configuration.

    Raises:
        ConfigError: If loading fails or no solution file can be located.
    """

    if explicit_path is not None:
        if explicit_path.is_file():
            LOGGER.debug("loading explicit config %s", explicit_path)
            return load_config(explicit_path)
        warn(
            f"Config file {explicit_path} does not exist. Searching for a {CONFIG_FILE_NAME} file...",
            console=console,
        )
    else:
        warn(f"No config specified. Searching for a {CONFIG_FILE_NAME} file...", console=console)

    discovered = search_root / CONFIG_FILE_NAME
    if discovered.is_file():
        ok(f"{CONFIG_FILE_NAME} found!", console=console)
        return load_config(discovered)

    warn(f"No {CONFIG_FILE_NAME} found. Searching for a solution file...", console=console)
    solution = discover_solution(search_root)
    if solution is None:
        raise ConfigError("Unable to find a solution file. Exiting...")

    ok("Solution Found! Writing default config to root", console=console)
    config = CodeCutterConfig(solution_file=solution.relative_to(search_root).as_posix())
    written = save_config(config, working_dir / CONFIG_FILE_NAME)
    LOGGER.debug("wrote default config %s", written)
    return config


__all__ = [
    "CONFIG_FILE_NAME",
    "CodeCutterConfig",
    "ConfigError",
    "discover_solution",
    "load_config",
    "resolve_config",
    "save_config",
]
