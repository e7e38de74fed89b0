# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exceptions raised by the quality gate pipeline."""

from __future__ import annotations

from typing import ClassVar, Final

FAILURE_EXIT_CODE: Final[int] = -1
SUCCESS_EXIT_CODE: Final[int] = 0


class CodeCutterError(RuntimeError):
    """Base class for unrecoverable failures that abort a gate run."""

    exit_code: ClassVar[int] = FAILURE_EXIT_CODE


class ConfigError(CodeCutterError):
    """Raised when configuration input is invalid or no solution can be discovered."""


class ProvisioningError(CodeCutterError):
    """Raised when the analysis engine cannot be downloaded or unpacked."""


class ExecutionError(CodeCutterError):
    """Raised when the analysis engine fails to start or leaves no report behind."""


class ReportParseError(CodeCutterError):
    """Raised when an engine report is malformed or internally inconsistent."""


__all__ = [
    "FAILURE_EXIT_CODE",
    "SUCCESS_EXIT_CODE",
    "CodeCutterError",
    "ConfigError",
    "ExecutionError",
    "ProvisioningError",
    "ReportParseError",
]
