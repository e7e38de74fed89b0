# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""InspectCode-backed code quality gate for CI pipelines."""

from __future__ import annotations

from .aggregation import QualityVerdict, aggregate
from .config import CodeCutterConfig, resolve_config
from .context import RunContext
from .errors import CodeCutterError, ConfigError, ExecutionError, ProvisioningError, ReportParseError
from .gate import run_quality_gate
from .report import Report, parse_report
from .severity import Severity

__version__ = "0.1.0"

__all__ = [
    "CodeCutterConfig",
    "CodeCutterError",
    "ConfigError",
    "ExecutionError",
    "ProvisioningError",
    "QualityVerdict",
    "Report",
    "ReportParseError",
    "RunContext",
    "Severity",
    "__version__",
    "aggregate",
    "parse_report",
    "resolve_config",
    "run_quality_gate",
]
