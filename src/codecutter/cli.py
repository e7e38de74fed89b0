# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line entry point for the quality gate."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .context import RunContext
from .gate import run_quality_gate
from .logging import configure_debug_logging

CONFIG_ARGUMENT = Annotated[
    Path | None,
    typer.Argument(
        help="Path to a codecutter.json file. Discovered or derived when omitted.",
        show_default=False,
    ),
]

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    help="Run JetBrains InspectCode over a solution and fail on serious issues.",
)


@app.command()
def gate_command(config: CONFIG_ARGUMENT = None) -> None:
    """Resolve configuration, run InspectCode and report the verdict."""

    configure_debug_logging()
    exit_code = run_quality_gate(RunContext.create(), config)
    raise typer.Exit(code=exit_code)


def main() -> None:
    """Console-script entry point."""

    app(prog_name="codecutter")


__all__ = ["app", "main"]
