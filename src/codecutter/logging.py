# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing console helpers and opt-in debug logging."""

from __future__ import annotations

import logging
import os
import sys
from typing import Final

from rich.console import Console
from rich.text import Text

from .console import default_console

DEBUG_ENV: Final[str] = "CODECUTTER_DEBUG"
_PACKAGE_LOGGER: Final[str] = "codecutter"


def _print_line(msg: str, *, style: str | None, console: Console | None) -> None:
    """Render ``msg`` to the console using shared styling helpers.

    Args:
        msg: Message text to print to the console.
        style: Rich style name applied to the whole line.
        console: Optional console overriding the process default.
    """

    target = console if console is not None else default_console()
    text = Text(msg)
    if style:
        text.stylize(style)
    target.print(text)


def echo(msg: str, *, style: str | None = None, console: Console | None = None) -> None:
    """Emit ``msg`` verbatim with an optional Rich style.

    Args:
        msg: Message text to display.
        style: Optional Rich style applied to the line.
        console: Optional console overriding the process default.
    """

    _print_line(msg, style=style, console=console)


def info(msg: str, *, console: Console | None = None) -> None:
    """Emit an informational message."""

    _print_line(msg, style="cyan", console=console)


def ok(msg: str, *, console: Console | None = None) -> None:
    """Emit a success message."""

    _print_line(msg, style="green", console=console)


def warn(msg: str, *, console: Console | None = None) -> None:
    """Emit a warning message."""

    _print_line(msg, style="yellow", console=console)


def fail(msg: str, *, console: Console | None = None) -> None:
    """Emit an error message."""

    _print_line(msg, style="red", console=console)


def configure_debug_logging(*, force: bool = False) -> bool:
    """Stream package debug records to stderr when requested.

    Args:
        force: Enable debug output regardless of :data:`DEBUG_ENV`.

    Returns:
        bool: ``True`` when debug logging is active.
    """

    if not force and not os.environ.get(DEBUG_ENV):
        return False
    logger = logging.getLogger(_PACKAGE_LOGGER)
    if getattr(logger, "_codecutter_debug_configured", False):
        return True
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("[debug] %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    setattr(logger, "_codecutter_debug_configured", True)
    return True


__all__ = [
    "DEBUG_ENV",
    "configure_debug_logging",
    "echo",
    "fail",
    "info",
    "ok",
    "warn",
]
