# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich console used for user-facing gate output."""

from __future__ import annotations

import sys
from functools import lru_cache

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal.

    Returns:
        bool: ``True`` when ``sys.stdout`` reports TTY support, ``False`` otherwise.
    """

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=1)
def default_console() -> Console:
    """Return the process-wide console for gate output.

    Colour is enabled only when stdout is a terminal so CI logs stay plain.

    Returns:
        Console: Cached console bound to stdout.
    """

    tty = detect_tty()
    return Console(
        color_system="auto" if tty else None,
        force_terminal=tty,
        no_color=not tty,
        highlight=False,
        soft_wrap=True,
    )


__all__ = ["default_console", "detect_tty"]
