# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Ordered severity levels shared by the report, the filters and the verdict.

    Members compare by rank (``HINT < SUGGESTION < WARNING < ERROR < CRITICAL``)
    rather than by their string values.
    """

    HINT = "hint"
    SUGGESTION = "suggestion"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Return the position of the severity within the total order.

        Returns:
            int: Zero-based rank where larger values are more severe.
        """

        return _SEVERITY_RANK[self]

    @property
    def style(self) -> str:
        """Return the Rich style used when rendering this severity.

        Returns:
            str: Rich colour name associated with the severity.
        """

        return _SEVERITY_STYLE[self]

    @classmethod
    def parse(cls, raw: str | Severity) -> Severity:
        """Return the severity matching ``raw`` using InspectCode vocabulary.

        Args:
            raw: Severity token such as ``"WARNING"`` or ``"suggestion"``.

        Returns:
            Severity: Matching severity member.

        Raises:
            ValueError: If ``raw`` does not name a known severity.
        """

        if isinstance(raw, Severity):
            return raw
        token = raw.strip().lower()
        token = _SEVERITY_ALIASES.get(token, token)
        try:
            return cls(token)
        except ValueError as exc:
            raise ValueError(f"unknown severity '{raw}'") from exc

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK: Final[dict[Severity, int]] = {
    Severity.HINT: 0,
    Severity.SUGGESTION: 1,
    Severity.WARNING: 2,
    Severity.ERROR: 3,
    Severity.CRITICAL: 4,
}

_SEVERITY_STYLE: Final[dict[Severity, str]] = {
    Severity.HINT: "bright_black",
    Severity.SUGGESTION: "green",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
    Severity.CRITICAL: "bold red",
}

# InspectCode emits these for rules that are informational only.
_SEVERITY_ALIASES: Final[dict[str, str]] = {
    "do_not_show": Severity.HINT.value,
    "info": Severity.HINT.value,
}

MAX_SEVERITY: Final[Severity] = Severity.CRITICAL

__all__ = ["MAX_SEVERITY", "Severity"]
