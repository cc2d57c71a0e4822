"""Terminal styling for help text and log output.

Styles are grouped in palettes, one per kind of output. A palette resolved
for a stream that should not be colored (see `should_colorize`) renders
every style as plain text.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, fields, replace
from typing import TextIO, TypeVar

__all__ = [
    "BOLD",
    "CYAN",
    "DIM",
    "PLAIN",
    "RED",
    "RESET",
    "YELLOW",
    "HelpStyles",
    "LogStyles",
    "Style",
    "should_colorize",
]

_ESC = "\x1b["

RESET = f"{_ESC}0m"

BOLD = "1"
DIM = "2"

RED = "31"
YELLOW = "33"
CYAN = "36"


def should_colorize(stream: TextIO | None = None) -> bool:
    """Tell whether ANSI codes may be written to `stream` (stderr by default).

    NO_COLOR disables colors and FORCE_COLOR enables them. Otherwise colors
    are used only for terminals.
    """
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    if stream is None:
        stream = sys.stderr
    return hasattr(stream, "isatty") and stream.isatty()


@dataclass(frozen=True)
class Style:
    """SGR codes applied together; no codes means plain text."""

    codes: tuple[str, ...] = ()

    @property
    def prefix(self) -> str:
        return f"{_ESC}{';'.join(self.codes)}m" if self.codes else ""

    @property
    def suffix(self) -> str:
        return RESET if self.codes else ""

    def __call__(self, text: str) -> str:
        return f"{self.prefix}{text}{self.suffix}"


PLAIN = Style()


_P = TypeVar("_P", bound="_Palette")


class _Palette:
    @classmethod
    def for_stream(cls: type[_P], stream: TextIO | None = None) -> _P:
        """Return the default palette, or a plain one when `stream` is not colored."""
        palette = cls()
        if should_colorize(stream):
            return palette
        return replace(palette, **{field.name: PLAIN for field in fields(palette)})


@dataclass(frozen=True)
class HelpStyles(_Palette):
    """Styles of the shell completion help text."""

    heading: Style = Style((BOLD,))
    usage: Style = Style((CYAN,))
    note: Style = Style((DIM,))


@dataclass(frozen=True)
class LogStyles(_Palette):
    """Styles of screen log records, by level."""

    warning: Style = Style((YELLOW, DIM))
    error: Style = Style((RED, DIM))
    critical: Style = Style((RED, BOLD))
