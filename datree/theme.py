"""Colour and symbol themes for terminal output."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

RESET = 0
BOLD = 1
FG_GREEN = 32
FG_YELLOW = 33
FG_CYAN = 36
FG_HI_RED = 91
FG_HI_CYAN = 96


def _colors_enabled() -> bool:
    if "NO_COLOR" in os.environ:
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    stream = sys.stdout
    return bool(stream is not None and hasattr(stream, "isatty") and stream.isatty())


@dataclass(frozen=True)
class Style:
    """A set of terminal attributes applied to text.

    With ``enabled`` left as None, colours are used only when standard output
    is a terminal and NO_COLOR is not set.
    """

    attributes: tuple[int, ...] = ()
    enabled: bool | None = None

    def sprint(self, text: object) -> str:
        """Return ``text`` wrapped in the style's escape sequences."""
        text = str(text)
        enabled = _colors_enabled() if self.enabled is None else self.enabled
        if not self.attributes or not enabled:
            return text
        codes = ";".join(str(code) for code in self.attributes)
        return f"\x1b[{codes}m{text}\x1b[0m"


@dataclass(frozen=True)
class Theme:
    """Styles, table colour codes and symbols used by the printer."""

    name: str
    green: Style = field(default_factory=Style)
    yellow: Style = field(default_factory=Style)
    red_bold: Style = field(default_factory=Style)
    error: Style = field(default_factory=Style)
    highlight: Style = field(default_factory=Style)
    cyan: Style = field(default_factory=Style)
    cyan_bold: Style = field(default_factory=Style)
    cyan_attribute: int = RESET
    green_attribute: int = RESET
    red_attribute: int = RESET
    spacing: str = " "
    error_emoji: str = ""
    suggestion_emoji: str = ""
    skip_emoji: str = ""


def create_default_theme() -> Theme:
    """The coloured theme with emoji symbols."""
    return Theme(
        name="Default",
        green=Style((FG_GREEN,)),
        yellow=Style((FG_YELLOW,)),
        red_bold=Style((FG_HI_RED, BOLD)),
        error=Style((FG_HI_RED,)),
        highlight=Style((BOLD,)),
        cyan=Style((FG_CYAN,)),
        cyan_bold=Style((FG_CYAN, BOLD)),
        cyan_attribute=FG_CYAN,
        green_attribute=FG_GREEN,
        red_attribute=FG_HI_RED,
        spacing=" ",
        error_emoji="\u274c ",
        suggestion_emoji="\U0001f4a1 ",
        skip_emoji="\u23e9 ",
    )


def create_simple_theme() -> Theme:
    """A plain theme without colours, using ASCII symbols."""
    return Theme(
        name="Simple",
        cyan_attribute=RESET,
        green_attribute=RESET,
        red_attribute=RESET,
        spacing=" ",
        error_emoji="[X] ",
        suggestion_emoji="[*] ",
        skip_emoji="[>>]",
    )