"""
ANSI escape sequence helpers used by the terminal widgets.
"""

from __future__ import annotations

import re

ESC = "\033"
CSI = f"{ESC}["
RESET = f"{CSI}0m"

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


class FG:
    """Standard ANSI foreground colors."""

    RED = f"{CSI}31m"
    CYAN = f"{CSI}36m"


_STYLE_CODES: dict[str, int] = {
    "bold": 1,
    "dim": 2,
    "underline": 4,
    "strikethrough": 9,
}


def style(
    text: str,
    *,
    fg: str | None = None,
    bold: bool = False,
    dim: bool = False,
    underline: bool = False,
    strikethrough: bool = False,
) -> str:
    """
    Apply ANSI styling to *text*.

    *fg* is a ready-made sequence such as ``FG.RED``.  Returns *text*
    unchanged when nothing is set.
    """
    parts: list[str] = []
    if fg is not None:
        parts.append(fg)

    attrs = {
        "bold": bold,
        "dim": dim,
        "underline": underline,
        "strikethrough": strikethrough,
    }
    for attr_name, enabled in attrs.items():
        if enabled:
            parts.append(f"{CSI}{_STYLE_CODES[attr_name]}m")

    if not parts:
        return text
    return f"{''.join(parts)}{text}{RESET}"


def strip_ansi(text: str) -> str:
    """Remove SGR escape sequences, leaving the visible text."""
    return _ANSI_RE.sub("", text)


def truncate(text: str, width: int) -> str:
    """Cut plain *text* to *width* columns, ending with an ellipsis if cut."""
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"
