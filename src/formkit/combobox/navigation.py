"""
Keyboard highlight movement over the filtered option list.
"""

from __future__ import annotations

from collections.abc import Sequence

from formkit.combobox.options import Option

NEXT = 1
PREVIOUS = -1


def scan(options: Sequence[Option], start: int, direction: int) -> int:
    """
    Find the first enabled option strictly after *start* in *direction*.

    Returns *start* unchanged when no enabled option exists that way, so
    the highlight never overshoots the last (or first) enabled entry.
    ``start`` may be ``-1`` (no highlight).
    """
    index = start + direction
    while 0 <= index < len(options):
        if not options[index].disabled:
            return index
        index += direction
    return start


def next_index(options: Sequence[Option], current: int) -> int:
    return scan(options, current, NEXT)


def previous_index(options: Sequence[Option], current: int) -> int:
    # From "no highlight" there is nothing before, so stay put
    if current < 0:
        return current
    return scan(options, current, PREVIOUS)


def can_highlight(options: Sequence[Option], index: int) -> bool:
    """``True`` when *index* points at an enabled option."""
    return 0 <= index < len(options) and not options[index].disabled
