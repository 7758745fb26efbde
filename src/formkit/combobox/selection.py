"""
Selection rules for single and multi mode.

Every function takes the current ordered selection and returns the next
one.  When a transition is rejected or changes nothing, the *same* tuple
object is returned, so callers can test ``new is old`` to decide whether
observers must be notified.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from formkit.combobox.options import OptionValue, option_key

SelectionMode = Literal["single", "multi"]

SINGLE: SelectionMode = "single"
MULTI: SelectionMode = "multi"
MODES: tuple[SelectionMode, ...] = (SINGLE, MULTI)

Selection = tuple[OptionValue, ...]


def contains(values: Selection, value: OptionValue) -> bool:
    key = option_key(value)
    return any(option_key(v) == key for v in values)


def at_capacity(values: Selection, max_selections: int | None) -> bool:
    """``True`` when a multi selection cannot grow. ``None``/``0`` mean unlimited."""
    return bool(max_selections) and len(values) >= max_selections  # type: ignore[operator]


def select(
    values: Selection,
    value: OptionValue,
    mode: SelectionMode,
    max_selections: int | None = None,
) -> Selection:
    """
    Apply a select intent.

    * single: the selection becomes ``(value,)``.
    * multi: an already-selected value is toggled off; otherwise *value*
      is appended unless the cap has been reached.
    """
    if mode == SINGLE:
        if len(values) == 1 and option_key(values[0]) == option_key(value):
            return values
        return (value,)

    if contains(values, value):
        return deselect(values, value)
    if at_capacity(values, max_selections):
        return values
    return values + (value,)


def deselect(values: Selection, value: OptionValue) -> Selection:
    """Remove *value* (string-coerced match). No-op if it is not selected."""
    key = option_key(value)
    kept = tuple(v for v in values if option_key(v) != key)
    if len(kept) == len(values):
        return values
    return kept


def remove_last(values: Selection) -> Selection:
    """Drop the most recently added value."""
    if not values:
        return values
    return deselect(values, values[-1])


def clear(values: Selection) -> Selection:
    if not values:
        return values
    return ()


def normalise(
    values: Iterable[OptionValue],
    mode: SelectionMode,
    max_selections: int | None = None,
) -> Selection:
    """
    Make an arbitrary caller-supplied selection valid for *mode*.

    Duplicates (by string identity) are dropped keeping the first
    occurrence, single mode keeps one value, multi mode is cut at the cap.
    """
    seen: set[str] = set()
    out: list[OptionValue] = []
    for value in values:
        key = option_key(value)
        if key in seen:
            continue
        seen.add(key)
        out.append(value)

    limit = 1 if mode == SINGLE else (max_selections or None)
    if limit is not None:
        out = out[:limit]
    return tuple(out)
