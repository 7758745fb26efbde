"""
Filtering and grouping of options.

Both functions are pure: they derive a new projection from their inputs
and never mutate them.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from formkit.combobox.options import Option

UNGROUPED = ""


def matches_query(option: Option, query: str) -> bool:
    """
    Case-insensitive substring match against label, description or group.

    *query* must already be normalised (lower-cased and stripped).
    """
    if query in option.label.lower():
        return True
    if option.description and query in option.description.lower():
        return True
    if option.group and query in option.group.lower():
        return True
    return False


def filter_options(query: str, options: Iterable[Option]) -> tuple[Option, ...]:
    """
    Return the options matching *query*, in their original order.

    An empty query keeps everything.  Disabled options are never dropped
    here; only selection and highlighting skip them.

    >>> [o.label for o in filter_options("an", [Option(1, "Apple"), Option(2, "Banana")])]
    ['Banana']
    """
    if not query:
        return tuple(options)
    normalised = query.lower().strip()
    return tuple(opt for opt in options if matches_query(opt, normalised))


def group_options(options: Sequence[Option]) -> dict[str, tuple[Option, ...]]:
    """
    Bucket options by group label.

    Named groups appear in first-seen order; ungrouped options are
    collected under ``""`` which always comes last, wherever those
    options sat in the input.
    """
    grouped: dict[str, list[Option]] = {}
    ungrouped: list[Option] = []

    for option in options:
        if option.group:
            grouped.setdefault(option.group, []).append(option)
        else:
            ungrouped.append(option)

    if ungrouped:
        grouped[UNGROUPED] = ungrouped

    return {name: tuple(items) for name, items in grouped.items()}


def display_order(grouped: dict[str, tuple[Option, ...]]) -> tuple[Option, ...]:
    """Flatten grouped options in the order they appear on screen."""
    return tuple(opt for items in grouped.values() for opt in items)
