"""
Option records and the master option store.

An option's identity is its *value* compared as a string, so ``1`` and
``"1"`` name the same option everywhere in the combobox.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

OptionValue = Union[str, int, float]


def option_key(value: OptionValue) -> str:
    """
    Return the string identity of an option value.

    >>> option_key(1) == option_key("1")
    True
    >>> option_key(2.0)
    '2'
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def same_value(a: OptionValue, b: OptionValue) -> bool:
    """Compare two option values by string identity."""
    return option_key(a) == option_key(b)


@dataclass(frozen=True)
class Option:
    """
    A selectable entry.

    Attributes
    ----------
    value:
        Identity of the option (compared via :func:`option_key`).
    label:
        Display text, also the primary search target.
    disabled:
        Shown but never selectable or keyboard-highlightable.
    group:
        Optional group heading the option is listed under.
    description:
        Optional secondary text, also searched.
    icon:
        Optional glyph shown before the label.
    data:
        Free-form caller data carried along untouched.
    """

    value: OptionValue
    label: str
    disabled: bool = False
    group: str | None = None
    description: str | None = None
    icon: str | None = None
    data: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def key(self) -> str:
        return option_key(self.value)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Option:
        """Create an option from a mapping; ``label`` defaults to the value."""
        value = data.get("value", data.get("label", ""))
        return cls(
            value=value,
            label=str(data.get("label", value)),
            disabled=bool(data.get("disabled", False)),
            group=data.get("group") or None,
            description=data.get("description") or None,
            icon=data.get("icon") or None,
            data=dict(data.get("data") or {}),
        )

    @classmethod
    def coerce(cls, item: Option | Mapping[str, Any] | OptionValue) -> Option:
        """Accept an :class:`Option`, a mapping, or a bare value (used as label)."""
        if isinstance(item, Option):
            return item
        if isinstance(item, Mapping):
            return cls.from_dict(item)
        return cls(value=item, label=str(item))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"value": self.value, "label": self.label}
        if self.disabled:
            out["disabled"] = True
        for name in ("group", "description", "icon"):
            if getattr(self, name):
                out[name] = getattr(self, name)
        if self.data:
            out["data"] = dict(self.data)
        return out


def coerce_options(items: Iterable[Option | Mapping[str, Any] | OptionValue] | None) -> list[Option]:
    """Normalise a heterogeneous iterable into a list of :class:`Option`."""
    if not items:
        return []
    return [Option.coerce(item) for item in items]


class OptionStore:
    """
    Exclusively owned master list of options.

    Reads return tuples so callers can never alias the internal list.
    Malformed entries are accepted as-is; validation belongs to whoever
    builds the options.
    """

    def __init__(self, options: Iterable[Option | Mapping[str, Any] | OptionValue] | None = None) -> None:
        self._options: list[Option] = coerce_options(options)

    @property
    def options(self) -> tuple[Option, ...]:
        return tuple(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def set_options(self, options: Iterable[Option | Mapping[str, Any] | OptionValue] | None) -> None:
        self._options = coerce_options(options)

    def add_option(self, option: Option | Mapping[str, Any] | OptionValue) -> None:
        self._options.append(Option.coerce(option))

    def remove_option(self, value: OptionValue) -> bool:
        """Remove every option whose value matches *value*. Returns whether any was removed."""
        key = option_key(value)
        kept = [opt for opt in self._options if opt.key != key]
        removed = len(kept) != len(self._options)
        self._options = kept
        return removed

    def find(self, value: OptionValue) -> Option | None:
        key = option_key(value)
        for opt in self._options:
            if opt.key == key:
                return opt
        return None
