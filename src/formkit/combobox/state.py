"""
Immutable combobox state snapshot.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from formkit.combobox.filtering import group_options
from formkit.combobox.options import Option, OptionValue, option_key


@dataclass(frozen=True)
class ComboboxState:
    """
    One complete, read-only picture of a combobox.

    A new record replaces the old one on every transition.  Use
    :meth:`evolve` to derive a successor; when ``filtered_options`` is
    replaced, ``grouped_options`` is rebuilt from it automatically.
    """

    selected_values: tuple[OptionValue, ...] = ()
    input_value: str = ""
    is_open: bool = False
    highlighted_index: int = -1
    filtered_options: tuple[Option, ...] = ()
    grouped_options: Mapping[str, tuple[Option, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    is_loading: bool = False
    error: str | None = None

    @classmethod
    def initial(
        cls,
        filtered_options: tuple[Option, ...],
        selected_values: tuple[OptionValue, ...] = (),
    ) -> ComboboxState:
        return cls(
            selected_values=selected_values,
            filtered_options=filtered_options,
            grouped_options=MappingProxyType(group_options(filtered_options)),
        )

    def evolve(self, **changes: Any) -> ComboboxState:
        """Return a copy with *changes* applied, keeping derived fields in sync."""
        if "filtered_options" in changes:
            options = tuple(changes["filtered_options"])
            changes["filtered_options"] = options
            changes["grouped_options"] = MappingProxyType(group_options(options))
        if "selected_values" in changes:
            changes["selected_values"] = tuple(changes["selected_values"])
        return dataclasses.replace(self, **changes)

    # ------------------------------------------------------------------
    # Convenience queries for views
    # ------------------------------------------------------------------

    @property
    def highlighted_option(self) -> Option | None:
        if 0 <= self.highlighted_index < len(self.filtered_options):
            return self.filtered_options[self.highlighted_index]
        return None

    def is_selected(self, value: OptionValue) -> bool:
        key = option_key(value)
        return any(option_key(v) == key for v in self.selected_values)

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view of the state, e.g. for JSON front-ends."""
        return {
            "selected_values": list(self.selected_values),
            "input_value": self.input_value,
            "is_open": self.is_open,
            "highlighted_index": self.highlighted_index,
            "filtered_options": [opt.to_dict() for opt in self.filtered_options],
            "grouped_options": {
                name: [opt.to_dict() for opt in items]
                for name, items in self.grouped_options.items()
            },
            "is_loading": self.is_loading,
            "error": self.error,
        }
