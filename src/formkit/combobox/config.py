"""
Configuration models for formkit widgets.

A :class:`ComboboxConfig` is fixed when a combobox is built.  It can be
constructed programmatically or loaded from YAML/JSON.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from formkit.combobox.loader import DEFAULT_DEBOUNCE_MS, LoadOptions
from formkit.combobox.options import Option, coerce_options
from formkit.combobox.selection import MODES, SINGLE, SelectionMode

if TYPE_CHECKING:
    from formkit.combobox.state import ComboboxState

OptionRenderer = Callable[[Option], str]


@dataclass
class ComboboxConfig:
    """
    Static configuration of a combobox.

    Example YAML:
        id: fruit
        mode: multi
        placeholder: Pick fruit
        max_selections: 2
        clearable: true
        options:
          - {value: 1, label: Apple, group: Pome}
          - {value: 2, label: Banana, disabled: true}
          - Cherry
    """

    id: str
    mode: SelectionMode = SINGLE
    options: list[Option] = field(default_factory=list)
    load_options: LoadOptions | None = None  # async (query, abort_signal) -> options
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    min_search_length: int = 0
    max_selections: int | None = None  # None or 0 = unlimited (multi only)
    clearable: bool = False
    disabled: bool = False
    required: bool = False

    # Presentation
    placeholder: str = ""
    name: str | None = None  # form field name, defaults to id
    no_options_message: str = "No options found"
    loading_message: str = "Loading..."
    render_option: OptionRenderer | None = None
    render_selected: OptionRenderer | None = None

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise ValueError(f"Unknown combobox mode: {self.mode!r} (expected one of {MODES})")
        self.options = coerce_options(self.options)

    @property
    def field_name(self) -> str:
        return self.name or self.id

    @property
    def is_async(self) -> bool:
        return self.load_options is not None

    @classmethod
    def from_dict(cls, data: dict[str, Any], **overrides: Any) -> ComboboxConfig:
        """
        Create a config from a dictionary.

        Callables (``load_options``, renderers) cannot come from a file, so
        they are passed as keyword *overrides*.
        """
        values: dict[str, Any] = {
            "id": data["id"],
            "mode": data.get("mode", SINGLE),
            "options": data.get("options") or [],
            "debounce_ms": data.get("debounce_ms", DEFAULT_DEBOUNCE_MS),
            "min_search_length": data.get("min_search_length", 0),
            "max_selections": data.get("max_selections"),
            "clearable": data.get("clearable", False),
            "disabled": data.get("disabled", False),
            "required": data.get("required", False),
            "placeholder": data.get("placeholder", ""),
            "name": data.get("name"),
            "no_options_message": data.get("no_options_message", "No options found"),
            "loading_message": data.get("loading_message", "Loading..."),
        }
        values.update(overrides)
        return cls(**values)

    @classmethod
    def from_yaml(cls, path: Path, **overrides: Any) -> ComboboxConfig:
        """Load config from a YAML (or JSON) file."""
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {}, **overrides)

    @classmethod
    def from_yaml_string(cls, content: str, **overrides: Any) -> ComboboxConfig:
        """Load config from a YAML string."""
        data = yaml.safe_load(content)
        return cls.from_dict(data or {}, **overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert the serialisable part of the config to a dictionary."""
        return {
            "id": self.id,
            "mode": self.mode,
            "options": [opt.to_dict() for opt in self.options],
            "debounce_ms": self.debounce_ms,
            "min_search_length": self.min_search_length,
            "max_selections": self.max_selections,
            "clearable": self.clearable,
            "disabled": self.disabled,
            "required": self.required,
            "placeholder": self.placeholder,
            "name": self.name,
            "no_options_message": self.no_options_message,
            "loading_message": self.loading_message,
        }


@dataclass
class ComboboxCallbacks:
    """
    Optional observer hooks, each fired after its transition has been
    committed.  Every hook also receives the new state snapshot.
    """

    on_change: Callable[[list[Any], ComboboxState], None] | None = None
    on_input_change: Callable[[str, ComboboxState], None] | None = None
    on_open: Callable[[ComboboxState], None] | None = None
    on_close: Callable[[ComboboxState], None] | None = None
    on_highlight: Callable[[Option | None, ComboboxState], None] | None = None
    on_error: Callable[[Exception, ComboboxState], None] | None = None
