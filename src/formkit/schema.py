"""
Form field schema.

A form is described in YAML (or JSON, which YAML also reads):

    fields:
      - id: fruit
        type: combobox
        label: Favourite fruit
        mode: multi
        max_selections: 2
        options:
          - {value: 1, label: Apple, group: Pome}
          - Cherry

Each field's ``type`` is one of the closed set :class:`FieldKind`.  Turning
a field into a widget goes through a :class:`FieldRegistry`, a lookup table
from kind to builder.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from formkit.combobox import Combobox, ComboboxConfig, ComboboxWidget, Option
from formkit.combobox.options import coerce_options
from formkit.logging import get_logger

logger = get_logger("schema")


class SchemaError(ValueError):
    """Raised for malformed schema documents."""

    pass


class FieldKind(str, Enum):
    """Every field type the schema language knows about."""

    TEXT = "text"
    NUMBER = "number"
    TEXTAREA = "textarea"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    COMBOBOX = "combobox"
    CHECKBOX = "checkbox"
    RADIO_GROUP = "radio_group"
    CHECKBOX_GROUP = "checkbox_group"
    DATE = "date"
    TIME = "time"
    FILE = "file"


@dataclass
class FieldSchema:
    """One parsed field entry."""

    kind: FieldKind
    id: str
    label: str = ""
    description: str = ""
    required: bool = False
    disabled: bool = False
    placeholder: str = ""
    default: Any = None
    attrs: dict[str, Any] = field(default_factory=dict)  # kind-specific keys

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FieldSchema:
        if not isinstance(data, dict):
            raise SchemaError(f"Field entry must be a mapping, got {type(data).__name__}")
        if not data.get("id"):
            raise SchemaError("Field entry is missing 'id'")
        kind_name = data.get("type")
        if not kind_name:
            raise SchemaError(f"Field {data['id']!r} is missing 'type'")
        try:
            kind = FieldKind(kind_name)
        except ValueError:
            raise SchemaError(f"Field {data['id']!r} has unknown type {kind_name!r}") from None

        common = {"id", "type", "label", "description", "required", "disabled", "placeholder", "default"}
        return cls(
            kind=kind,
            id=str(data["id"]),
            label=str(data.get("label", "")),
            description=str(data.get("description", "")),
            required=bool(data.get("required", False)),
            disabled=bool(data.get("disabled", False)),
            placeholder=str(data.get("placeholder", "")),
            default=data.get("default"),
            attrs={k: v for k, v in data.items() if k not in common},
        )


@dataclass
class FormSchema:
    """A parsed form: an ordered list of fields."""

    fields: list[FieldSchema] = field(default_factory=list)

    def get(self, field_id: str) -> FieldSchema | None:
        return next((f for f in self.fields if f.id == field_id), None)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FormSchema:
        raw_fields = data.get("fields") or []
        if not isinstance(raw_fields, list):
            raise SchemaError("'fields' must be a list")
        return cls(fields=[FieldSchema.from_dict(f) for f in raw_fields])

    @classmethod
    def from_yaml_string(cls, content: str) -> FormSchema:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise SchemaError(f"Invalid schema document: {e}") from e
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise SchemaError("Schema document must be a mapping with a 'fields' list")
        return cls.from_dict(data)

    @classmethod
    def from_yaml(cls, path: Path) -> FormSchema:
        return cls.from_yaml_string(Path(path).read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

FieldBuilder = Callable[[FieldSchema], Any]


def field_options(schema: FieldSchema) -> list[Option]:
    """
    Options declared on a field.

    A string ``options`` value names a shared option list, which is not
    resolved here, so it yields no options.
    """
    raw = schema.attrs.get("options")
    if raw is None or isinstance(raw, str):
        return []
    if not isinstance(raw, list):
        raise SchemaError(f"Field {schema.id!r}: 'options' must be a list")
    return coerce_options(raw)


def build_combobox_config(schema: FieldSchema) -> ComboboxConfig:
    """Translate a ``combobox`` field into a :class:`ComboboxConfig`."""
    attrs = schema.attrs
    try:
        return ComboboxConfig(
            id=schema.id,
            mode=attrs.get("mode", "single"),
            options=field_options(schema),
            debounce_ms=int(attrs.get("debounce_ms", 300)),
            min_search_length=int(attrs.get("min_search_length", 0)),
            max_selections=attrs.get("max_selections"),
            clearable=bool(attrs.get("clearable", False)),
            disabled=schema.disabled,
            required=schema.required,
            placeholder=schema.placeholder,
            no_options_message=attrs.get("no_options_message", "No options found"),
            loading_message=attrs.get("loading_message", "Loading..."),
        )
    except ValueError as e:
        raise SchemaError(f"Field {schema.id!r}: {e}") from e


def initial_values(schema: FieldSchema) -> list[Any]:
    """The field's ``default`` as a list of selected values."""
    if schema.default is None:
        return []
    if isinstance(schema.default, list):
        return list(schema.default)
    return [schema.default]


class FieldRegistry:
    """
    Lookup table from :class:`FieldKind` to a builder callable.

    Example:
        registry = FieldRegistry()
        registry.register(FieldKind.COMBOBOX, build_combobox_config)
        config = registry.build(schema.get("fruit"))
    """

    def __init__(self) -> None:
        self._builders: dict[FieldKind, FieldBuilder] = {}

    def register(self, kind: FieldKind, builder: FieldBuilder) -> None:
        if kind in self._builders:
            logger.debug("Replacing builder for field kind %s", kind.value)
        self._builders[kind] = builder

    def supports(self, kind: FieldKind) -> bool:
        return kind in self._builders

    def kinds(self) -> list[FieldKind]:
        return list(self._builders)

    def build(self, schema: FieldSchema) -> Any:
        builder = self._builders.get(schema.kind)
        if builder is None:
            raise SchemaError(f"No builder registered for field kind {schema.kind.value!r}")
        return builder(schema)


def default_registry() -> FieldRegistry:
    """Registry with every builder bundled with formkit."""
    registry = FieldRegistry()
    registry.register(FieldKind.COMBOBOX, build_combobox_config)
    return registry


def render_field(schema: FieldSchema, width: int = 60, registry: FieldRegistry | None = None) -> list[str]:
    """
    Render a field in its initial, closed state as text lines: the label
    (with a ``*`` when required), the control line and the description.
    """
    config = (registry or default_registry()).build(schema)
    if not isinstance(config, ComboboxConfig):
        raise SchemaError(f"Field kind {schema.kind.value!r} has no text rendering")

    combobox = Combobox(config, initial_values=initial_values(schema))
    widget = ComboboxWidget(combobox)

    lines: list[str] = []
    if schema.label:
        lines.append(f"{schema.label} *" if schema.required else schema.label)
    lines.extend(widget.render(width))
    if schema.description:
        lines.append(schema.description)
    combobox.destroy()
    return lines
