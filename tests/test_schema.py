"""Tests for the form field schema."""

from __future__ import annotations

from pathlib import Path

import pytest

from formkit.combobox import ComboboxConfig
from formkit.schema import (
    FieldKind,
    FieldRegistry,
    FieldSchema,
    FormSchema,
    SchemaError,
    build_combobox_config,
    default_registry,
    field_options,
    initial_values,
    render_field,
)
from formkit.tui.ansi import strip_ansi


class TestFormSchema:
    """Tests for parsing schema documents."""

    def test_from_yaml(self, schema_file: Path) -> None:
        schema = FormSchema.from_yaml(schema_file)

        assert [f.id for f in schema.fields] == ["name", "fruit"]
        assert schema.fields[0].kind is FieldKind.TEXT
        assert schema.fields[0].required is True

        fruit = schema.get("fruit")
        assert fruit.kind is FieldKind.COMBOBOX
        assert fruit.placeholder == "Pick fruit"
        assert fruit.attrs["mode"] == "multi"
        assert "label" not in fruit.attrs

    def test_get_unknown(self, schema_file: Path) -> None:
        assert FormSchema.from_yaml(schema_file).get("nope") is None

    def test_empty_document(self) -> None:
        assert FormSchema.from_yaml_string("").fields == []

    @pytest.mark.parametrize(
        "content, message",
        [
            ("fields: 5", "must be a list"),
            ("fields:\n  - type: text", "missing 'id'"),
            ("fields:\n  - id: a", "missing 'type'"),
            ("fields:\n  - id: a\n    type: slider", "unknown type"),
            ("fields:\n  - plain", "must be a mapping"),
            ("- a\n- b", "must be a mapping"),
            ("fields: [", "Invalid schema"),
        ],
    )
    def test_malformed(self, content: str, message: str) -> None:
        with pytest.raises(SchemaError, match=message):
            FormSchema.from_yaml_string(content)


class TestComboboxBuilder:
    """Tests for turning combobox fields into configs."""

    def test_build_config(self, schema_file: Path) -> None:
        field = FormSchema.from_yaml(schema_file).get("fruit")

        config = build_combobox_config(field)

        assert isinstance(config, ComboboxConfig)
        assert config.id == "fruit"
        assert config.mode == "multi"
        assert config.max_selections == 2
        assert config.clearable is True
        assert config.placeholder == "Pick fruit"
        assert [o.label for o in config.options] == ["Apple", "Banana", "Cherry", "Quince"]

    def test_bad_mode_is_schema_error(self) -> None:
        field = FieldSchema.from_dict({"id": "f", "type": "combobox", "mode": "tags"})
        with pytest.raises(SchemaError, match="'f'"):
            build_combobox_config(field)

    def test_named_option_list_yields_nothing(self) -> None:
        field = FieldSchema.from_dict({"id": "f", "type": "combobox", "options": "countries"})
        assert field_options(field) == []

    def test_options_must_be_list(self) -> None:
        field = FieldSchema.from_dict({"id": "f", "type": "combobox", "options": 5})
        with pytest.raises(SchemaError):
            field_options(field)

    @pytest.mark.parametrize("default, expected", [(None, []), (3, [3]), ([1, 2], [1, 2])])
    def test_initial_values(self, default, expected) -> None:
        field = FieldSchema.from_dict({"id": "f", "type": "combobox", "default": default})
        assert initial_values(field) == expected


class TestFieldRegistry:
    def test_default_registry(self) -> None:
        registry = default_registry()

        assert registry.supports(FieldKind.COMBOBOX) is True
        assert registry.supports(FieldKind.DATE) is False
        assert registry.kinds() == [FieldKind.COMBOBOX]

    def test_missing_builder(self) -> None:
        field = FieldSchema.from_dict({"id": "when", "type": "date"})
        with pytest.raises(SchemaError, match="No builder"):
            FieldRegistry().build(field)

    def test_register_replaces(self) -> None:
        registry = default_registry()
        registry.register(FieldKind.COMBOBOX, lambda field: "custom")

        field = FieldSchema.from_dict({"id": "f", "type": "combobox"})

        assert registry.build(field) == "custom"


class TestRenderField:
    def test_render_combobox(self, schema_file: Path) -> None:
        field = FormSchema.from_yaml(schema_file).get("fruit")

        lines = [strip_ansi(line) for line in render_field(field, width=30)]

        assert lines[0] == "Fruit"
        assert lines[1].startswith("[Apple ×]")
        assert lines[1].endswith("× ▼")
        assert len(lines) == 2

    def test_render_required_with_description(self) -> None:
        field = FieldSchema.from_dict(
            {
                "id": "f",
                "type": "combobox",
                "label": "Colour",
                "required": True,
                "description": "Pick one",
                "options": ["Red"],
                "placeholder": "Choose",
            }
        )

        lines = [strip_ansi(line) for line in render_field(field, width=20)]

        assert lines[0] == "Colour *"
        assert lines[1].startswith("Choose")
        assert lines[2] == "Pick one"

    def test_render_unsupported_kind(self) -> None:
        field = FieldSchema.from_dict({"id": "name", "type": "text"})
        with pytest.raises(SchemaError):
            render_field(field)
