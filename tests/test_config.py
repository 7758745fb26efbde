"""Tests for configuration models."""

from pathlib import Path
from textwrap import dedent

import pytest

from formkit.combobox import ComboboxConfig, Option


class TestComboboxConfig:
    """Tests for ComboboxConfig."""

    def test_default_values(self) -> None:
        """Should have sensible defaults."""
        config = ComboboxConfig(id="fruit")

        assert config.mode == "single"
        assert config.options == []
        assert config.load_options is None
        assert config.debounce_ms == 300
        assert config.min_search_length == 0
        assert config.max_selections is None
        assert config.clearable is False
        assert config.disabled is False
        assert config.no_options_message == "No options found"
        assert config.loading_message == "Loading..."
        assert config.field_name == "fruit"
        assert config.is_async is False

    def test_options_are_coerced(self) -> None:
        """Strings, mappings and Option objects should all become Options."""
        config = ComboboxConfig(
            id="fruit",
            options=["Apple", {"value": 2, "label": "Banana"}, Option(value=3, label="Cherry")],
        )

        assert config.options == [
            Option(value="Apple", label="Apple"),
            Option(value=2, label="Banana"),
            Option(value=3, label="Cherry"),
        ]

    def test_unknown_mode(self) -> None:
        with pytest.raises(ValueError):
            ComboboxConfig(id="fruit", mode="many")

    def test_from_dict(self) -> None:
        """Should create config from a dictionary."""
        config = ComboboxConfig.from_dict(
            {
                "id": "city",
                "mode": "multi",
                "max_selections": 3,
                "min_search_length": 2,
                "name": "cities",
            }
        )

        assert config.mode == "multi"
        assert config.max_selections == 3
        assert config.min_search_length == 2
        assert config.field_name == "cities"

    def test_from_dict_with_callable_overrides(self) -> None:
        """Callables cannot come from a file and are passed as overrides."""

        async def load(query, abort_signal):
            return []

        config = ComboboxConfig.from_dict({"id": "city"}, load_options=load, debounce_ms=50)

        assert config.is_async is True
        assert config.debounce_ms == 50

    def test_from_yaml(self, tmp_path: Path) -> None:
        """Should load config from a YAML file."""
        path = tmp_path / "combobox.yaml"
        path.write_text(
            dedent(
                """
                id: fruit
                mode: multi
                clearable: true
                options:
                  - {value: 1, label: Apple, group: Pome}
                  - {value: 2, label: Banana, disabled: true}
                  - Cherry
                """
            )
        )

        config = ComboboxConfig.from_yaml(path)

        assert config.mode == "multi"
        assert config.clearable is True
        assert [o.label for o in config.options] == ["Apple", "Banana", "Cherry"]
        assert config.options[0].group == "Pome"
        assert config.options[1].disabled is True

    def test_from_yaml_string_json(self) -> None:
        """JSON is valid YAML."""
        config = ComboboxConfig.from_yaml_string('{"id": "x", "placeholder": "Search"}')

        assert config.placeholder == "Search"

    def test_to_dict_round_trips(self) -> None:
        config = ComboboxConfig(id="fruit", mode="multi", options=[Option(value=1, label="Apple", group="Pome")])

        data = config.to_dict()

        assert data["options"] == [{"value": 1, "label": "Apple", "group": "Pome"}]
        assert ComboboxConfig.from_dict(data) == config
