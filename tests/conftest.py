"""Shared pytest fixtures for formkit tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from textwrap import dedent

import pytest

from formkit.combobox import Combobox, ComboboxCallbacks, ComboboxConfig, Option


@pytest.fixture
def fruit_options() -> list[Option]:
    """Apple / Banana (disabled) / Cherry, the classic fixture list."""
    return [
        Option(value=1, label="Apple"),
        Option(value=2, label="Banana", disabled=True),
        Option(value=3, label="Cherry"),
    ]


@pytest.fixture
def grouped_options() -> list[Option]:
    """Options spread across two groups with ungrouped entries interleaved."""
    return [
        Option(value="kale", label="Kale"),
        Option(value="pear", label="Pear", group="Fruit"),
        Option(value="leek", label="Leek", group="Vegetable"),
        Option(value="fig", label="Fig", group="Fruit", description="Sweet and seedy"),
        Option(value="salt", label="Salt"),
    ]


class CallbackRecorder:
    """Collects every callback invocation as ``(name, args)`` tuples."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple]] = []

    def _record(self, name: str) -> Callable[..., None]:
        def hook(*args) -> None:
            self.calls.append((name, args))

        return hook

    def callbacks(self) -> ComboboxCallbacks:
        return ComboboxCallbacks(
            on_change=self._record("change"),
            on_input_change=self._record("input"),
            on_open=self._record("open"),
            on_close=self._record("close"),
            on_highlight=self._record("highlight"),
            on_error=self._record("error"),
        )

    def named(self, name: str) -> list[tuple]:
        return [args for n, args in self.calls if n == name]


@pytest.fixture
def recorder() -> CallbackRecorder:
    return CallbackRecorder()


@pytest.fixture
def make_combobox(fruit_options: list[Option]) -> Callable[..., Combobox]:
    """Factory building a combobox over the fruit options by default."""

    def factory(
        mode: str = "single",
        options: list[Option] | None = None,
        callbacks: ComboboxCallbacks | None = None,
        initial_values: tuple = (),
        **config_kwargs,
    ) -> Combobox:
        config = ComboboxConfig(
            id="fruit",
            mode=mode,
            options=fruit_options if options is None else options,
            **config_kwargs,
        )
        return Combobox(config, callbacks, initial_values)

    return factory


def _delayed_loader(responses: dict[str, tuple[float, list]], calls: list[str] | None = None):
    """
    Build an async loader answering each query after its configured delay.

    *responses* maps query -> (delay_seconds, options).  Every invocation
    is appended to *calls* when given.
    """

    async def load(query: str, abort_signal: asyncio.Event) -> list:
        if calls is not None:
            calls.append(query)
        delay, options = responses.get(query, (0, []))
        await asyncio.sleep(delay)
        return options

    return load


@pytest.fixture
def delayed_loader():
    """Factory for async loaders with per-query delays (see ``_delayed_loader``)."""
    return _delayed_loader


@pytest.fixture
def schema_file(tmp_path: Path) -> Path:
    """A small form schema on disk."""
    path = tmp_path / "form.yaml"
    path.write_text(
        dedent(
            """
            fields:
              - id: name
                type: text
                label: Name
                required: true
              - id: fruit
                type: combobox
                label: Fruit
                mode: multi
                max_selections: 2
                clearable: true
                placeholder: Pick fruit
                default: [1]
                options:
                  - {value: 1, label: Apple, group: Pome}
                  - {value: 2, label: Banana, disabled: true}
                  - {value: 3, label: Cherry, group: Drupe, description: Small stone fruit}
                  - Quince
            """
        ).lstrip(),
        encoding="utf-8",
    )
    return path
