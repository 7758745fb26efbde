#!/usr/bin/env python3
"""
Combobox Demo

Drives a combobox the way a terminal front-end would: a local multi-select
over a YAML schema field, then a single-select backed by a slow async
search where only the latest query's answer is shown.

Usage:
    pip install -e .
    python examples/combobox_demo.py
"""

import asyncio
from pathlib import Path

from formkit import Combobox, ComboboxCallbacks, ComboboxConfig, ComboboxWidget, FormSchema
from formkit.schema import build_combobox_config, initial_values
from formkit.tui.keys import Key

CITIES = ["Amsterdam", "Antwerp", "Athens", "Berlin", "Bern", "Bratislava", "Brussels"]


def show(title: str, widget: ComboboxWidget) -> None:
    print(f"--- {title}")
    for line in widget.render(40):
        print(line)
    print()


def demo_local() -> None:
    """Local filtering, keyboard navigation and multi selection."""
    schema = FormSchema.from_yaml(Path(__file__).parent / "fruit_form.yaml")
    field = schema.get("fruit")
    box = Combobox(
        build_combobox_config(field),
        ComboboxCallbacks(on_change=lambda values, state: print(f"on_change -> {values}")),
        initial_values(field),
    )
    widget = ComboboxWidget(box, max_visible=5)
    widget.focused = True
    show("focused", widget)

    for data in (b"a", b"n"):
        widget.handle_bytes(data)
    show("typed 'an'", widget)

    # Arrow down and Enter as a terminal sends them
    widget.handle_bytes(b"\x1b[B")
    widget.handle_bytes(b"\r")
    show("selected highlighted option", widget)

    widget.handle_bytes(b"\x7f")
    show("backspace on empty query", widget)


async def search_cities(query: str, abort_signal: asyncio.Event) -> list[str]:
    # Shorter queries are slower, so their answers arrive out of order
    await asyncio.sleep(0.2 / len(query))
    return [c for c in CITIES if c.lower().startswith(query.lower())]


async def demo_async() -> None:
    """Debounced async search; stale answers are dropped."""
    box = Combobox(
        ComboboxConfig(
            id="city",
            load_options=search_cities,
            debounce_ms=50,
            min_search_length=2,
            placeholder="Search cities",
        )
    )
    widget = ComboboxWidget(box)
    widget.focused = True

    widget.handle_input(Key.from_name("b"))
    show("one character (below minimum length)", widget)

    widget.handle_input(Key.from_name("r"))
    show("loading", widget)

    await box.wait_for_load()
    show("results for 'br'", widget)

    widget.handle_input(Key.from_name("u"))
    await box.wait_for_load()
    show("results for 'bru'", widget)

    box.destroy()


def main() -> None:
    print("=" * 40)
    print("formkit combobox demo")
    print("=" * 40)
    demo_local()
    asyncio.run(demo_async())


if __name__ == "__main__":
    main()
