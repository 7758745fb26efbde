"""
Command-line interface for inspecting form schemas.
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from formkit.combobox import UNGROUPED, Combobox
from formkit.logging import setup_logging
from formkit.schema import (
    FieldSchema,
    FormSchema,
    SchemaError,
    build_combobox_config,
    default_registry,
    field_options,
    initial_values,
    render_field,
)

console = Console()


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="formkit form schema tools",
        prog="formkit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output (debug logging)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    fields_parser = subparsers.add_parser("fields", help="List the fields of a schema")
    fields_parser.add_argument("schema", help="Path to a YAML/JSON schema file")

    options_parser = subparsers.add_parser("options", help="Show a combobox field's options")
    options_parser.add_argument("schema", help="Path to a YAML/JSON schema file")
    options_parser.add_argument("field", help="Field id")
    options_parser.add_argument("-q", "--query", default="", help="Filter the options by this query")

    render_parser = subparsers.add_parser("render", help="Render a field as text")
    render_parser.add_argument("schema", help="Path to a YAML/JSON schema file")
    render_parser.add_argument("field", help="Field id")
    render_parser.add_argument("-w", "--width", type=int, default=60, help="Render width")

    args = parser.parse_args(argv)

    if args.verbose:
        setup_logging("DEBUG")
    else:
        setup_logging("WARNING")

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        schema = FormSchema.from_yaml(Path(args.schema))
        if args.command == "fields":
            cmd_fields(schema)
        elif args.command == "options":
            cmd_options(_require_field(schema, args.field), args.query)
        elif args.command == "render":
            cmd_render(_require_field(schema, args.field), args.width)
    except (SchemaError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


def _require_field(schema: FormSchema, field_id: str) -> FieldSchema:
    field = schema.get(field_id)
    if field is None:
        raise SchemaError(f"No field with id {field_id!r}")
    return field


def cmd_fields(schema: FormSchema) -> None:
    """Print a table of the schema's fields."""
    if not schema.fields:
        console.print("[yellow]No fields defined[/yellow]")
        return

    registry = default_registry()
    table = Table(title="Fields")
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("Label")
    table.add_column("Required")
    table.add_column("Options", justify="right")
    table.add_column("Interactive")

    for field in schema.fields:
        try:
            option_count = str(len(field_options(field)))
        except SchemaError:
            option_count = "?"
        table.add_row(
            field.id,
            field.kind.value,
            field.label,
            "✓" if field.required else "",
            option_count,
            "✓" if registry.supports(field.kind) else "",
        )

    console.print(table)


def cmd_options(field: FieldSchema, query: str) -> None:
    """Print a combobox field's options filtered by *query*, grouped as displayed."""
    # A disabled field still lists its options
    config = dataclasses.replace(build_combobox_config(field), disabled=False)
    combobox = Combobox(config, initial_values=initial_values(field))
    if query:
        combobox.query_changed(query)
    state = combobox.state
    no_options = combobox.config.no_options_message
    combobox.destroy()

    if not state.filtered_options:
        console.print(f"[yellow]{no_options}[/yellow]")
        return

    table = Table(title=f"{field.id} options" + (f" matching {query!r}" if query else ""))
    table.add_column("Group", style="cyan")
    table.add_column("Value")
    table.add_column("Label")
    table.add_column("Description")
    table.add_column("Selected")

    for group, options in state.grouped_options.items():
        for option in options:
            label = Text(option.label, style="dim strike" if option.disabled else "")
            table.add_row(
                group if group != UNGROUPED else "-",
                str(option.value),
                label,
                option.description or "",
                "✓" if state.is_selected(option.value) else "",
            )

    console.print(table)


def cmd_render(field: FieldSchema, width: int) -> None:
    """Print the closed-state text rendering of a field."""
    for line in render_field(field, width=width):
        console.print(Text.from_ansi(line))


if __name__ == "__main__":
    main()
