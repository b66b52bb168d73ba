"""Properties command: show the remote database schema."""

from __future__ import annotations

import argparse

from rich.console import Console
from rich.table import Table

from todosync.contracts.config import FieldConfig


def build_properties_table(schema: dict[str, str], field_config: FieldConfig) -> Table:
    """Tabulate *schema*, flagging which properties todosync writes."""
    mapped = {name: field for field, name in field_config.model_dump().items()}
    table = Table(title="Database properties")
    table.add_column("Property")
    table.add_column("Type")
    table.add_column("Used for")
    for name in sorted(schema):
        table.add_row(name, schema[name], mapped.get(name, ""))
    for field, name in field_config.model_dump().items():
        if name not in schema:
            table.add_row(f"[red]{name}[/red]", "[red]missing[/red]", field)
    return table


async def run_properties(args: argparse.Namespace) -> dict[str, str]:
    import todosync.cli as cli

    config = cli.load_config(args.config)
    sdk = await cli.TodoSync.from_config(config)
    schema = await sdk.properties()

    Console().print(build_properties_table(schema, config.field_config))
    return schema


__all__ = ["build_properties_table", "run_properties"]
