"""Table and JSON output."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def print_table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
    """Borderless table, one row per record."""
    table = Table(box=None, show_edge=False, pad_edge=False, header_style="bold")
    for header in headers:
        table.add_column(header, overflow="fold")
    for row in rows:
        table.add_row(*("" if cell is None else str(cell) for cell in row))
    console.print(table)


def print_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))


def display(headers: Sequence[str], rows: Sequence[Sequence[Any]], as_json: bool) -> None:
    """Render ``rows`` as a table, or as a list of objects keyed by header."""
    if as_json:
        print_json([dict(zip(headers, row)) for row in rows])
    else:
        print_table(headers, rows)


def print_error(message: str) -> None:
    err_console.print(f"[bold red]{escape(message)}[/bold red]", soft_wrap=True)
